"""Reset hooks for module-level singletons (settings, registries, caches)."""

from __future__ import annotations

from collections.abc import Callable

_reset_fns: list[Callable[[], None]] = []


def register_singleton(reset_fn: Callable[[], None]) -> None:
    """Register *reset_fn*; registering the same function twice is a no-op."""
    if reset_fn not in _reset_fns:
        _reset_fns.append(reset_fn)


def reset_all_singletons() -> None:
    """Drop every cached singleton, newest first.

    Registries are registered after the settings they read, so resetting
    in reverse lets them rebuild against a fresh ``cfg``.
    """
    for fn in reversed(_reset_fns):
        fn()
