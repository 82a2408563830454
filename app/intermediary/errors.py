"""Exception hierarchy for prompt and plugin loading."""

from __future__ import annotations

from pathlib import Path


class IntermediaryError(Exception):
    """Base class for errors raised by this package."""


class PromptError(IntermediaryError):
    """A prompt file is missing, unreadable, not UTF-8, or empty."""

    def __init__(self, path: Path | str, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"{self.path}: {reason}")


class PluginConfigError(IntermediaryError):
    """The plugin configuration file cannot be interpreted."""
