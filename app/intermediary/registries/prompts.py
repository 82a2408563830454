"""Prompt library -- bundled templates plus operator overrides."""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any

from ..config.settings import cfg
from ..errors import PromptError
from ..realtime.prompt import REALTIME_BACKEND_PROMPT_NAME, TEMPLATES_DIR, PromptDocument, read_prompt
from ..util.singletons import register_singleton

logger = logging.getLogger(__name__)


class PromptLibrary:
    """Resolves prompt names to documents.

    Files in the user prompts directory shadow bundled templates with the
    same stem. ``REALTIME_PROMPT_PATH`` shadows both for the realtime
    backend prompt. Documents are read once and served from memory until
    :meth:`refresh` is called.
    """

    def __init__(self, templates_dir: Path | None = None, user_dir: Path | None = None) -> None:
        self._templates_dir = templates_dir or TEMPLATES_DIR
        self._user_dir = user_dir or cfg.prompts_dir
        self._lock = threading.Lock()
        self._sources: dict[str, tuple[Path, str]] = {}
        self._cache: dict[str, PromptDocument] = {}
        self._discover()

    def _discover(self) -> None:
        sources: dict[str, tuple[Path, str]] = {}
        for origin, directory in (("bundled", self._templates_dir), ("override", self._user_dir)):
            if not directory.is_dir():
                continue
            for path in sorted(directory.glob("*.md")):
                sources[path.stem] = (path, origin)
        explicit = cfg.realtime_prompt_path
        if explicit is not None:
            sources[REALTIME_BACKEND_PROMPT_NAME] = (explicit, "override")
        with self._lock:
            self._sources = sources
            self._cache.clear()
        logger.info("Discovered %d prompt(s)", len(sources))

    def refresh(self) -> None:
        self._discover()

    def names(self) -> list[str]:
        return sorted(self._sources)

    def sources(self) -> list[tuple[str, Path, str]]:
        """Return ``(name, path, origin)`` for each discovered file, without fallback."""
        with self._lock:
            return [(name, *self._sources[name]) for name in sorted(self._sources)]

    def get(self, name: str) -> PromptDocument | None:
        with self._lock:
            cached = self._cache.get(name)
            if cached is not None:
                return cached
            entry = self._sources.get(name)
        if entry is None:
            return None
        doc = self._load(name, *entry)
        if doc is not None:
            with self._lock:
                doc = self._cache.setdefault(name, doc)
        return doc

    def require(self, name: str) -> PromptDocument:
        doc = self.get(name)
        if doc is None:
            entry = self._sources.get(name)
            if entry is None:
                raise PromptError(name, "no such prompt")
            raise PromptError(entry[0], "prompt is invalid and has no bundled fallback")
        return doc

    def list_prompts(self) -> list[dict[str, Any]]:
        result = []
        for name in self.names():
            doc = self.get(name)
            if doc is not None:
                result.append(doc.to_dict())
        return result

    def _load(self, name: str, path: Path, origin: str) -> PromptDocument | None:
        try:
            return read_prompt(path, name=name, origin=origin)
        except PromptError as exc:
            if origin == "bundled":
                logger.error("Bundled prompt %s is invalid: %s", name, exc)
                return None
            logger.warning("Ignoring prompt override %s: %s", name, exc)
        bundled = self._templates_dir / f"{name}.md"
        if not bundled.is_file():
            return None
        try:
            return read_prompt(bundled, name=name)
        except PromptError as exc:
            logger.error("Bundled prompt %s is invalid: %s", name, exc)
            return None


_library: PromptLibrary | None = None


def get_prompt_library() -> PromptLibrary:
    global _library
    if _library is None:
        _library = PromptLibrary()
    return _library


def _reset_prompt_library() -> None:
    global _library
    _library = None


register_singleton(_reset_prompt_library)
