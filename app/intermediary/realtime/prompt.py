"""System prompt for the Realtime backend model."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ..errors import PromptError
from ..util.result import Result

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

REALTIME_BACKEND_PROMPT_NAME = "realtime_backend_prompt"

_BOM = "\ufeff"


@dataclass(frozen=True)
class PromptDocument:
    name: str
    text: str
    source: Path
    origin: str = "bundled"
    sha256: str = ""

    def to_dict(self, *, include_text: bool = False) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "source": str(self.source),
            "origin": self.origin,
            "sha256": self.sha256,
            "chars": len(self.text),
        }
        if include_text:
            data["text"] = self.text
        return data


def read_prompt(path: Path, *, name: str | None = None, origin: str = "bundled") -> PromptDocument:
    """Read a whole prompt file as text.

    Raises :class:`PromptError` if the file is missing, unreadable, not
    valid UTF-8, or has no non-whitespace content.
    """
    path = Path(path)
    if not path.is_file():
        raise PromptError(path, "file does not exist")
    try:
        raw = path.read_bytes()
    except OSError as exc:
        raise PromptError(path, f"cannot read file: {exc}") from exc
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise PromptError(path, f"not valid UTF-8 (byte {exc.start})") from exc
    if text.startswith(_BOM):
        text = text[len(_BOM):]
    if not text.strip():
        raise PromptError(path, "prompt is empty")
    return PromptDocument(
        name=name or path.stem,
        text=text,
        source=path,
        origin=origin,
        sha256=hashlib.sha256(raw).hexdigest(),
    )


def check_prompt(path: Path) -> Result:
    try:
        doc = read_prompt(path)
    except PromptError as exc:
        return Result.fail(str(exc), problems=[exc.reason])
    return Result.ok(f"{doc.source}: {len(doc.text)} chars, sha256 {doc.sha256[:12]}", value=doc)


def load_realtime_backend_prompt() -> str:
    """Return the realtime backend prompt as the prompt library resolves it.

    ``REALTIME_PROMPT_PATH`` wins over ``<data_dir>/prompts/``, which wins
    over the bundled file. An override that fails validation is logged and
    ignored.
    """
    from ..registries.prompts import get_prompt_library

    doc = get_prompt_library().get(REALTIME_BACKEND_PROMPT_NAME)
    if doc is None:
        return REALTIME_BACKEND_PROMPT
    return doc.text


REALTIME_BACKEND_PROMPT: str = read_prompt(TEMPLATES_DIR / f"{REALTIME_BACKEND_PROMPT_NAME}.md").text
