"""Minimal ``.env`` reader/writer used by the settings layer."""

from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1]
    return value


class EnvFile:
    """Key/value pairs persisted as ``KEY=value`` lines.

    Comment lines and blank lines are ignored on read and dropped on write.
    Writing an empty value removes the key.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def read_all(self) -> dict[str, str]:
        if not self._path.is_file():
            return {}
        values: dict[str, str] = {}
        try:
            lines = self._path.read_text(encoding="utf-8").splitlines()
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Cannot read env file %s: %s", self._path, exc)
            return {}
        for line in lines:
            stripped = line.strip()
            if not stripped or stripped.startswith("#") or "=" not in stripped:
                continue
            key, _, value = stripped.partition("=")
            key = key.strip()
            if key.startswith("export "):
                key = key[len("export "):].strip()
            values[key] = _unquote(value.strip())
        return values

    def read(self, key: str) -> str:
        return self.read_all().get(key, "")

    def write(self, **kwargs: str) -> None:
        values = self.read_all()
        for key, value in kwargs.items():
            if value:
                values[key] = value
            else:
                values.pop(key, None)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        body = "".join(f"{k}={self._quote(v)}\n" for k, v in values.items())
        self._path.write_text(body, encoding="utf-8")

    @staticmethod
    def _quote(value: str) -> str:
        if any(ch.isspace() for ch in value) or "#" in value:
            return f'"{value}"'
        return value
