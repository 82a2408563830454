"""Plugin configuration -- feature flag and configured plugin roots."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ..config.settings import cfg
from ..errors import PluginConfigError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PluginConfig:
    path: Path
    enabled: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {"path": str(self.path), "enabled": self.enabled}


def _parse_plugin_entry(name: str, raw: Any, base_dir: Path) -> PluginConfig:
    if not isinstance(raw, dict):
        raise PluginConfigError(f"plugins.{name}: expected a table, got {type(raw).__name__}")
    path = raw.get("path")
    if not isinstance(path, str) or not path:
        raise PluginConfigError(f"plugins.{name}: missing 'path'")
    enabled = raw.get("enabled", True)
    if not isinstance(enabled, bool):
        raise PluginConfigError(f"plugins.{name}: 'enabled' must be a boolean")
    resolved = Path(path).expanduser()
    if not resolved.is_absolute():
        resolved = base_dir / resolved
    return PluginConfig(path=resolved, enabled=enabled)


class PluginConfigStore:
    """JSON-file-backed plugin configuration.

    Layout::

        {"features": {"plugins": true},
         "plugins": {"sample": {"path": "/abs/plugin", "enabled": true}}}
    """

    def __init__(self, path: Path | None = None) -> None:
        self._path = path or cfg.plugins_config_path
        self._data: dict[str, Any] = {}
        self._load()

    @property
    def path(self) -> Path:
        return self._path

    @property
    def plugins_enabled(self) -> bool:
        features = self._data.get("features")
        if not isinstance(features, dict):
            return False
        return features.get("plugins") is True

    def _load(self) -> None:
        if not self._path.exists():
            self._data = {}
            return
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError, UnicodeDecodeError) as exc:
            logger.warning("Failed to read plugin config %s: %s", self._path, exc)
            self._data = {}
            return
        if not isinstance(data, dict):
            logger.warning("Plugin config %s is not a JSON object; ignoring", self._path)
            data = {}
        self._data = data

    def reload(self) -> None:
        self._load()

    def _save(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(self._data, indent=2) + "\n", encoding="utf-8")

    def configured_plugins(self) -> dict[str, PluginConfig]:
        """Return every configured plugin; an invalid table yields ``{}``."""
        raw = self._data.get("plugins")
        if raw is None:
            return {}
        if not isinstance(raw, dict):
            logger.warning("invalid plugins config: expected an object of plugin tables")
            return {}
        try:
            base_dir = self._path.resolve().parent
            return {name: _parse_plugin_entry(name, entry, base_dir) for name, entry in raw.items()}
        except PluginConfigError as exc:
            logger.warning("invalid plugins config: %s", exc)
            return {}

    def set_feature(self, enabled: bool) -> None:
        features = self._data.setdefault("features", {})
        features["plugins"] = enabled
        self._save()

    def add(self, name: str, path: Path | str, *, enabled: bool = True) -> PluginConfig:
        entry = PluginConfig(path=Path(path).expanduser().resolve(), enabled=enabled)
        self._data.setdefault("plugins", {})[name] = entry.to_dict()
        self._save()
        return entry

    def set_enabled(self, name: str, enabled: bool) -> bool:
        plugins = self._data.get("plugins") or {}
        entry = plugins.get(name)
        if not isinstance(entry, dict):
            return False
        entry["enabled"] = enabled
        self._save()
        return True

    def remove(self, name: str) -> bool:
        plugins = self._data.get("plugins") or {}
        if name not in plugins:
            return False
        del plugins[name]
        self._save()
        return True
