"""Plugin loading -- manifests, skill roots, and MCP servers per plugin root."""

from __future__ import annotations

import json
import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ..state.plugin_config import PluginConfig, PluginConfigStore
from ..util.singletons import register_singleton
from .mcp_servers import McpServerConfig, load_mcp_servers_from_file

logger = logging.getLogger(__name__)

PLUGIN_MANIFEST_PATH = Path(".codex-plugin") / "plugin.json"
DEFAULT_SKILLS_DIR_NAME = "skills"
DEFAULT_MCP_CONFIG_FILE = ".mcp.json"


@dataclass
class LoadedPlugin:
    config_name: str
    root: Path
    enabled: bool
    manifest_name: str | None = None
    skill_roots: list[Path] = field(default_factory=list)
    mcp_servers: dict[str, McpServerConfig] = field(default_factory=dict)
    error: str | None = None

    @property
    def is_active(self) -> bool:
        return self.enabled and self.error is None

    def to_dict(self) -> dict[str, Any]:
        return {
            "config_name": self.config_name,
            "manifest_name": self.manifest_name,
            "root": str(self.root),
            "enabled": self.enabled,
            "active": self.is_active,
            "skill_roots": [str(p) for p in self.skill_roots],
            "mcp_servers": sorted(self.mcp_servers),
            "error": self.error,
        }


@dataclass
class PluginLoadOutcome:
    plugins: list[LoadedPlugin] = field(default_factory=list)

    def effective_skill_roots(self) -> list[Path]:
        roots = {root for p in self.plugins if p.is_active for root in p.skill_roots}
        return sorted(roots)

    def effective_mcp_servers(self) -> dict[str, McpServerConfig]:
        servers: dict[str, McpServerConfig] = {}
        for plugin in self.plugins:
            if not plugin.is_active:
                continue
            for name, config in plugin.mcp_servers.items():
                servers.setdefault(name, config)
        return servers

    def to_dict(self) -> dict[str, Any]:
        return {
            "plugins": [p.to_dict() for p in self.plugins],
            "skill_roots": [str(p) for p in self.effective_skill_roots()],
            "mcp_servers": {
                name: config.to_dict() for name, config in self.effective_mcp_servers().items()
            },
        }


def load_plugin_manifest(plugin_root: Path) -> dict[str, Any] | None:
    manifest_path = plugin_root / PLUGIN_MANIFEST_PATH
    if not manifest_path.is_file():
        return None
    try:
        raw = json.loads(manifest_path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError):
        return None
    except json.JSONDecodeError as exc:
        logger.warning("Failed to parse plugin manifest %s: %s", manifest_path, exc)
        return None
    if not isinstance(raw, dict) or not isinstance(raw.get("name"), str):
        logger.warning("Failed to parse plugin manifest %s: 'name' must be a string", manifest_path)
        return None
    return raw


def plugin_manifest_name(manifest: dict[str, Any], plugin_root: Path) -> str:
    name = manifest.get("name", "")
    if name.strip():
        return name
    return plugin_root.name or name


def default_skill_roots(plugin_root: Path) -> list[Path]:
    skills_dir = plugin_root / DEFAULT_SKILLS_DIR_NAME
    return [skills_dir] if skills_dir.is_dir() else []


def default_mcp_config_paths(plugin_root: Path) -> list[Path]:
    default_path = plugin_root / DEFAULT_MCP_CONFIG_FILE
    return [default_path] if default_path.is_file() else []


def load_plugin(config_name: str, config: PluginConfig) -> LoadedPlugin:
    plugin = LoadedPlugin(config_name=config_name, root=config.path, enabled=config.enabled)
    if not config.enabled:
        return plugin

    root = config.path
    if not root.is_dir():
        plugin.error = "path does not exist or is not a directory"
        return plugin

    manifest = load_plugin_manifest(root)
    if manifest is None:
        plugin.error = f"missing or invalid {PLUGIN_MANIFEST_PATH.as_posix()}"
        return plugin

    plugin.manifest_name = plugin_manifest_name(manifest, root)
    plugin.skill_roots = default_skill_roots(root)
    for mcp_path in default_mcp_config_paths(root):
        for name, server in load_mcp_servers_from_file(root, mcp_path).items():
            if name in plugin.mcp_servers:
                logger.warning(
                    "Plugin %s: %s overwrote an earlier MCP server definition %r",
                    root, mcp_path, name,
                )
            plugin.mcp_servers[name] = server
    return plugin


def load_plugins(configured: dict[str, PluginConfig]) -> PluginLoadOutcome:
    plugins: list[LoadedPlugin] = []
    seen_servers: dict[str, str] = {}
    for config_name in sorted(configured):
        loaded = load_plugin(config_name, configured[config_name])
        for server in loaded.mcp_servers:
            previous = seen_servers.setdefault(server, config_name)
            if previous != config_name:
                logger.warning(
                    "Skipping duplicate plugin MCP server %r from %s (already provided by %s)",
                    server, config_name, previous,
                )
        plugins.append(loaded)
    return PluginLoadOutcome(plugins=plugins)


def plugin_namespace_for_skill_path(path: Path) -> str | None:
    """Return the manifest name of the nearest plugin enclosing *path*."""
    for ancestor in (path, *path.parents):
        manifest = load_plugin_manifest(ancestor)
        if manifest is not None:
            return plugin_manifest_name(manifest, ancestor)
    return None


def _log_load_errors(outcome: PluginLoadOutcome) -> None:
    for plugin in outcome.plugins:
        if plugin.error:
            logger.warning("Failed to load plugin %s (%s): %s", plugin.config_name, plugin.root, plugin.error)


class PluginsManager:
    """Caches plugin load outcomes per working directory."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._cache_by_cwd: dict[Path, PluginLoadOutcome] = {}

    def plugins_for_config(
        self,
        store: PluginConfigStore,
        cwd: Path | None = None,
        *,
        force_reload: bool = False,
    ) -> PluginLoadOutcome:
        key = (cwd or Path.cwd()).resolve()
        if not store.plugins_enabled:
            with self._lock:
                self._cache_by_cwd.pop(key, None)
            return PluginLoadOutcome()

        if not force_reload:
            with self._lock:
                cached = self._cache_by_cwd.get(key)
            if cached is not None:
                return cached

        outcome = load_plugins(store.configured_plugins())
        _log_load_errors(outcome)
        with self._lock:
            self._cache_by_cwd[key] = outcome
        logger.info(
            "Loaded %d plugin(s), %d active",
            len(outcome.plugins), sum(1 for p in outcome.plugins if p.is_active),
        )
        return outcome

    def clear_cache(self) -> None:
        with self._lock:
            self._cache_by_cwd.clear()


_manager: PluginsManager | None = None


def get_plugins_manager() -> PluginsManager:
    global _manager
    if _manager is None:
        _manager = PluginsManager()
    return _manager


def _reset_plugins_manager() -> None:
    global _manager
    _manager = None


register_singleton(_reset_plugins_manager)
