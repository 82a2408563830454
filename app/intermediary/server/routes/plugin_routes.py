"""Plugin API routes -- /api/plugins/*."""

from __future__ import annotations

import logging

from aiohttp import web

from ...realtime.instructions import skills_for_outcome
from ...registries.plugins import PluginsManager
from ...state.plugin_config import PluginConfigStore

logger = logging.getLogger(__name__)


class PluginRoutes:
    """REST handler for plugin load status."""

    def __init__(self, manager: PluginsManager, config_store: PluginConfigStore) -> None:
        self._manager = manager
        self._config = config_store

    def register(self, router: web.UrlDispatcher) -> None:
        router.add_get("/api/plugins", self._list)
        router.add_post("/api/plugins/reload", self._reload)
        router.add_get("/api/plugins/skills", self._skills)
        router.add_get("/api/plugins/mcp-servers", self._mcp_servers)

    async def _list(self, _req: web.Request) -> web.Response:
        outcome = self._manager.plugins_for_config(self._config)
        return web.json_response({
            "status": "ok",
            "feature_enabled": self._config.plugins_enabled,
            **outcome.to_dict(),
        })

    async def _reload(self, _req: web.Request) -> web.Response:
        self._config.reload()
        outcome = self._manager.plugins_for_config(self._config, force_reload=True)
        failed = [p.config_name for p in outcome.plugins if p.error]
        logger.info("Plugins reloaded: %d loaded, %d failed", len(outcome.plugins), len(failed))
        return web.json_response({
            "status": "ok",
            "message": f"Reloaded {len(outcome.plugins)} plugin(s)",
            "failed": failed,
        })

    async def _skills(self, _req: web.Request) -> web.Response:
        outcome = self._manager.plugins_for_config(self._config)
        skills = skills_for_outcome(outcome)
        return web.json_response({"status": "ok", "skills": [s.to_dict() for s in skills]})

    async def _mcp_servers(self, _req: web.Request) -> web.Response:
        outcome = self._manager.plugins_for_config(self._config)
        servers = outcome.effective_mcp_servers()
        return web.json_response({
            "status": "ok",
            "mcp_servers": {name: cfg.to_dict() for name, cfg in sorted(servers.items())},
        })
