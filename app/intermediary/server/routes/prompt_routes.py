"""Prompt API routes -- /api/prompts/* and /api/instructions."""

from __future__ import annotations

import logging

from aiohttp import web

from ...realtime.instructions import build_backend_instructions, skills_for_outcome
from ...realtime.prompt import REALTIME_BACKEND_PROMPT_NAME
from ...registries.plugins import PluginsManager
from ...registries.prompts import PromptLibrary
from ...state.plugin_config import PluginConfigStore

logger = logging.getLogger(__name__)


class PromptRoutes:
    """Read-only access to prompt documents and the assembled instructions."""

    def __init__(
        self,
        library: PromptLibrary,
        manager: PluginsManager,
        config_store: PluginConfigStore,
    ) -> None:
        self._library = library
        self._manager = manager
        self._config = config_store

    def register(self, router: web.UrlDispatcher) -> None:
        router.add_get("/api/prompts", self._list)
        router.add_get("/api/prompts/{name}", self._get)
        router.add_get("/api/instructions", self._instructions)

    async def _list(self, _req: web.Request) -> web.Response:
        return web.json_response({"status": "ok", "prompts": self._library.list_prompts()})

    async def _get(self, req: web.Request) -> web.Response:
        name = req.match_info["name"]
        doc = self._library.get(name)
        if doc is None:
            return web.json_response(
                {"status": "error", "message": f"Prompt '{name}' not found"}, status=404
            )
        if req.query.get("raw") in ("1", "true", "yes"):
            return web.Response(text=doc.text, content_type="text/markdown", charset="utf-8")
        return web.json_response({"status": "ok", "prompt": doc.to_dict(include_text=True)})

    async def _instructions(self, _req: web.Request) -> web.Response:
        base = self._library.get(REALTIME_BACKEND_PROMPT_NAME)
        if base is None:
            logger.error("Realtime backend prompt unavailable")
            return web.json_response(
                {"status": "error", "message": "Realtime backend prompt unavailable"}, status=500
            )
        outcome = self._manager.plugins_for_config(self._config)
        skills = skills_for_outcome(outcome)
        return web.json_response({
            "status": "ok",
            "prompt_sha256": base.sha256,
            "skill_count": len(skills),
            "instructions": build_backend_instructions(base.text, skills),
        })
