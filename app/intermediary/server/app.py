"""Admin server -- app factory and entry point."""

from __future__ import annotations

import logging

from aiohttp import web
from aiohttp.abc import AbstractAccessLogger

from .. import __version__
from ..config.settings import cfg
from ..registries.plugins import get_plugins_manager
from ..registries.prompts import get_prompt_library
from ..state.plugin_config import PluginConfigStore
from .routes.plugin_routes import PluginRoutes
from .routes.prompt_routes import PromptRoutes

logger = logging.getLogger(__name__)

_QUIET_PATHS = frozenset({"/health"})


class QuietAccessLogger(AbstractAccessLogger):
    """Demotes polling-endpoint log entries to DEBUG."""

    def log(self, request: web.BaseRequest, response: web.StreamResponse, time: float) -> None:
        level = logging.DEBUG if request.path in _QUIET_PATHS else logging.INFO
        self.logger.log(
            level,
            "%s %s %s %s %.3fs",
            request.remote,
            request.method,
            request.path,
            response.status,
            time,
        )


@web.middleware
async def auth_middleware(request: web.Request, handler):  # type: ignore[type-arg]
    secret = cfg.admin_secret
    if not secret or not request.path.startswith("/api/"):
        return await handler(request)
    if request.headers.get("Authorization", "") == f"Bearer {secret}":
        return await handler(request)
    return web.json_response(
        {"status": "unauthorized", "message": "Invalid or missing admin secret"},
        status=401,
    )


async def _health(_req: web.Request) -> web.Response:
    library = get_prompt_library()
    return web.json_response({
        "status": "ok",
        "version": __version__,
        "prompts": len(library.names()),
    })


def create_app(
    config_store: PluginConfigStore | None = None,
) -> web.Application:
    cfg.ensure_dirs()
    store = config_store or PluginConfigStore()
    library = get_prompt_library()
    manager = get_plugins_manager()

    app = web.Application(middlewares=[auth_middleware])
    app.router.add_get("/health", _health)
    PromptRoutes(library, manager, store).register(app.router)
    PluginRoutes(manager, store).register(app.router)
    logger.info("Admin app ready: %d prompt(s)", len(library.names()))
    return app


def main() -> None:
    cfg.configure_logging()
    port = cfg.admin_port
    logger.info("Starting admin server on port %d ...", port)
    if not cfg.admin_secret:
        logger.warning("ADMIN_SECRET is not set; /api/* is unauthenticated")
    web.run_app(create_app(), host="0.0.0.0", port=port, access_log_class=QuietAccessLogger)


if __name__ == "__main__":
    main()
