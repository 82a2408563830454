"""Server route handlers."""

from __future__ import annotations

from .plugin_routes import PluginRoutes
from .prompt_routes import PromptRoutes

__all__ = [
    "PluginRoutes",
    "PromptRoutes",
]
