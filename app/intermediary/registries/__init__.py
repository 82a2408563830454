"""Prompt, plugin, and skill registries."""

__all__ = [
    "LoadedPlugin",
    "McpServerConfig",
    "PluginLoadOutcome",
    "PluginsManager",
    "PromptLibrary",
    "SkillInfo",
    "get_plugins_manager",
    "get_prompt_library",
]
