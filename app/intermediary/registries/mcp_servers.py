"""MCP server definitions contributed by plugins (``.mcp.json``)."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

_KNOWN_TRANSPORT_TYPES = frozenset({"http", "streamable_http", "streamable-http", "stdio"})


class StdioTransport(BaseModel):
    model_config = ConfigDict(extra="forbid")

    type: Literal["stdio"] = "stdio"
    command: str = Field(description="Executable that speaks MCP over stdin/stdout")
    args: list[str] = Field(default_factory=list)
    env: dict[str, str] | None = None
    env_vars: list[str] = Field(default_factory=list)
    cwd: str | None = None


class StreamableHttpTransport(BaseModel):
    model_config = ConfigDict(extra="forbid")

    type: Literal["streamable_http"] = "streamable_http"
    url: str = Field(description="Streamable HTTP endpoint of the server")
    bearer_token_env_var: str | None = None
    http_headers: dict[str, str] | None = None
    env_http_headers: dict[str, str] | None = None


_STDIO_FIELDS = frozenset(StdioTransport.model_fields) - {"type"}
_HTTP_FIELDS = frozenset(StreamableHttpTransport.model_fields) - {"type"}


class McpServerConfig(BaseModel):
    model_config = ConfigDict(extra="ignore")

    transport: StdioTransport | StreamableHttpTransport = Field(discriminator="type")
    enabled: bool = True
    required: bool = False
    disabled_reason: str | None = None
    startup_timeout_sec: float | None = None
    tool_timeout_sec: float | None = None
    enabled_tools: list[str] | None = None
    disabled_tools: list[str] | None = None
    scopes: list[str] | None = None
    oauth_resource: str | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> McpServerConfig:
        """Build a config from the flat ``.mcp.json`` shape.

        ``command`` selects the stdio transport and ``url`` selects
        streamable HTTP.  Raises ``ValueError`` (pydantic's
        ``ValidationError`` included) when the shape is ambiguous or invalid.
        """
        data = dict(data)
        has_command = "command" in data
        has_url = "url" in data
        if has_command and has_url:
            raise ValueError("server defines both 'command' and 'url'")
        if not has_command and not has_url:
            raise ValueError("server defines neither 'command' nor 'url'")

        own, foreign, kind = (
            (_STDIO_FIELDS, _HTTP_FIELDS, "stdio") if has_command
            else (_HTTP_FIELDS, _STDIO_FIELDS, "streamable_http")
        )
        stray = sorted(foreign & data.keys())
        if stray:
            raise ValueError(f"{', '.join(stray)} not valid for {kind} transport")

        transport: dict[str, Any] = {"type": kind}
        for key in own & data.keys():
            transport[key] = data.pop(key)
        data["transport"] = transport
        return cls.model_validate(data)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


def normalize_plugin_mcp_server(plugin_root: Path, value: Any) -> dict[str, Any]:
    """Strip plugin-only keys and anchor a relative ``cwd`` at *plugin_root*."""
    if not isinstance(value, dict):
        return {}
    obj = dict(value)

    transport_type = obj.pop("type", None)
    if isinstance(transport_type, str) and transport_type not in _KNOWN_TRANSPORT_TYPES:
        logger.warning(
            "Plugin %s: MCP server uses an unknown transport type %r", plugin_root, transport_type,
        )

    oauth = obj.pop("oauth", None)
    if isinstance(oauth, dict) and "callbackPort" in oauth:
        logger.warning(
            "Plugin %s: MCP server OAuth callbackPort is ignored; "
            "the global MCP OAuth callback settings apply",
            plugin_root,
        )

    cwd = obj.get("cwd")
    if isinstance(cwd, str) and not Path(cwd).is_absolute():
        obj["cwd"] = str(plugin_root / cwd)

    return obj


def load_mcp_servers_from_file(plugin_root: Path, config_path: Path) -> dict[str, McpServerConfig]:
    try:
        contents = config_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return {}
    try:
        parsed = json.loads(contents)
    except json.JSONDecodeError as exc:
        logger.warning("Failed to parse plugin MCP config %s: %s", config_path, exc)
        return {}

    raw_servers = parsed.get("mcpServers", {}) if isinstance(parsed, dict) else None
    if not isinstance(raw_servers, dict):
        logger.warning("Failed to parse plugin MCP config %s: 'mcpServers' must be an object", config_path)
        return {}

    servers: dict[str, McpServerConfig] = {}
    for name, raw in raw_servers.items():
        normalized = normalize_plugin_mcp_server(plugin_root, raw)
        try:
            servers[name] = McpServerConfig.from_mapping(normalized)
        except ValueError as exc:
            logger.warning(
                "Plugin %s: failed to parse MCP server %r from %s: %s",
                plugin_root, name, config_path, exc,
            )
    return servers
