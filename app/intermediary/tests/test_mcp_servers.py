"""Tests for plugin MCP server parsing and normalization."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from app.intermediary.registries.mcp_servers import (
    McpServerConfig,
    StdioTransport,
    StreamableHttpTransport,
    load_mcp_servers_from_file,
    normalize_plugin_mcp_server,
)


class TestMcpServerConfig:
    def test_url_selects_streamable_http(self) -> None:
        config = McpServerConfig.from_mapping({"url": "https://sample.example/mcp"})
        assert config.transport == StreamableHttpTransport(url="https://sample.example/mcp")
        assert config.enabled is True
        assert config.required is False
        assert config.startup_timeout_sec is None
        assert config.enabled_tools is None

    def test_command_selects_stdio(self) -> None:
        config = McpServerConfig.from_mapping({
            "command": "node",
            "args": ["server.js"],
            "env": {"TOKEN": "x"},
            "tool_timeout_sec": 30,
            "enabled_tools": ["echo"],
        })
        assert isinstance(config.transport, StdioTransport)
        assert config.transport.args == ["server.js"]
        assert config.transport.env == {"TOKEN": "x"}
        assert config.tool_timeout_sec == 30
        assert config.enabled_tools == ["echo"]

    def test_both_command_and_url(self) -> None:
        with pytest.raises(ValueError, match="both"):
            McpServerConfig.from_mapping({"command": "x", "url": "https://y"})

    def test_neither_command_nor_url(self) -> None:
        with pytest.raises(ValueError, match="neither"):
            McpServerConfig.from_mapping({"enabled": True})

    def test_fields_from_other_transport(self) -> None:
        with pytest.raises(ValueError, match="bearer_token_env_var"):
            McpServerConfig.from_mapping({"command": "x", "bearer_token_env_var": "TOKEN"})

    def test_wrong_field_type(self) -> None:
        with pytest.raises(ValueError):
            McpServerConfig.from_mapping({"command": "x", "args": "not-a-list"})

    def test_to_dict_omits_unset(self) -> None:
        data = McpServerConfig.from_mapping({"url": "https://u"}).to_dict()
        assert data["transport"] == {"type": "streamable_http", "url": "https://u"}
        assert "disabled_reason" not in data


class TestNormalize:
    def test_non_object_becomes_empty(self, tmp_path: Path) -> None:
        assert normalize_plugin_mcp_server(tmp_path, ["x"]) == {}
        assert normalize_plugin_mcp_server(tmp_path, "x") == {}

    def test_strips_type_and_oauth(self, tmp_path: Path, caplog) -> None:
        with caplog.at_level("WARNING"):
            out = normalize_plugin_mcp_server(tmp_path, {
                "type": "http",
                "url": "https://sample.example/mcp",
                "oauth": {"clientId": "client-id", "callbackPort": 3118},
            })
        assert out == {"url": "https://sample.example/mcp"}
        assert "callbackPort is ignored" in caplog.text
        assert "unknown transport" not in caplog.text

    def test_oauth_without_callback_port_is_silent(self, tmp_path: Path, caplog) -> None:
        with caplog.at_level("WARNING"):
            normalize_plugin_mcp_server(tmp_path, {"url": "u", "oauth": {"clientId": "c"}})
        assert caplog.text == ""

    def test_unknown_transport_warns(self, tmp_path: Path, caplog) -> None:
        with caplog.at_level("WARNING"):
            out = normalize_plugin_mcp_server(tmp_path, {"type": "sse", "url": "u"})
        assert "type" not in out
        assert "unknown transport type" in caplog.text

    def test_relative_cwd_resolved_against_plugin_root(self, tmp_path: Path) -> None:
        out = normalize_plugin_mcp_server(tmp_path, {"command": "x", "cwd": "bin"})
        assert out["cwd"] == str(tmp_path / "bin")

    def test_absolute_cwd_untouched(self, tmp_path: Path) -> None:
        out = normalize_plugin_mcp_server(tmp_path, {"command": "x", "cwd": "/srv"})
        assert out["cwd"] == "/srv"


class TestLoadFromFile:
    def test_loads_servers(self, tmp_path: Path) -> None:
        p = tmp_path / ".mcp.json"
        p.write_text(json.dumps({
            "mcpServers": {
                "web": {"type": "http", "url": "https://sample.example/mcp"},
                "local": {"command": "./run.sh", "cwd": "tools"},
            }
        }))
        servers = load_mcp_servers_from_file(tmp_path, p)
        assert set(servers) == {"web", "local"}
        assert servers["local"].transport.cwd == str(tmp_path / "tools")

    def test_missing_file(self, tmp_path: Path) -> None:
        assert load_mcp_servers_from_file(tmp_path, tmp_path / ".mcp.json") == {}

    def test_bad_json(self, tmp_path: Path, caplog) -> None:
        p = tmp_path / ".mcp.json"
        p.write_text("{")
        with caplog.at_level("WARNING"):
            assert load_mcp_servers_from_file(tmp_path, p) == {}
        assert "Failed to parse plugin MCP config" in caplog.text

    def test_no_servers_key(self, tmp_path: Path) -> None:
        p = tmp_path / ".mcp.json"
        p.write_text("{}")
        assert load_mcp_servers_from_file(tmp_path, p) == {}

    def test_invalid_server_skipped(self, tmp_path: Path, caplog) -> None:
        p = tmp_path / ".mcp.json"
        p.write_text(json.dumps({
            "mcpServers": {
                "ok": {"url": "https://ok"},
                "broken": {"enabled": True},
            }
        }))
        with caplog.at_level("WARNING"):
            servers = load_mcp_servers_from_file(tmp_path, p)
        assert list(servers) == ["ok"]
        assert "'broken'" in caplog.text
