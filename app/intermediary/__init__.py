"""Realtime backend prompt, plugin skills and MCP discovery for the intermediary."""

__version__ = "0.3.0"
