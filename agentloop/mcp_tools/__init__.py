"""
MCP Tools
=========

Bridges tools hosted on a Model Context Protocol server into the local
tool registry.

This module provides:
- MCPClient: The four server operations the agent needs
- MCPToolAdapter: A remote tool exposed as a local Tool
- MCPToolDiscovery: Finds and registers remote tools before a run
"""

from agentloop.mcp_tools.adapter import MCPToolAdapter, from_local_schema, to_local_schema
from agentloop.mcp_tools.client import (
    MCPClient,
    MCPClientError,
    RemoteToolDescriptor,
    RemoteToolResult,
    ServerInfo,
)
from agentloop.mcp_tools.discovery import MCPToolDiscovery

__all__ = [
    "MCPClient",
    "MCPClientError",
    "ServerInfo",
    "RemoteToolDescriptor",
    "RemoteToolResult",
    "MCPToolAdapter",
    "MCPToolDiscovery",
    "to_local_schema",
    "from_local_schema",
]
