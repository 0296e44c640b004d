"""
MCP Tool Adapter
================

Makes a tool hosted on an MCP server look like any local Tool.

The adapter passes name and description through, re-encodes the
server's input schema into plain JSON types, and turns a remote call's
outcome into a ToolResult:

    is_error=True   ->  ToolError(first text block, or "Unknown error")
    is_error=False  ->  ToolSuccess(text blocks joined by newlines)
"""

import json
from typing import Any

from agentloop.mcp_tools.client import MCPClient, MCPClientError, RemoteToolDescriptor
from agentloop.tools import Tool, ToolError, ToolResult, ToolSuccess
from agentloop.utils.logger import Logger

logger = Logger("MCPAdapter")


def to_local_schema(input_schema: Any) -> dict[str, Any]:
    """
    Re-encode a remote input schema as a plain JSON object.

    The structure is kept as is: only the representation changes (tuples
    become lists, mappings become dicts), and the result shares no
    objects with the input.

    Raises:
        ValueError: If the schema isn't a JSON object or isn't JSON-encodable
    """
    try:
        local = json.loads(json.dumps(input_schema))
    except (TypeError, ValueError) as e:
        raise ValueError(f"Input schema is not JSON-encodable: {e}") from e

    if not isinstance(local, dict):
        raise ValueError("Input schema must be a JSON object")
    return local


def from_local_schema(parameters: dict[str, Any]) -> dict[str, Any]:
    """Inverse of to_local_schema; produces the server's representation."""
    return json.loads(json.dumps(parameters))


class MCPToolAdapter(Tool):
    """
    A Tool backed by a remote MCP tool.

    Example:
        for descriptor in await client.list_tools():
            registry.register(MCPToolAdapter(client, descriptor))
    """

    def __init__(self, client: MCPClient, descriptor: RemoteToolDescriptor):
        self.client = client
        self.descriptor = descriptor

        self.name = descriptor.name
        self.description = descriptor.description or ""
        self.parameters = to_local_schema(descriptor.input_schema)

    async def execute(self, args: dict[str, Any]) -> ToolResult:
        try:
            result = await self.client.call_tool(self.name, args)
        except MCPClientError as e:
            return ToolError(f"MCP error: {e}")
        except Exception as e:
            logger.error(f"Remote tool failed: {self.name}", e)
            return ToolError(f"Failed to execute tool '{self.name}': {e}")

        if result.is_error:
            return ToolError(result.texts[0] if result.texts else "Unknown error")

        return ToolSuccess("\n".join(result.texts))
