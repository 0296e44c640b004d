"""
MCP Client
==========

Client for a remote tool server speaking the Model Context Protocol over
streamable HTTP.

The agent only needs four operations from the server:
- is_server_available: Cheap liveness probe
- initialize: Handshake; returns server identity and protocol version
- list_tools: Tool descriptors (name, description, input schema)
- call_tool: Run a tool and get its content blocks back

Each operation opens its own short-lived session. Any transport or
protocol failure is raised as MCPClientError. Nothing is retried.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any

import httpx
from mcp.client.session import ClientSession
from mcp.client.streamable_http import streamable_http_client

from agentloop.utils.logger import Logger

logger = Logger("MCPClient")


class MCPClientError(Exception):
    """MCP client error."""


@dataclass(frozen=True)
class ServerInfo:
    """Identity reported by the server during the handshake."""
    name: str
    version: str
    protocol_version: str


@dataclass(frozen=True)
class RemoteToolDescriptor:
    """
    A tool as the server describes it.

    Attributes:
        name: Tool name
        description: What the tool does (may be empty)
        input_schema: JSON Schema in the server's own representation
    """
    name: str
    description: str
    input_schema: dict[str, Any]


@dataclass(frozen=True)
class RemoteToolResult:
    """
    Outcome of a remote tool call.

    Attributes:
        is_error: Whether the server flagged the call as failed
        texts: Text of each text content block, in order
    """
    is_error: bool
    texts: list[str] = field(default_factory=list)


class MCPClient:
    """
    MCP client for streamable HTTP servers.

    Example:
        client = MCPClient("http://localhost:8080/mcp")

        if await client.is_server_available():
            info = await client.initialize()
            tools = await client.list_tools()
            result = await client.call_tool("git_status", {"repo_path": "/repo"})
    """

    def __init__(
        self,
        server_url: str,
        headers: dict[str, str] | None = None,
        timeout: float = 30.0,
        read_timeout: float = 60.0,
    ) -> None:
        """
        Initialize the MCP client.

        Args:
            server_url: URL of the MCP server endpoint
            headers: Optional HTTP headers sent with every request
            timeout: Connect/write timeout in seconds
            read_timeout: Read timeout in seconds
        """
        self.server_url = server_url
        self._headers = headers or {}
        self.timeout = timeout
        self.read_timeout = read_timeout

    def __repr__(self) -> str:
        headers_repr = "<obfuscated>" if self._headers else "None"
        return (
            f"MCPClient(server_url={self.server_url!r}, "
            f"headers={headers_repr}, timeout={self.timeout})"
        )

    def _http_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            headers=self._headers,
            timeout=httpx.Timeout(
                connect=self.timeout,
                read=self.read_timeout,
                write=self.timeout,
                pool=self.timeout,
            ),
        )

    @asynccontextmanager
    async def _connect(self) -> AsyncGenerator[ClientSession, None]:
        """Open a session without performing the handshake."""
        async with self._http_client() as http_client:
            async with streamable_http_client(
                url=self.server_url,
                http_client=http_client,
            ) as (read_stream, write_stream, _):
                async with ClientSession(
                    read_stream,
                    write_stream,
                    read_timeout_seconds=timedelta(seconds=self.read_timeout),
                ) as session:
                    yield session

    @asynccontextmanager
    async def _session(self) -> AsyncGenerator[ClientSession, None]:
        """Open a session and complete the handshake."""
        async with self._connect() as session:
            await session.initialize()
            yield session

    async def is_server_available(self) -> bool:
        """
        Check whether the server answers HTTP at all.

        Any response below 500 counts; streamable HTTP endpoints commonly
        answer a bare GET with 405 or 406.

        Returns:
            True if the server is reachable, False otherwise
        """
        try:
            async with self._http_client() as http_client:
                response = await http_client.get(self.server_url)
            available = response.status_code < 500
            logger.debug(f"Liveness probe: {self.server_url} -> {response.status_code}")
            return available
        except httpx.HTTPError as e:
            logger.debug(f"Liveness probe failed: {e}")
            return False

    async def initialize(self) -> ServerInfo:
        """
        Perform the handshake.

        Raises:
            MCPClientError: If the handshake fails
        """
        try:
            async with self._connect() as session:
                result = await session.initialize()
        except Exception as e:
            raise MCPClientError(f"Failed to initialize: {e}") from e

        return ServerInfo(
            name=result.serverInfo.name,
            version=result.serverInfo.version,
            protocol_version=str(result.protocolVersion),
        )

    async def list_tools(self) -> list[RemoteToolDescriptor]:
        """
        Fetch the tools the server offers.

        Raises:
            MCPClientError: If listing fails
        """
        try:
            async with self._session() as session:
                response = await session.list_tools()
        except Exception as e:
            raise MCPClientError(f"Failed to list tools: {e}") from e

        return [
            RemoteToolDescriptor(
                name=tool.name,
                description=tool.description or "",
                input_schema=tool.inputSchema,
            )
            for tool in response.tools
        ]

    async def call_tool(self, name: str, arguments: dict[str, Any]) -> RemoteToolResult:
        """
        Invoke a tool on the server.

        Non-text content blocks (images, resources) are skipped.

        Raises:
            MCPClientError: If the call fails at the transport or protocol level
        """
        try:
            async with self._session() as session:
                result = await session.call_tool(name, arguments)
        except Exception as e:
            raise MCPClientError(f"Failed to call tool '{name}': {e}") from e

        texts = [
            block.text
            for block in result.content or []
            if isinstance(getattr(block, "text", None), str)
        ]
        return RemoteToolResult(is_error=bool(result.isError), texts=texts)
