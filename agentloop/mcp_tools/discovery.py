"""
MCP Tool Discovery
==================

Finds the tools on an MCP server and registers them before the agent
starts.

Discovery never stops the agent from running. If the server is down,
the handshake fails, or a single tool can't be adapted, the problem is
logged and the agent carries on with whatever tools it has.
"""

from agentloop.mcp_tools.adapter import MCPToolAdapter
from agentloop.mcp_tools.client import MCPClient, MCPClientError
from agentloop.tools import ToolRegistry
from agentloop.utils.logger import Logger

logger = Logger("MCPDiscovery")


class MCPToolDiscovery:
    """
    Discovers remote tools and registers them into a ToolRegistry.

    Example:
        discovery = MCPToolDiscovery(MCPClient(config.mcp.server_url))
        count = await discovery.discover_and_register(registry)
    """

    def __init__(self, client: MCPClient, verbose: bool = False):
        self.client = client
        self.verbose = verbose

    def _trace(self, message: str) -> None:
        if self.verbose:
            logger.info(message)
        else:
            logger.debug(message)

    async def discover_and_register(self, registry: ToolRegistry) -> int:
        """
        Register every tool the server offers.

        Args:
            registry: Registry to add the adapted tools to

        Returns:
            Number of tools registered (0 if the server is unavailable)
        """
        if not await self.test_connection():
            logger.warning(
                f"MCP server is not available at {self.client.server_url}. Skipping tool discovery."
            )
            return 0

        registered = 0
        try:
            self._trace("Initializing connection...")
            info = await self.client.initialize()
            self._trace(f"Connected to {info.name} v{info.version}")
            self._trace(f"Protocol version: {info.protocol_version}")

            self._trace("Discovering tools...")
            descriptors = await self.client.list_tools()
            self._trace(f"Found {len(descriptors)} tools")

            for descriptor in descriptors:
                try:
                    registry.register(MCPToolAdapter(self.client, descriptor))
                except Exception as e:
                    logger.error(f"Failed to register tool: {descriptor.name}", e)
                    continue

                registered += 1
                self._trace(f"Registered tool: {descriptor.name} - {descriptor.description}")

        except MCPClientError as e:
            logger.error("Failed to discover tools", e)
        except Exception as e:
            logger.error("Unexpected error during tool discovery", e)

        logger.info(f"Registered {registered} MCP tools")
        return registered

    async def test_connection(self) -> bool:
        """Check whether the server is reachable, without raising."""
        self._trace("Testing connection...")
        try:
            available = await self.client.is_server_available()
        except Exception as e:
            logger.warning(f"Connection test failed: {e}")
            return False

        self._trace("Connection successful!" if available else "Server not available")
        return available
