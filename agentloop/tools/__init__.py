"""
Tools System
============

Tools are the capabilities the model can call. Each tool has a name, a
description and a JSON Schema for its parameters, and an async execute
method that turns an argument mapping into a ToolResult.

How Tools Work:
1. The registry offers every registered tool to the model each turn
2. The model picks a tool and supplies arguments
3. The agent looks the tool up by name and executes it
4. The result goes back into the conversation as a tool message

This module provides:
- Tool: base class for tools implemented as classes
- FunctionTool: a tool built from a plain async function
- ToolSuccess / ToolError: the two possible tool results
- ToolRegistry: name-keyed store of tools
- require_str: argument validation helper
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Iterable

from agentloop.utils.logger import Logger

logger = Logger("Tools")


# ==============================================================================
# Results
# ==============================================================================

@dataclass(frozen=True)
class ToolSuccess:
    """A tool finished and produced output text for the model."""
    output: str

    def to_message(self) -> str:
        """Format as tool message content."""
        return self.output


@dataclass(frozen=True)
class ToolError:
    """A tool failed; the model sees the message and can react to it."""
    message: str

    def to_message(self) -> str:
        return f"Error: {self.message}"


ToolResult = ToolSuccess | ToolError


# ==============================================================================
# Arguments
# ==============================================================================

class ToolArgumentError(ValueError):
    """A required argument is missing or has the wrong type."""


_JSON_TYPE_NAMES = {
    str: "string",
    bool: "boolean",
    int: "integer",
    float: "number",
    list: "array",
    dict: "object",
    type(None): "null",
}


def _json_type_name(value: Any) -> str:
    return _JSON_TYPE_NAMES.get(type(value), type(value).__name__)


def require_str(args: dict[str, Any], key: str) -> str:
    """
    Fetch a required string argument.

    Args:
        args: Arguments decoded from the model's tool call
        key: Parameter name

    Returns:
        The string value

    Raises:
        ToolArgumentError: If the key is missing or the value isn't a string
    """
    if key not in args or args[key] is None:
        raise ToolArgumentError(f"Missing required parameter: {key}")

    value = args[key]
    if not isinstance(value, str):
        raise ToolArgumentError(
            f"Invalid parameter '{key}': expected string, got {_json_type_name(value)}"
        )
    return value


# ==============================================================================
# Tool definitions
# ==============================================================================

class Tool(ABC):
    """
    Base class for tools.

    Subclasses set `name`, `description` and `parameters` and implement
    `execute`. Tools are treated as immutable once registered.

    Example:
        class EchoTool(Tool):
            name = "echo"
            description = "Echo the given text back"
            parameters = {
                "type": "object",
                "properties": {"text": {"type": "string"}},
                "required": ["text"],
            }

            async def execute(self, args: dict) -> ToolResult:
                try:
                    text = require_str(args, "text")
                except ToolArgumentError as e:
                    return ToolError(str(e))
                return ToolSuccess(text)
    """

    name: str
    description: str
    parameters: dict[str, Any]

    @abstractmethod
    async def execute(self, args: dict[str, Any]) -> ToolResult:
        """Run the tool with arguments decoded from the model's call."""

    def to_openai_function(self) -> dict:
        """
        Convert to the OpenAI function calling format.

        Returns:
            {"type": "function", "function": {name, description, parameters}}
        """
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters,
            },
        }

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


class FunctionTool(Tool):
    """
    A tool defined by a plain async function.

    Example:
        async def now(args: dict) -> ToolResult:
            return ToolSuccess(datetime.now().isoformat())

        tool = FunctionTool(
            name="now",
            description="Current local time",
            parameters={"type": "object", "properties": {}},
            func=now,
        )
    """

    def __init__(
        self,
        name: str,
        description: str,
        parameters: dict[str, Any],
        func: Callable[[dict[str, Any]], Awaitable[ToolResult]],
    ):
        self.name = name
        self.description = description
        self.parameters = parameters
        self._func = func

    async def execute(self, args: dict[str, Any]) -> ToolResult:
        return await self._func(args)


# ==============================================================================
# Registry
# ==============================================================================

class ToolRegistry:
    """
    Name-keyed store of the tools offered to the model.

    The registry is filled during a configuration step before the agent
    starts. Registering a tool whose name is already taken replaces the
    earlier tool. There is no removal.

    Example:
        def configure(registry: ToolRegistry) -> None:
            registry.register(ReadFileTool(READ_ONLY))
            registry.register(ListDirectoryTool(READ_ONLY))

        registry = ToolRegistry(configure)
        tool = registry.get("read_file")
    """

    def __init__(
        self,
        configure: Callable[["ToolRegistry"], None] | None = None,
        tools: Iterable[Tool] = (),
    ):
        """
        Initialize the registry.

        Args:
            configure: Optional callback invoked once with the new registry
            tools: Tools to register up front
        """
        self._tools: dict[str, Tool] = {}

        for tool in tools:
            self.register(tool)

        if configure is not None:
            configure(self)

    def register(self, tool: Tool) -> None:
        """Register a tool, replacing any tool with the same name."""
        if tool.name in self._tools:
            logger.warning(f"Replacing previously registered tool: {tool.name}")
        self._tools[tool.name] = tool
        logger.debug(f"Registered tool: {tool.name}")

    def get(self, name: str) -> Tool | None:
        """Get a tool by name, or None if not registered."""
        return self._tools.get(name)

    def get_all(self) -> list[Tool]:
        """Get all registered tools."""
        return list(self._tools.values())

    def list_names(self) -> list[str]:
        return list(self._tools.keys())

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)


__all__ = [
    "Tool",
    "FunctionTool",
    "ToolResult",
    "ToolSuccess",
    "ToolError",
    "ToolArgumentError",
    "ToolRegistry",
    "require_str",
]
