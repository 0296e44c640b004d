"""Shared fixtures for agentloop tests.

Provides a scripted prompt executor that replays canned results and
records every call, plus small tools for exercising the agent loop.
"""

import json
from typing import Any, Sequence

import pytest

from agentloop.agent.context import Message
from agentloop.agent.executor import ExecutionResult, PromptExecutor, ToolCall
from agentloop.tools import (
    Tool,
    ToolArgumentError,
    ToolError,
    ToolRegistry,
    ToolResult,
    ToolSuccess,
    require_str,
)
from agentloop.utils.config import reset_config
from agentloop.utils.logger import set_global_level


class ScriptedExecutor(PromptExecutor):
    """Returns the given results in order and records what it was sent."""

    def __init__(self, results: Sequence[ExecutionResult]):
        self._results = list(results)
        self.calls: list[tuple[list[Message], list[str]]] = []

    async def execute(self, messages, tools) -> ExecutionResult:
        self.calls.append((list(messages), [tool.name for tool in tools]))
        index = min(len(self.calls) - 1, len(self._results) - 1)
        return self._results[index]


class EchoTool(Tool):
    name = "echo"
    description = "Echo the given text back"
    parameters = {
        "type": "object",
        "properties": {"text": {"type": "string"}},
        "required": ["text"],
    }

    def __init__(self):
        self.received: list[dict[str, Any]] = []

    async def execute(self, args: dict[str, Any]) -> ToolResult:
        self.received.append(args)
        try:
            text = require_str(args, "text")
        except ToolArgumentError as e:
            return ToolError(str(e))
        return ToolSuccess(text)


class ExplodingTool(Tool):
    name = "explode"
    description = "Always raises"
    parameters = {"type": "object", "properties": {}}

    async def execute(self, args: dict[str, Any]) -> ToolResult:
        raise RuntimeError("kaboom")


def make_tool_call(name: str, arguments: dict[str, Any] | None = None, call_id: str = "call_1") -> ToolCall:
    """Build a ToolCall the way the OpenAI executor would."""
    arguments = arguments or {}
    raw = [{
        "id": call_id,
        "type": "function",
        "function": {"name": name, "arguments": json.dumps(arguments)},
    }]
    return ToolCall(tool_name=name, arguments=arguments, id=call_id, raw_tool_calls=raw)


@pytest.fixture
def echo_tool():
    return EchoTool()


@pytest.fixture
def registry(echo_tool):
    return ToolRegistry(tools=[echo_tool])


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Isolate configuration tests from the real environment and .env files."""
    for name in (
        "OPENAI_API_KEY",
        "OPENAI_MODEL",
        "OPENAI_BASE_URL",
        "OPENAI_CONNECT_TIMEOUT",
        "OPENAI_READ_TIMEOUT",
        "MCP_SERVER_URL",
        "MCP_ENABLED",
        "MCP_TIMEOUT",
        "AGENT_MAX_ITERATIONS",
        "AGENT_VERBOSE",
        "LOG_LEVEL",
    ):
        # setenv first so teardown also removes values loaded from .env files
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
    reset_config()
    yield tmp_path
    reset_config()


@pytest.fixture(autouse=True)
def reset_log_level():
    """Undo any global log level a test applied through main()."""
    yield
    set_global_level(None)
