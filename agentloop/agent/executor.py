"""
Prompt Executor
===============

One round-trip to the model backend per call.

The executor takes the conversation so far plus the available tools,
asks the model for its next step and classifies the answer:

    ToolCall        the model wants a tool run (only the first call is surfaced)
    FinalAnswer     the model answered in text
    ExecutionError  the request or the response was unusable

Executors never raise. Every failure, including timeouts, comes back as
an ExecutionError, and none is retried.

Wire format (OpenAI chat completions):

    request   {"model": ..., "messages": [...],
               "tools": [{"type": "function", "function": {...}}],
               "parallel_tool_calls": false}
    response  {"choices": [{"message": {"content": ..., "tool_calls": [...]}}]}

`tools` and `parallel_tool_calls` are only sent when there are tools.
"""

import json
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Sequence

import httpx
import openai
from openai import AsyncOpenAI

from agentloop.agent.context import Message
from agentloop.tools import Tool
from agentloop.utils.logger import Logger

logger = Logger("Executor")


class OpenAIModels:
    """Model identifiers for OpenAIExecutor."""
    GPT4 = "gpt-4"
    GPT4_TURBO = "gpt-4-turbo-preview"
    GPT35_TURBO = "gpt-3.5-turbo"


# ==============================================================================
# Results
# ==============================================================================

@dataclass(frozen=True)
class ToolCall:
    """
    The model asked for a tool.

    Attributes:
        tool_name: Name of the requested tool
        arguments: Arguments decoded from the call's JSON string
        id: Call id; the tool message answering it must carry the same id
        raw_tool_calls: The full tool_calls array as the backend sent it
    """
    tool_name: str
    arguments: dict[str, Any]
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    raw_tool_calls: list[dict[str, Any]] | None = None

    def to_tool_calls(self) -> list[dict[str, Any]]:
        """
        The tool_calls array for the assistant message that precedes the result.

        The backend's array is replayed as is. Executors that leave
        raw_tool_calls unset get a single entry rebuilt from this call.
        """
        if self.raw_tool_calls:
            return self.raw_tool_calls
        return [{
            "id": self.id,
            "type": "function",
            "function": {"name": self.tool_name, "arguments": json.dumps(self.arguments)},
        }]


@dataclass(frozen=True)
class FinalAnswer:
    content: str


@dataclass(frozen=True)
class ExecutionError:
    message: str


ExecutionResult = ToolCall | FinalAnswer | ExecutionError


class PromptExecutor(ABC):
    """Backend abstraction used by the Agent."""

    @abstractmethod
    async def execute(self, messages: Sequence[Message], tools: Sequence[Tool]) -> ExecutionResult:
        """
        Ask the model for its next step.

        Args:
            messages: The full conversation history
            tools: Tools the model may call this turn

        Returns:
            The classified result; never raises
        """


# ==============================================================================
# OpenAI
# ==============================================================================

def build_request(model: str, messages: Sequence[Message], tools: Sequence[Tool]) -> dict[str, Any]:
    """
    Build the chat completions request body.

    Args:
        model: Model identifier
        messages: Conversation history
        tools: Available tools; when empty, no tool fields are sent

    Returns:
        Keyword arguments for chat.completions.create
    """
    request: dict[str, Any] = {
        "model": model,
        "messages": [message.to_dict() for message in messages],
    }

    if tools:
        request["tools"] = [tool.to_openai_function() for tool in tools]
        request["parallel_tool_calls"] = False

    return request


def parse_response(payload: Any) -> ExecutionResult:
    """
    Classify a decoded chat completions response.

    Only the first tool call is surfaced as a ToolCall; the whole array is
    kept in raw_tool_calls so it can be replayed into the history as is.
    """
    if not isinstance(payload, dict):
        return ExecutionError("Malformed response body")

    choices = payload.get("choices")
    if not choices:
        return ExecutionError("No choices in response")
    if not isinstance(choices, list):
        return ExecutionError("Malformed response body: choices is not an array")

    first_choice = choices[0]
    message = first_choice.get("message") if isinstance(first_choice, dict) else None
    if not isinstance(message, dict):
        return ExecutionError("Response choice has no message")

    tool_calls = message.get("tool_calls")
    if tool_calls:
        if not isinstance(tool_calls, list):
            return ExecutionError("Malformed response body: tool_calls is not an array")
        return _parse_tool_call(tool_calls)

    content = message.get("content")
    if content is not None and not isinstance(content, str):
        return ExecutionError("Malformed response body: message content is not a string")

    return FinalAnswer(content or "")


def _parse_tool_call(tool_calls: list[dict[str, Any]]) -> ExecutionResult:
    first = tool_calls[0]
    function = first.get("function") if isinstance(first, dict) else None
    if not isinstance(function, dict) or not function.get("name"):
        return ExecutionError("Tool call has no function name")

    raw_arguments = function.get("arguments") or "{}"
    try:
        arguments = json.loads(raw_arguments) if isinstance(raw_arguments, str) else raw_arguments
    except json.JSONDecodeError as e:
        return ExecutionError(f"Invalid tool call arguments: {e}")

    if not isinstance(arguments, dict):
        return ExecutionError("Invalid tool call arguments: expected a JSON object")

    call_id = first.get("id") or str(uuid.uuid4())

    return ToolCall(
        tool_name=function["name"],
        arguments=arguments,
        id=call_id,
        raw_tool_calls=tool_calls,
    )


class OpenAIExecutor(PromptExecutor):
    """
    Prompt executor for the OpenAI chat completions API.

    The SDK client is built with retries disabled and bounded connect/read
    timeouts. The raw response body is decoded directly, so tool calls are
    replayed exactly as the backend produced them.

    Example:
        executor = OpenAIExecutor(api_key, OpenAIModels.GPT4_TURBO)
        result = await executor.execute(history.messages, registry.get_all())
    """

    def __init__(
        self,
        api_key: str,
        model: str = OpenAIModels.GPT4_TURBO,
        base_url: str | None = None,
        connect_timeout: float = 30.0,
        read_timeout: float = 60.0,
        client: AsyncOpenAI | None = None,
    ):
        """
        Initialize the executor.

        Args:
            api_key: OpenAI API key
            model: Model identifier
            base_url: Optional API base URL for compatible backends
            connect_timeout: Seconds to wait for a connection
            read_timeout: Seconds to wait for the response
            client: Pre-built client (used by tests)
        """
        self.model = model
        self.client = client or AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=httpx.Timeout(read_timeout, connect=connect_timeout),
            max_retries=0,
        )
        logger.debug(f"OpenAIExecutor initialized with model: {model}")

    async def execute(self, messages: Sequence[Message], tools: Sequence[Tool]) -> ExecutionResult:
        request = build_request(self.model, messages, tools)
        logger.debug(f"Sending {len(request['messages'])} messages, {len(tools)} tools")

        try:
            raw = await self.client.chat.completions.with_raw_response.create(**request)
            body = raw.http_response.text
        except openai.APIStatusError as e:
            return ExecutionError(f"API request failed: {e.status_code} - {e.response.text}")
        except openai.APITimeoutError as e:
            return ExecutionError(f"Request timed out: {e}")
        except openai.APIConnectionError as e:
            return ExecutionError(f"Connection failed: {e}")
        except Exception as e:
            logger.error("Chat completion request failed", e)
            return ExecutionError(f"Execution failed: {e}")

        if not body or not body.strip():
            return ExecutionError("Empty response body")

        try:
            payload = json.loads(body)
        except json.JSONDecodeError as e:
            return ExecutionError(f"Malformed response body: {e}")

        try:
            return parse_response(payload)
        except Exception as e:
            logger.error("Failed to classify chat completion response", e)
            return ExecutionError(f"Execution failed: {e}")
