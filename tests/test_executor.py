"""Unit tests for the OpenAI prompt executor."""

import json
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import openai
import pytest

from agentloop.agent.context import Message
from agentloop.agent.executor import (
    ExecutionError,
    FinalAnswer,
    OpenAIExecutor,
    ToolCall,
    build_request,
    parse_response,
)

from conftest import EchoTool

URL = "https://api.openai.com/v1/chat/completions"

HISTORY = [Message.system("S"), Message.user("U")]


def raw_response(body: str) -> MagicMock:
    raw = MagicMock()
    raw.http_response.text = body
    return raw


@pytest.fixture
def mock_openai_client():
    client = MagicMock()
    client.chat.completions.with_raw_response.create = AsyncMock()
    return client


@pytest.fixture
def executor(mock_openai_client):
    return OpenAIExecutor(api_key="sk-test", model="gpt-4", client=mock_openai_client)


def test_build_request_without_tools_has_no_tool_fields():
    request = build_request("gpt-4", HISTORY, [])

    assert request == {
        "model": "gpt-4",
        "messages": [
            {"role": "system", "content": "S"},
            {"role": "user", "content": "U"},
        ],
    }


def test_build_request_with_tools_disables_parallel_calls():
    request = build_request("gpt-4", HISTORY, [EchoTool()])

    assert request["parallel_tool_calls"] is False
    assert request["tools"] == [{
        "type": "function",
        "function": {
            "name": "echo",
            "description": "Echo the given text back",
            "parameters": EchoTool.parameters,
        },
    }]


def test_parse_response_first_tool_call_surfaced():
    tool_calls = [
        {"id": "call_1", "type": "function",
         "function": {"name": "read_file", "arguments": "{\"path\": \"/x\"}"}},
        {"id": "call_2", "type": "function",
         "function": {"name": "list_directory", "arguments": "{\"path\": \"/\"}"}},
    ]
    payload = {"choices": [{"message": {"role": "assistant", "content": None, "tool_calls": tool_calls}}]}

    result = parse_response(payload)

    assert isinstance(result, ToolCall)
    assert result.tool_name == "read_file"
    assert result.arguments == {"path": "/x"}
    assert result.id == "call_1"
    assert result.raw_tool_calls is tool_calls


def test_parse_response_text_content():
    result = parse_response({"choices": [{"message": {"content": "All done"}}]})
    assert result == FinalAnswer("All done")


def test_parse_response_missing_content_is_empty_answer():
    result = parse_response({"choices": [{"message": {"role": "assistant"}}]})
    assert result == FinalAnswer("")


@pytest.mark.parametrize("payload, message", [
    ({}, "No choices in response"),
    ({"choices": []}, "No choices in response"),
    ({"choices": [{}]}, "Response choice has no message"),
    ([], "Malformed response body"),
    ({"choices": {"first": {}}}, "Malformed response body: choices is not an array"),
    ({"choices": [{"message": {"tool_calls": {"a": 1}}}]},
     "Malformed response body: tool_calls is not an array"),
    ({"choices": [{"message": {"content": ["part"]}}]},
     "Malformed response body: message content is not a string"),
])
def test_parse_response_structure_errors(payload, message):
    assert parse_response(payload) == ExecutionError(message)


def test_parse_response_invalid_arguments():
    payload = {"choices": [{"message": {"tool_calls": [
        {"id": "call_1", "function": {"name": "echo", "arguments": "{not json"}},
    ]}}]}

    result = parse_response(payload)

    assert isinstance(result, ExecutionError)
    assert result.message.startswith("Invalid tool call arguments")


def test_parse_response_non_object_arguments():
    payload = {"choices": [{"message": {"tool_calls": [
        {"id": "call_1", "function": {"name": "echo", "arguments": "[1, 2]"}},
    ]}}]}

    assert isinstance(parse_response(payload), ExecutionError)


def test_parse_response_empty_arguments_and_missing_id():
    payload = {"choices": [{"message": {"tool_calls": [
        {"function": {"name": "git_status", "arguments": ""}},
    ]}}]}

    result = parse_response(payload)

    assert isinstance(result, ToolCall)
    assert result.arguments == {}
    assert result.id


@pytest.mark.asyncio
async def test_execute_sends_request(executor, mock_openai_client):
    body = json.dumps({"choices": [{"message": {"content": "hi"}}]})
    mock_openai_client.chat.completions.with_raw_response.create.return_value = raw_response(body)

    result = await executor.execute(HISTORY, [EchoTool()])

    assert result == FinalAnswer("hi")
    kwargs = mock_openai_client.chat.completions.with_raw_response.create.call_args.kwargs
    assert kwargs["model"] == "gpt-4"
    assert kwargs["parallel_tool_calls"] is False
    assert len(kwargs["messages"]) == 2


@pytest.mark.asyncio
async def test_execute_empty_body(executor, mock_openai_client):
    mock_openai_client.chat.completions.with_raw_response.create.return_value = raw_response("  ")

    result = await executor.execute(HISTORY, [])

    assert result == ExecutionError("Empty response body")


@pytest.mark.asyncio
async def test_execute_non_json_body(executor, mock_openai_client):
    mock_openai_client.chat.completions.with_raw_response.create.return_value = raw_response("<html>")

    result = await executor.execute(HISTORY, [])

    assert isinstance(result, ExecutionError)
    assert result.message.startswith("Malformed response body")


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [
    json.dumps({"choices": {"first": {}}}),
    json.dumps({"choices": [{"message": {"tool_calls": {"a": 1}}}]}),
    json.dumps({"choices": [{"message": {"content": ["part"]}}]}),
])
async def test_execute_wrong_shape_body_is_error(executor, mock_openai_client, body):
    mock_openai_client.chat.completions.with_raw_response.create.return_value = raw_response(body)

    result = await executor.execute(HISTORY, [])

    assert isinstance(result, ExecutionError)
    assert result.message.startswith("Malformed response body")


@pytest.mark.asyncio
async def test_execute_parse_failure_becomes_error(executor, mock_openai_client):
    mock_openai_client.chat.completions.with_raw_response.create.return_value = raw_response("{}")

    with patch("agentloop.agent.executor.parse_response", side_effect=KeyError("choices")):
        result = await executor.execute(HISTORY, [])

    assert isinstance(result, ExecutionError)
    assert result.message.startswith("Execution failed")


@pytest.mark.asyncio
async def test_execute_status_error(executor, mock_openai_client):
    response = httpx.Response(429, request=httpx.Request("POST", URL), text="rate limited")
    mock_openai_client.chat.completions.with_raw_response.create.side_effect = openai.APIStatusError(
        "rate limited", response=response, body=None
    )

    result = await executor.execute(HISTORY, [])

    assert result == ExecutionError("API request failed: 429 - rate limited")


@pytest.mark.asyncio
async def test_execute_timeout(executor, mock_openai_client):
    mock_openai_client.chat.completions.with_raw_response.create.side_effect = openai.APITimeoutError(
        request=httpx.Request("POST", URL)
    )

    result = await executor.execute(HISTORY, [])

    assert isinstance(result, ExecutionError)
    assert result.message.startswith("Request timed out")


@pytest.mark.asyncio
async def test_execute_connection_error(executor, mock_openai_client):
    mock_openai_client.chat.completions.with_raw_response.create.side_effect = openai.APIConnectionError(
        request=httpx.Request("POST", URL)
    )

    result = await executor.execute(HISTORY, [])

    assert isinstance(result, ExecutionError)
    assert result.message.startswith("Connection failed")


@pytest.mark.asyncio
async def test_execute_unexpected_exception(executor, mock_openai_client):
    mock_openai_client.chat.completions.with_raw_response.create.side_effect = RuntimeError("boom")

    result = await executor.execute(HISTORY, [])

    assert result == ExecutionError("Execution failed: boom")


def test_default_client_disables_retries():
    with patch("agentloop.agent.executor.AsyncOpenAI") as mock_class:
        OpenAIExecutor(api_key="sk-test", connect_timeout=5.0, read_timeout=7.0)

    kwargs = mock_class.call_args.kwargs
    assert kwargs["max_retries"] == 0
    assert kwargs["timeout"].connect == 5.0
    assert kwargs["timeout"].read == 7.0
