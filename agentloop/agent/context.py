"""
Conversation Context
====================

Messages and the conversation history the agent sends to the model.

The history must stay wire-compatible with the OpenAI chat completions
API. For every tool call the agent handles, two messages are appended:

    assistant  tool_calls=[...]           (content unset)
    tool       tool_call_id=..., name=... (content = tool output)

The assistant message carries the backend's `tool_calls` array exactly as
it was received; the agent never rebuilds it. Fields that are None are
left out of the serialized message rather than sent as null.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterator


class Role(str, Enum):
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"


@dataclass(frozen=True)
class Message:
    """
    One conversation turn.

    Attributes:
        role: Who produced the message
        content: Text content; unset on assistant messages carrying tool calls
        tool_calls: Backend-emitted tool call array, replayed verbatim
        tool_call_id: On tool messages, the id of the call being answered
        name: On tool messages, the name of the tool that ran
    """
    role: Role
    content: str | None = None
    tool_calls: list[dict[str, Any]] | None = None
    tool_call_id: str | None = None
    name: str | None = None

    def __post_init__(self) -> None:
        if self.role is Role.TOOL:
            if self.tool_call_id is None or self.name is None or self.content is None:
                raise ValueError("Tool messages require tool_call_id, name and content")
        if self.tool_calls is not None:
            if self.role is not Role.ASSISTANT:
                raise ValueError("Only assistant messages can carry tool_calls")
            if not self.tool_calls:
                raise ValueError("Assistant tool_calls must not be empty")
            if self.content is not None:
                raise ValueError("Assistant messages carrying tool_calls must not have content")

    @classmethod
    def system(cls, content: str) -> "Message":
        return cls(Role.SYSTEM, content=content)

    @classmethod
    def user(cls, content: str) -> "Message":
        return cls(Role.USER, content=content)

    @classmethod
    def assistant_tool_calls(cls, tool_calls: list[dict[str, Any]]) -> "Message":
        return cls(Role.ASSISTANT, tool_calls=tool_calls)

    @classmethod
    def tool_result(cls, tool_call_id: str, name: str, content: str) -> "Message":
        return cls(Role.TOOL, content=content, tool_call_id=tool_call_id, name=name)

    def to_dict(self) -> dict[str, Any]:
        """
        Serialize for the chat completions API.

        Returns:
            {"role": ...} plus only the fields that are not None
        """
        data: dict[str, Any] = {"role": self.role.value}
        if self.content is not None:
            data["content"] = self.content
        if self.tool_calls is not None:
            data["tool_calls"] = self.tool_calls
        if self.tool_call_id is not None:
            data["tool_call_id"] = self.tool_call_id
        if self.name is not None:
            data["name"] = self.name
        return data


class ConversationHistory:
    """
    Ordered, append-only message log for a single agent run.

    Only the Agent writes to it. It has no locking, so one history must
    never be shared by two runs in flight at the same time.

    Example:
        history = ConversationHistory()
        history.reset("You are a programmer.", "Add a fibonacci function")
        history.append(Message.assistant_tool_calls(raw_tool_calls))
        history.append(Message.tool_result("call_1", "read_file", "..."))
    """

    def __init__(self) -> None:
        self._messages: list[Message] = []

    def reset(self, system_prompt: str, user_input: str) -> None:
        """Start over with exactly [system, user]."""
        self._messages = [Message.system(system_prompt), Message.user(user_input)]

    def append(self, message: Message) -> None:
        self._messages.append(message)

    @property
    def messages(self) -> tuple[Message, ...]:
        """A read-only snapshot of the history."""
        return tuple(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(tuple(self._messages))

    def __getitem__(self, index: int) -> Message:
        return self._messages[index]
