"""
Message and tool types shared across the toolturn conversation package.

Messages are immutable once created. Each one renders to the OpenAI chat
message format via ``to_openai_format()`` so the history can be handed to any
OpenAI-compatible backend unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union


@dataclass(frozen=True)
class ToolDefinition:
    """Describes a callable tool available to the LLM.

    The description is what steers the model toward (or away from) the tool,
    so it is part of the tool's contract.

    Attributes:
        name: The tool's unique name (used by the LLM to invoke it).
        description: Text shown in the LLM's tool prompt.
        parameters: JSON Schema dict describing the tool's input parameters.
    """

    name: str
    description: str
    parameters: dict[str, Any] = field(default_factory=dict)

    def to_openai_format(self) -> dict[str, Any]:
        """Serialise to OpenAI tool definition format."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters,
            },
        }


@dataclass(frozen=True)
class ToolInvocation:
    """A tool invocation requested by the LLM.

    Attributes:
        id: Call ID returned by the LLM (correlates the tool result).
        name: Name of the tool to invoke.
        arguments: Raw JSON-encoded arguments exactly as the model sent them.
    """

    id: str
    name: str
    arguments: str

    def to_openai_format(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": "function",
            "function": {"name": self.name, "arguments": self.arguments},
        }


@dataclass(frozen=True)
class UserMessage:
    content: str
    role: str = field(default="user", init=False)

    def to_openai_format(self) -> dict[str, Any]:
        return {"role": self.role, "content": self.content}


@dataclass(frozen=True)
class AssistantMessage:
    """A model response: free text, tool-invocation requests, or both.

    Attributes:
        content: Text answer, or ``None`` when the model only requests tools.
        tool_calls: Requested invocations in model order, or ``None``.
    """

    content: str | None = None
    tool_calls: tuple[ToolInvocation, ...] | None = None
    role: str = field(default="assistant", init=False)

    def __post_init__(self) -> None:
        # Normalise lists and empty sequences so "no tool calls" has one shape.
        if self.tool_calls is not None:
            calls = tuple(self.tool_calls)
            object.__setattr__(self, "tool_calls", calls or None)

    @property
    def requests_tool(self) -> bool:
        return bool(self.tool_calls)

    def to_openai_format(self) -> dict[str, Any]:
        message: dict[str, Any] = {"role": self.role, "content": self.content}
        if self.tool_calls:
            message["tool_calls"] = [tc.to_openai_format() for tc in self.tool_calls]
        return message


@dataclass(frozen=True)
class ToolMessage:
    content: str
    tool_call_id: str
    role: str = field(default="tool", init=False)

    def to_openai_format(self) -> dict[str, Any]:
        return {
            "role": self.role,
            "content": self.content,
            "tool_call_id": self.tool_call_id,
        }


Message = Union[UserMessage, AssistantMessage, ToolMessage]


@dataclass(frozen=True)
class ToolInput:
    """What a tool handler receives for one invocation.

    Attributes:
        user_message: The user message that started the turn.
        tool_args: Parsed JSON arguments from the model. Handlers validate
            the shape themselves.
    """

    user_message: str
    tool_args: dict[str, Any]


def to_openai_messages(messages: list[Message]) -> list[dict[str, Any]]:
    """Render a history in OpenAI chat format."""
    return [m.to_openai_format() for m in messages]
