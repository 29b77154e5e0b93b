"""
toolturn conversation package.

Implements the single-step tool-calling cycle: the conversation store, the
model invoker protocol, the tool registry and dispatcher, and the agent that
drives one turn.
"""

from toolturn.conversation.agent import Agent, TurnState
from toolturn.conversation.errors import (
    AgentError,
    HandlerError,
    MalformedArgumentsError,
    ProviderAPIError,
    ProviderConnectionError,
    ProviderError,
    ProviderRateLimitError,
    ToolArgumentsError,
    ToolError,
    UnknownToolError,
)
from toolturn.conversation.messages import (
    AssistantMessage,
    Message,
    ToolDefinition,
    ToolInput,
    ToolInvocation,
    ToolMessage,
    UserMessage,
)
from toolturn.conversation.providers import ModelInvoker, OpenAICompatibleProvider
from toolturn.conversation.session import SessionManager
from toolturn.conversation.store import ConversationStore

__all__ = [
    "Agent",
    "AgentError",
    "AssistantMessage",
    "ConversationStore",
    "HandlerError",
    "MalformedArgumentsError",
    "Message",
    "ModelInvoker",
    "OpenAICompatibleProvider",
    "ProviderAPIError",
    "ProviderConnectionError",
    "ProviderError",
    "ProviderRateLimitError",
    "SessionManager",
    "ToolArgumentsError",
    "ToolDefinition",
    "ToolError",
    "ToolInput",
    "ToolInvocation",
    "ToolMessage",
    "TurnState",
    "UnknownToolError",
    "UserMessage",
]
