"""
Exception hierarchy for the toolturn conversation package.

Every failure in a turn is raised to the caller; nothing here is retried.

- ``ProviderError`` and subclasses come from the model invoker.
- ``ToolError`` and subclasses come from tool resolution and dispatch.
"""

from __future__ import annotations


class AgentError(Exception):
    """Base exception for all toolturn errors."""


# ---------------------------------------------------------------------------
# Model invoker errors
# ---------------------------------------------------------------------------


class ProviderError(AgentError):
    """Base exception for model invoker (LLM provider) failures."""


class ProviderRateLimitError(ProviderError):
    """Raised when the LLM API returns a rate-limit (429) response."""


class ProviderConnectionError(ProviderError):
    """Raised when the LLM API endpoint cannot be reached."""


class ProviderAPIError(ProviderError):
    """Raised for other LLM API errors (e.g., 5xx, authentication failures).

    Attributes:
        status_code: HTTP status code from the API, or ``None`` if unavailable.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


# ---------------------------------------------------------------------------
# Tool errors
# ---------------------------------------------------------------------------


class ToolError(AgentError):
    """Base exception for tool resolution and execution failures.

    Attributes:
        tool_name: Name of the tool involved.
    """

    def __init__(self, message: str, tool_name: str) -> None:
        super().__init__(message)
        self.tool_name = tool_name


class UnknownToolError(ToolError):
    """Raised when a tool name has no registered handler."""

    def __init__(self, tool_name: str) -> None:
        super().__init__(f"Unknown tool: {tool_name!r}", tool_name)


class MalformedArgumentsError(ToolError):
    """Raised when tool-invocation arguments are not a JSON object.

    Attributes:
        arguments: The raw argument string produced by the model.
    """

    def __init__(self, tool_name: str, arguments: str, reason: str) -> None:
        super().__init__(
            f"Malformed arguments for tool {tool_name!r}: {reason}", tool_name
        )
        self.arguments = arguments


class HandlerError(ToolError):
    """Raised when a tool handler fails while executing."""


class ToolArgumentsError(HandlerError):
    """Raised by a handler whose arguments do not match its declared schema."""
