"""
Tool registry and dispatcher for the toolturn agent.

Provides ``ToolRegistry``, a name-keyed container of tool definitions and
async handlers, and ``ToolDispatcher``, which executes one model-requested
``ToolInvocation`` against a registry snapshot.

Typical usage::

    from toolturn.conversation.tools.registry import ToolRegistry
    from toolturn.conversation.tools.dad_joke import DadJokeTool

    registry = ToolRegistry()
    joke = DadJokeTool()
    registry.register(DadJokeTool.TOOL_DEFINITION, joke.as_dispatcher_entry())

    dispatcher = registry.build_dispatcher()
    result = await dispatcher.dispatch(invocation, user_message="tell me a joke")
"""

from __future__ import annotations

import json
import logging
from typing import Any, Awaitable, Callable, Iterable, NamedTuple

from toolturn.conversation.errors import (
    HandlerError,
    MalformedArgumentsError,
    ToolError,
    UnknownToolError,
)
from toolturn.conversation.messages import ToolDefinition, ToolInput, ToolInvocation

logger = logging.getLogger(__name__)

# Type alias for a single tool handler: async (ToolInput) -> str | structured value
AsyncToolHandler = Callable[[ToolInput], Awaitable[Any]]


class RegisteredTool(NamedTuple):
    definition: ToolDefinition
    handler: AsyncToolHandler


class ToolRegistry:
    """Registry mapping tool names to their definitions and async handlers.

    Lookup is exact-match and case-sensitive. An unregistered name has
    exactly one outcome: ``UnknownToolError``.
    """

    def __init__(self) -> None:
        self._tools: dict[str, RegisteredTool] = {}

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register(
        self,
        definition: ToolDefinition,
        handler: AsyncToolHandler,
    ) -> None:
        """Register a tool with its async handler.

        Args:
            definition: The tool's ``ToolDefinition`` (name, description,
                parameters).
            handler: Async callable ``(ToolInput) -> result``.

        Raises:
            ValueError: If a tool with the same name is already registered.
        """
        if definition.name in self._tools:
            raise ValueError(
                f"Tool {definition.name!r} is already registered. "
                "Deregister it first before re-registering."
            )
        self._tools[definition.name] = RegisteredTool(definition, handler)
        logger.debug("Registered tool: %r", definition.name)

    def deregister(self, name: str) -> None:
        """Remove a registered tool by name.

        Raises:
            UnknownToolError: If the tool is not registered.
        """
        if name not in self._tools:
            raise UnknownToolError(name)
        del self._tools[name]
        logger.debug("Deregistered tool: %r", name)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def resolve(self, name: str) -> AsyncToolHandler:
        """Return the handler registered under *name*.

        Raises:
            UnknownToolError: If no tool is registered under *name*.
        """
        entry = self._tools.get(name)
        if entry is None:
            raise UnknownToolError(name)
        return entry.handler

    def get_definitions(self, names: Iterable[str] | None = None) -> list[ToolDefinition]:
        """Return registered definitions, all of them or the named subset.

        Args:
            names: Tool names to offer. ``None`` means every registered tool,
                in insertion order. Otherwise the order of *names* is kept.

        Raises:
            UnknownToolError: If a requested name is not registered.
        """
        if names is None:
            return [entry.definition for entry in self._tools.values()]
        definitions = []
        for name in names:
            entry = self._tools.get(name)
            if entry is None:
                raise UnknownToolError(name)
            definitions.append(entry.definition)
        return definitions

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: str) -> bool:
        return name in self._tools

    # ------------------------------------------------------------------
    # Dispatcher factory
    # ------------------------------------------------------------------

    def build_dispatcher(self) -> ToolDispatcher:
        """Build a ``ToolDispatcher`` over a snapshot of this registry.

        Later registrations are not reflected in the returned dispatcher.
        """
        snapshot = ToolRegistry()
        snapshot._tools = dict(self._tools)
        return ToolDispatcher(snapshot)


def parse_arguments(invocation: ToolInvocation) -> dict[str, Any]:
    """Decode the model's JSON argument string into a dict.

    Raises:
        MalformedArgumentsError: If the string is not JSON or does not
            decode to a JSON object.
    """
    raw = invocation.arguments
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise MalformedArgumentsError(invocation.name, raw, str(exc)) from exc
    if not isinstance(parsed, dict):
        raise MalformedArgumentsError(
            invocation.name, raw, f"expected a JSON object, got {type(parsed).__name__}"
        )
    return parsed


class ToolDispatcher:
    """Executes a single ``ToolInvocation`` against a ``ToolRegistry``.

    The dispatcher does not validate arguments against the tool's schema;
    each handler validates its own input. There is no timeout and no retry:
    every failure propagates to the caller.
    """

    def __init__(self, registry: ToolRegistry) -> None:
        self.registry = registry

    async def dispatch(self, invocation: ToolInvocation, user_message: str) -> Any:
        """Run *invocation* and return the handler's result verbatim.

        Args:
            invocation: The tool call requested by the model.
            user_message: The user message that started the turn.

        Returns:
            Whatever the handler returned (a string or a structured value).

        Raises:
            MalformedArgumentsError: If the arguments are not a JSON object.
            UnknownToolError: If the tool is not registered.
            HandlerError: If the handler fails. Handler errors that are
                already ``ToolError`` instances propagate unchanged; any
                other exception is wrapped with the original as ``__cause__``.

        Callers that need the handler's own exception type should inspect
        ``HandlerError.__cause__``.
        """
        tool_args = parse_arguments(invocation)
        handler = self.registry.resolve(invocation.name)

        logger.debug("Dispatching tool: %s(%s)", invocation.name, tool_args)
        try:
            return await handler(ToolInput(user_message=user_message, tool_args=tool_args))
        except ToolError:
            raise
        except Exception as exc:
            logger.error("Tool %r failed: %s", invocation.name, exc)
            raise HandlerError(
                f"Tool {invocation.name!r} failed: {exc}", invocation.name
            ) from exc
