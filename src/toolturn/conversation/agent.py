"""
Agent: the single-step tool-calling cycle for one conversation.

One call to ``Agent.run_turn`` records the user message, asks the model for
one reply, records that reply, and, if the reply requests a tool, runs the
first requested tool and records its result. The model is not called again
in the same turn; the next call to ``run_turn`` (or the next user message)
is what lets the model read the tool result.
"""

from __future__ import annotations

import enum
import json
import logging
import time
from typing import Any, Sequence

from toolturn.conversation.messages import (
    Message,
    ToolDefinition,
    ToolMessage,
    UserMessage,
)
from toolturn.conversation.providers import ModelInvoker
from toolturn.conversation.store import ConversationStore
from toolturn.conversation.tools.registry import ToolDispatcher, ToolRegistry

logger = logging.getLogger(__name__)


class TurnState(enum.Enum):
    AWAITING_USER = "awaiting_user"
    MODEL_CALL = "model_call"
    TOOL_CALL = "tool_call"
    TOOL_RESULT_RECORDED = "tool_result_recorded"
    FINAL_ANSWER = "final_answer"


def stringify_result(result: Any) -> str:
    """Render a tool result as ``tool`` message content.

    Strings pass through unchanged; anything else is JSON-encoded.
    """
    if isinstance(result, str):
        return result
    return json.dumps(result, default=str)


class Agent:
    """Runs conversation turns against one ``ConversationStore``.

    Typical usage::

        agent = Agent(provider=provider, registry=registry)
        history = await agent.run_turn("tell me a dad joke")

    Failures are never retried. A model failure leaves the user message
    recorded; a tool failure leaves the assistant's tool-call message
    recorded without a matching tool result.

    Attributes:
        provider: The model invoker.
        registry: Tools available to this agent.
        store: The conversation history this agent writes to.
        state: The state reached by the most recent turn.
    """

    def __init__(
        self,
        provider: ModelInvoker,
        registry: ToolRegistry,
        store: ConversationStore | None = None,
    ) -> None:
        self.provider = provider
        self.registry = registry
        self.store = store if store is not None else ConversationStore()
        self.state = TurnState.AWAITING_USER
        self._dispatcher: ToolDispatcher = registry.build_dispatcher()

    def _enter(self, state: TurnState) -> None:
        logger.debug("Turn state: %s -> %s", self.state.name, state.name)
        self.state = state

    async def run_turn(
        self,
        user_message: str,
        tools: Sequence[ToolDefinition] | None = None,
    ) -> list[Message]:
        """Run one conversation turn.

        Args:
            user_message: The user's input for this turn.
            tools: Tool definitions to offer the model. ``None`` offers every
                tool in the registry; an empty sequence offers none.

        Returns:
            A snapshot of the full conversation history after the turn.

        Raises:
            ProviderError: If the model invoker fails.
            UnknownToolError: If the model requests an unregistered tool.
            MalformedArgumentsError: If the tool arguments are not a JSON object.
            HandlerError: If the tool handler fails.
        """
        offered = list(tools) if tools is not None else self.registry.get_definitions()
        turn_start = time.monotonic()

        self.state = TurnState.AWAITING_USER
        self.store.append([UserMessage(content=user_message)])

        self._enter(TurnState.MODEL_CALL)
        llm_t0 = time.monotonic()
        response = await self.provider.invoke(self.store.all(), offered)
        logger.debug("LLM call took %.3fs", time.monotonic() - llm_t0)
        self.store.append([response])

        if not response.tool_calls:
            self._enter(TurnState.FINAL_ANSWER)
            logger.info(
                "Turn complete with final answer in %.3fs", time.monotonic() - turn_start
            )
            return self.store.all()

        self._enter(TurnState.TOOL_CALL)
        invocation, *ignored = response.tool_calls
        if ignored:
            logger.debug(
                "Running only the first of %d requested tool calls; ignoring %s",
                len(response.tool_calls),
                [tc.name for tc in ignored],
            )

        tools_t0 = time.monotonic()
        result = await self._dispatcher.dispatch(invocation, user_message)
        logger.debug("Tool %r took %.3fs", invocation.name, time.monotonic() - tools_t0)

        self.store.append(
            [ToolMessage(content=stringify_result(result), tool_call_id=invocation.id)]
        )
        self._enter(TurnState.TOOL_RESULT_RECORDED)
        logger.info(
            "Turn complete with %r result recorded in %.3fs",
            invocation.name,
            time.monotonic() - turn_start,
        )
        return self.store.all()
