"""
SessionManager: one conversation per id, each with its own store and agent.

A conversation has a single writer. Turns on the same conversation id are
serialised by a per-conversation ``asyncio.Lock``; different ids run
concurrently.
History lives in memory only and is lost when the process exits.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Iterable

from toolturn.conversation.agent import Agent
from toolturn.conversation.messages import Message
from toolturn.conversation.providers import ModelInvoker
from toolturn.conversation.store import ConversationStore
from toolturn.conversation.tools.registry import ToolRegistry

logger = logging.getLogger(__name__)


class SessionManager:
    """Owns the per-conversation ``Agent`` instances for a process.

    Attributes:
        provider: Model invoker shared by every session.
        registry: Tool registry shared by every session (read-only).
    """

    def __init__(self, provider: ModelInvoker, registry: ToolRegistry) -> None:
        self.provider = provider
        self.registry = registry
        self._agents: dict[str, Agent] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    def agent(self, conversation_id: str) -> Agent:
        """Return the agent for *conversation_id*, creating it on first use."""
        agent = self._agents.get(conversation_id)
        if agent is None:
            agent = Agent(
                provider=self.provider,
                registry=self.registry,
                store=ConversationStore(),
            )
            self._agents[conversation_id] = agent
            logger.debug("Created conversation %r", conversation_id)
        return agent

    async def run_turn(
        self,
        conversation_id: str,
        message: str,
        tool_names: Iterable[str] | None = None,
    ) -> list[Message]:
        """Run one turn in *conversation_id*.

        Args:
            conversation_id: The conversation to continue (or start).
            message: The user's message.
            tool_names: Names of the tools to offer, or ``None`` for all.

        Raises:
            UnknownToolError: If *tool_names* names an unregistered tool.
                This is checked before anything is recorded.
        """
        tools = self.registry.get_definitions(tool_names)
        logger.info(
            "Processing turn: conversation=%r, text=%r, tools=%s",
            conversation_id,
            message,
            [t.name for t in tools],
        )
        lock = self._locks.setdefault(conversation_id, asyncio.Lock())
        async with lock:
            return await self.agent(conversation_id).run_turn(message, tools)

    def history(self, conversation_id: str) -> list[Message]:
        """Return the history of *conversation_id* (empty if unknown)."""
        agent = self._agents.get(conversation_id)
        return agent.store.all() if agent is not None else []

    def clear(self, conversation_id: str) -> None:
        """Drop the conversation *conversation_id*, if it exists."""
        self._agents.pop(conversation_id, None)
        self._locks.pop(conversation_id, None)

    def clear_all(self) -> None:
        """Drop every conversation."""
        self._agents.clear()
        self._locks.clear()

    def __len__(self) -> int:
        return len(self._agents)
