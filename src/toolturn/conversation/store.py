"""
ConversationStore: the ordered, append-only message log for one session.

The store is the single source of truth for dialogue history. It is owned by
one ``Agent`` and has exactly one writer, so it carries no locking.
"""

from __future__ import annotations

import logging
from typing import Iterable

from toolturn.conversation.messages import AssistantMessage, Message, ToolMessage

logger = logging.getLogger(__name__)


class ConversationStore:
    """In-memory, append-only conversation history.

    Messages are frozen dataclasses, and ``all()`` returns a copy of the
    sequence, so nothing already recorded can be changed from outside.
    Capacity is unbounded for the life of the session.

    Typical usage::

        store = ConversationStore()
        store.append([UserMessage(content="hello")])
        history = store.all()
    """

    def __init__(self) -> None:
        self._messages: list[Message] = []
        # Unanswered tool call ids of the most recent assistant message.
        self._open_call_ids: set[str] = set()

    def append(self, messages: Iterable[Message]) -> None:
        """Append *messages* to the end of the history, in order.

        Args:
            messages: Messages to record.

        Raises:
            ValueError: If a ``ToolMessage`` does not answer an open tool call
                of the immediately preceding assistant message, or answers
                one a second time. Nothing from the batch is recorded in
                that case.
        """
        batch = list(messages)
        open_ids = set(self._open_call_ids)

        for message in batch:
            if isinstance(message, AssistantMessage):
                open_ids = {tc.id for tc in message.tool_calls or ()}
            elif isinstance(message, ToolMessage):
                if message.tool_call_id not in open_ids:
                    raise ValueError(
                        f"Tool message references unknown tool_call_id "
                        f"{message.tool_call_id!r}"
                    )
                open_ids.discard(message.tool_call_id)
            else:
                open_ids = set()

        self._messages.extend(batch)
        self._open_call_ids = open_ids
        logger.debug(
            "Appended %d message(s); history length is now %d",
            len(batch),
            len(self._messages),
        )

    def all(self) -> list[Message]:
        """Return a snapshot of the full history in insertion order."""
        return list(self._messages)

    def last(self) -> Message | None:
        """Return the most recent message, or ``None`` if the store is empty."""
        return self._messages[-1] if self._messages else None

    def __len__(self) -> int:
        return len(self._messages)
