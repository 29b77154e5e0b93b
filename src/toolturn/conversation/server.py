"""
HTTP server for the toolturn agent.

Exposes ``SessionManager`` over a small REST API.

Endpoints
---------
POST   /conversations/{id}/turns     Run one turn; returns the full history.
GET    /conversations/{id}/messages  Return the history of a conversation.
DELETE /conversations/{id}           Drop one conversation.
DELETE /conversations                Drop every conversation.
GET    /tools                        List registered tool definitions.
GET    /health                       Health / readiness check.

Usage (standalone)::

    from toolturn.config import get_settings
    from toolturn.main import build_sessions
    from toolturn.conversation.server import create_app
    import uvicorn

    app = create_app(build_sessions(get_settings()))
    uvicorn.run(app, host="127.0.0.1", port=8765)
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from toolturn.conversation.errors import (
    ProviderError,
    ProviderRateLimitError,
    ToolError,
    UnknownToolError,
)
from toolturn.conversation.messages import to_openai_messages
from toolturn.conversation.session import SessionManager

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Request / response schemas
# ---------------------------------------------------------------------------


class TurnRequest(BaseModel):
    """Body for POST /conversations/{id}/turns."""

    message: str = Field(..., min_length=1, description="The user's message.")
    tools: list[str] | None = Field(
        default=None,
        description="Names of the tools to offer. Omit to offer every tool.",
    )


class ConversationResponse(BaseModel):
    """History of one conversation in OpenAI chat format."""

    conversation_id: str
    messages: list[dict[str, Any]]


class HealthResponse(BaseModel):
    status: str
    active_conversations: int
    tools: int


# ---------------------------------------------------------------------------
# App factory
# ---------------------------------------------------------------------------


def create_app(sessions: SessionManager) -> FastAPI:
    """Create a FastAPI application wrapping *sessions*.

    Args:
        sessions: A ``SessionManager`` with its provider and registry already
            built.

    Returns:
        A configured ``FastAPI`` application, servable with uvicorn or
        testable with ``httpx.AsyncClient(transport=ASGITransport(app))``.
    """
    app = FastAPI(
        title="toolturn",
        description="One model call and at most one tool call per turn.",
        version="0.1.0",
    )

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(
            status="ok",
            active_conversations=len(sessions),
            tools=len(sessions.registry),
        )

    @app.get("/tools")
    async def list_tools() -> list[dict[str, Any]]:
        return [d.to_openai_format() for d in sessions.registry.get_definitions()]

    @app.post("/conversations/{conversation_id}/turns", response_model=ConversationResponse)
    async def run_turn(conversation_id: str, body: TurnRequest) -> ConversationResponse:
        """Run one turn through the agent.

        Errors map as follows: an unknown name in ``tools`` is 400, any other
        tool failure is 502, a provider rate limit is 429, and any other
        provider failure is 502. History written before the failure is kept.
        """
        logger.info("POST /conversations/%s/turns: message=%r", conversation_id, body.message)

        if body.tools is not None:
            unknown = [name for name in body.tools if name not in sessions.registry]
            if unknown:
                raise HTTPException(status_code=400, detail=f"Unknown tools: {unknown}")

        try:
            history = await sessions.run_turn(conversation_id, body.message, body.tools)
        except ProviderRateLimitError as exc:
            raise HTTPException(status_code=429, detail=str(exc)) from exc
        except ProviderError as exc:
            raise HTTPException(status_code=502, detail=str(exc)) from exc
        except UnknownToolError as exc:
            logger.warning("Model requested unknown tool %r", exc.tool_name)
            raise HTTPException(status_code=502, detail=str(exc)) from exc
        except ToolError as exc:
            logger.error("Tool %r failed: %s", exc.tool_name, exc)
            raise HTTPException(status_code=502, detail=str(exc)) from exc

        return ConversationResponse(
            conversation_id=conversation_id,
            messages=to_openai_messages(history),
        )

    @app.get("/conversations/{conversation_id}/messages", response_model=ConversationResponse)
    async def get_messages(conversation_id: str) -> ConversationResponse:
        return ConversationResponse(
            conversation_id=conversation_id,
            messages=to_openai_messages(sessions.history(conversation_id)),
        )

    @app.delete("/conversations/{conversation_id}", status_code=204)
    async def clear_conversation(conversation_id: str) -> None:
        logger.info("DELETE /conversations/%s", conversation_id)
        sessions.clear(conversation_id)

    @app.delete("/conversations", status_code=204)
    async def clear_all_conversations() -> None:
        logger.info("DELETE /conversations (all)")
        sessions.clear_all()

    return app
