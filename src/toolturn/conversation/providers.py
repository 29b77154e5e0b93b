"""
Model invoker abstractions for the toolturn conversation package.

Defines the ``ModelInvoker`` Protocol so the ``Agent`` can work with any
OpenAI-compatible backend (OpenAI, Ollama, Claude via LiteLLM proxy, etc.)
without being tied to a specific vendor or SDK.

The concrete implementation, ``OpenAICompatibleProvider``, uses
``openai.AsyncOpenAI`` which supports any OpenAI-compatible base URL.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol, Sequence, runtime_checkable

from openai import APIConnectionError, APIStatusError, AsyncOpenAI, RateLimitError

from toolturn.config import DEFAULT_SYSTEM_PROMPT
from toolturn.conversation.errors import (
    ProviderAPIError,
    ProviderConnectionError,
    ProviderRateLimitError,
)
from toolturn.conversation.messages import (
    AssistantMessage,
    Message,
    ToolDefinition,
    ToolInvocation,
    to_openai_messages,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# ModelInvoker Protocol
# ---------------------------------------------------------------------------


@runtime_checkable
class ModelInvoker(Protocol):
    """Protocol for LLM backends used by ``Agent``.

    Any object implementing this Protocol can serve as the model invoker.
    The default implementation is ``OpenAICompatibleProvider``.
    """

    async def invoke(
        self,
        history: Sequence[Message],
        tools: Sequence[ToolDefinition],
    ) -> AssistantMessage:
        """Send the conversation to the LLM and return its single reply.

        Args:
            history: The full conversation history, oldest first.
            tools: The tool definitions offered for this call.

        Returns:
            The assistant message, carrying content, tool calls, or both.

        Raises:
            ProviderRateLimitError: If the API returns a 429 rate-limit response.
            ProviderConnectionError: If the API endpoint cannot be reached.
            ProviderAPIError: For other API-level failures.
        """
        ...


# ---------------------------------------------------------------------------
# Concrete provider implementation
# ---------------------------------------------------------------------------


class OpenAICompatibleProvider:
    """Model invoker backed by any OpenAI-compatible chat completions endpoint.

    Attributes:
        base_url: The API base URL.
        model: The model identifier.
        temperature: Sampling temperature (0.0–2.0).
        system_prompt: Prepended to every request. It is never written to the
            conversation history.
    """

    def __init__(
        self,
        base_url: str = "https://api.openai.com/v1",
        model: str = "gpt-4o-mini",
        api_key: str | None = None,
        temperature: float = 0.1,
        system_prompt: str | None = DEFAULT_SYSTEM_PROMPT,
    ) -> None:
        self.base_url = base_url
        self.model = model
        self.temperature = temperature
        self.system_prompt = system_prompt
        self._client = AsyncOpenAI(base_url=base_url, api_key=api_key)

    def _build_messages(self, history: Sequence[Message]) -> list[dict[str, Any]]:
        messages: list[dict[str, Any]] = []
        if self.system_prompt:
            messages.append({"role": "system", "content": self.system_prompt})
        messages.extend(to_openai_messages(list(history)))
        return messages

    async def invoke(
        self,
        history: Sequence[Message],
        tools: Sequence[ToolDefinition],
    ) -> AssistantMessage:
        """Call the LLM and convert its first choice into an ``AssistantMessage``.

        Tool-call arguments are passed through as the raw strings the model
        produced; parsing them is the dispatcher's job.

        Raises:
            ProviderRateLimitError: If the API returns a 429 response.
            ProviderConnectionError: If the API endpoint cannot be reached.
            ProviderAPIError: For other API-level failures (e.g. 4xx/5xx).
        """
        messages = self._build_messages(history)
        kwargs: dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": self.temperature,
        }
        if tools:
            kwargs["tools"] = [t.to_openai_format() for t in tools]
            kwargs["tool_choice"] = "auto"
            # At most one tool runs per turn, so ask for at most one.
            kwargs["parallel_tool_calls"] = False

        logger.debug(
            "LLM request: model=%s, messages=%d, tools=%d",
            self.model,
            len(messages),
            len(tools),
        )

        try:
            response = await self._client.chat.completions.create(**kwargs)
        except RateLimitError as exc:
            logger.warning("LLM rate limit exceeded: %s", exc)
            raise ProviderRateLimitError(f"Rate limit exceeded: {exc}") from exc
        except APIConnectionError as exc:
            logger.error("LLM connection failed: %s", exc)
            raise ProviderConnectionError(
                f"Could not connect to LLM endpoint: {exc}"
            ) from exc
        except APIStatusError as exc:
            logger.error("LLM API error %d: %s", exc.status_code, exc)
            raise ProviderAPIError(
                f"LLM API returned status {exc.status_code}: {exc}",
                status_code=exc.status_code,
            ) from exc

        message = response.choices[0].message
        tool_calls = [
            ToolInvocation(
                id=tc.id,
                name=tc.function.name,
                arguments=tc.function.arguments,
            )
            for tc in (message.tool_calls or [])
        ]

        logger.debug(
            "LLM response: finish_reason=%s, tool_calls=%d, tokens=%s",
            response.choices[0].finish_reason,
            len(tool_calls),
            response.usage.total_tokens if response.usage else "n/a",
        )

        return AssistantMessage(content=message.content, tool_calls=tool_calls or None)
