"""Unit tests for toolturn.conversation.providers."""

from __future__ import annotations

from types import SimpleNamespace
from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest
from openai import APIConnectionError, APIStatusError, RateLimitError

from toolturn.conversation.errors import (
    ProviderAPIError,
    ProviderConnectionError,
    ProviderError,
    ProviderRateLimitError,
)
from toolturn.conversation.messages import (
    AssistantMessage,
    ToolDefinition,
    ToolInvocation,
    ToolMessage,
    UserMessage,
)
from toolturn.conversation.providers import ModelInvoker, OpenAICompatibleProvider

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

_REQUEST = httpx.Request("POST", "https://api.test/v1/chat/completions")

_JOKE_DEF = ToolDefinition(name="dad_joke", description="Get a dad joke.")


def _completion(
    content: str | None = None,
    tool_calls: list[tuple[str, str, str]] | None = None,
    finish_reason: str = "stop",
) -> SimpleNamespace:
    """Build an object shaped like an OpenAI ChatCompletion."""
    calls = None
    if tool_calls:
        calls = [
            SimpleNamespace(
                id=id_,
                type="function",
                function=SimpleNamespace(name=name, arguments=args),
            )
            for id_, name, args in tool_calls
        ]
    message = SimpleNamespace(content=content, tool_calls=calls)
    return SimpleNamespace(
        choices=[SimpleNamespace(message=message, finish_reason=finish_reason)],
        usage=SimpleNamespace(total_tokens=42),
    )


def _make_provider(create: AsyncMock, **kwargs: Any) -> OpenAICompatibleProvider:
    with patch("toolturn.conversation.providers.AsyncOpenAI") as mock_cls:
        mock_client = MagicMock()
        mock_client.chat.completions.create = create
        mock_cls.return_value = mock_client
        return OpenAICompatibleProvider(**kwargs)


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------


def test_provider_stores_config() -> None:
    with patch("toolturn.conversation.providers.AsyncOpenAI") as mock_cls:
        provider = OpenAICompatibleProvider(
            base_url="http://localhost:11434/v1",
            model="llama3.1:8b",
            api_key="ollama",
            temperature=0.5,
        )

    assert provider.base_url == "http://localhost:11434/v1"
    assert provider.model == "llama3.1:8b"
    assert provider.temperature == 0.5
    mock_cls.assert_called_once_with(base_url="http://localhost:11434/v1", api_key="ollama")


def test_provider_satisfies_model_invoker_protocol() -> None:
    provider = _make_provider(AsyncMock())
    assert isinstance(provider, ModelInvoker)


# ---------------------------------------------------------------------------
# invoke: request shape
# ---------------------------------------------------------------------------


@pytest.mark.anyio
async def test_invoke_prepends_system_prompt_and_renders_history() -> None:
    create = AsyncMock(return_value=_completion(content="hi"))
    provider = _make_provider(create, system_prompt="You are Troll.")
    history = [
        UserMessage(content="joke"),
        AssistantMessage(tool_calls=[ToolInvocation("c1", "dad_joke", "{}")]),
        ToolMessage(content="ha", tool_call_id="c1"),
    ]

    await provider.invoke(history, [])

    messages = create.call_args.kwargs["messages"]
    assert messages[0] == {"role": "system", "content": "You are Troll."}
    assert messages[1] == {"role": "user", "content": "joke"}
    assert messages[2]["tool_calls"][0]["function"]["name"] == "dad_joke"
    assert messages[3] == {"role": "tool", "content": "ha", "tool_call_id": "c1"}


@pytest.mark.anyio
async def test_invoke_without_system_prompt() -> None:
    create = AsyncMock(return_value=_completion(content="hi"))
    provider = _make_provider(create, system_prompt=None)

    await provider.invoke([UserMessage(content="hello")], [])

    assert create.call_args.kwargs["messages"] == [{"role": "user", "content": "hello"}]


@pytest.mark.anyio
async def test_invoke_offers_tools_one_call_at_a_time() -> None:
    create = AsyncMock(return_value=_completion(content="hi"))
    provider = _make_provider(create)

    await provider.invoke([UserMessage(content="hello")], [_JOKE_DEF])

    kwargs = create.call_args.kwargs
    assert kwargs["tools"] == [_JOKE_DEF.to_openai_format()]
    assert kwargs["tool_choice"] == "auto"
    assert kwargs["parallel_tool_calls"] is False


@pytest.mark.anyio
async def test_invoke_without_tools_sends_no_tool_kwargs() -> None:
    create = AsyncMock(return_value=_completion(content="hi"))
    provider = _make_provider(create)

    await provider.invoke([UserMessage(content="hello")], [])

    kwargs = create.call_args.kwargs
    assert "tools" not in kwargs
    assert "parallel_tool_calls" not in kwargs


# ---------------------------------------------------------------------------
# invoke: response conversion
# ---------------------------------------------------------------------------


@pytest.mark.anyio
async def test_invoke_returns_plain_content() -> None:
    provider = _make_provider(AsyncMock(return_value=_completion(content="Hello!")))

    reply = await provider.invoke([UserMessage(content="hello")], [])

    assert reply == AssistantMessage(content="Hello!")
    assert reply.tool_calls is None


@pytest.mark.anyio
async def test_invoke_keeps_raw_tool_arguments() -> None:
    completion = _completion(
        tool_calls=[("call_1", "generate_image", '{"prompt": "a sunset"}')],
        finish_reason="tool_calls",
    )
    provider = _make_provider(AsyncMock(return_value=completion))

    reply = await provider.invoke([UserMessage(content="draw")], [_JOKE_DEF])

    assert reply.content is None
    assert reply.tool_calls == (
        ToolInvocation(id="call_1", name="generate_image", arguments='{"prompt": "a sunset"}'),
    )


@pytest.mark.anyio
async def test_invoke_does_not_parse_malformed_arguments() -> None:
    completion = _completion(tool_calls=[("c1", "dad_joke", "{not valid json")])
    provider = _make_provider(AsyncMock(return_value=completion))

    reply = await provider.invoke([UserMessage(content="joke")], [_JOKE_DEF])

    assert reply.tool_calls[0].arguments == "{not valid json"


# ---------------------------------------------------------------------------
# invoke: error mapping
# ---------------------------------------------------------------------------


@pytest.mark.anyio
async def test_invoke_maps_rate_limit() -> None:
    exc = RateLimitError(
        "rate limit", response=httpx.Response(429, request=_REQUEST), body=None
    )
    provider = _make_provider(AsyncMock(side_effect=exc))

    with pytest.raises(ProviderRateLimitError) as exc_info:
        await provider.invoke([UserMessage(content="hi")], [])

    assert exc_info.value.__cause__ is exc


@pytest.mark.anyio
async def test_invoke_maps_connection_error() -> None:
    exc = APIConnectionError(request=_REQUEST)
    provider = _make_provider(AsyncMock(side_effect=exc))

    with pytest.raises(ProviderConnectionError):
        await provider.invoke([UserMessage(content="hi")], [])


@pytest.mark.anyio
async def test_invoke_maps_status_error_with_code() -> None:
    exc = APIStatusError(
        "server error", response=httpx.Response(503, request=_REQUEST), body=None
    )
    provider = _make_provider(AsyncMock(side_effect=exc))

    with pytest.raises(ProviderAPIError) as exc_info:
        await provider.invoke([UserMessage(content="hi")], [])

    assert exc_info.value.status_code == 503
    assert isinstance(exc_info.value, ProviderError)
