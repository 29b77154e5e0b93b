"""
Built-in tools for the toolturn agent.

Each tool module exposes a tool class with:

- ``TOOL_DEFINITION``: the ``ToolDefinition`` offered to the model.
- ``execute(tool_input)``: the async handler.
- ``as_dispatcher_entry()``: the handler to register with ``ToolRegistry``.

``build_default_registry()`` wires all of them from ``Settings``.
"""

from __future__ import annotations

from openai import AsyncOpenAI

from toolturn.config import Settings
from toolturn.conversation.tools.dad_joke import DadJokeTool
from toolturn.conversation.tools.generate_image import GenerateImageTool
from toolturn.conversation.tools.reddit import RedditTool
from toolturn.conversation.tools.registry import (
    AsyncToolHandler,
    ToolDispatcher,
    ToolRegistry,
)
from toolturn.conversation.tools.weather import WeatherTool


def build_default_registry(settings: Settings) -> ToolRegistry:
    """Return a registry holding every built-in tool."""
    images_client = AsyncOpenAI(
        base_url=settings.openai_base_url, api_key=settings.openai_api_key
    )
    tools = [
        DadJokeTool(timeout=settings.http_timeout),
        RedditTool(subreddit=settings.reddit_subreddit, timeout=settings.http_timeout),
        GenerateImageTool(client=images_client, model=settings.image_model),
        WeatherTool(timeout=settings.http_timeout),
    ]

    registry = ToolRegistry()
    for tool in tools:
        registry.register(tool.TOOL_DEFINITION, tool.as_dispatcher_entry())
    return registry


__all__ = [
    "AsyncToolHandler",
    "DadJokeTool",
    "GenerateImageTool",
    "RedditTool",
    "ToolDispatcher",
    "ToolRegistry",
    "WeatherTool",
    "build_default_registry",
]
