"""
Reddit content lookup tool.

Reads the public JSON listing of a subreddit and returns a compact summary of
each post for the model to pick from.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx
from pydantic import BaseModel

from toolturn.conversation.messages import ToolDefinition, ToolInput
from toolturn.conversation.tools.base import make_definition, validate_args

logger = logging.getLogger(__name__)

_REDDIT_URL = "https://www.reddit.com/r/{subreddit}/.json"
# Reddit throttles requests that carry a default library user agent.
_USER_AGENT = "toolturn/0.1 (content lookup tool)"


class RedditArgs(BaseModel):
    """The reddit tool takes no arguments."""


class RedditTool:
    """Returns the current front page of one subreddit as a JSON string.

    Attributes:
        TOOL_DEFINITION: Ready-to-use ``ToolDefinition`` for the registry.
        subreddit: Subreddit to read (without the ``r/`` prefix).
        timeout: HTTP request timeout in seconds.
    """

    TOOL_DEFINITION: ToolDefinition = make_definition(
        name="reddit",
        description=(
            "Use this tool to get the latest posts from Reddit. It returns a "
            "JSON list with the title, link, subreddit, author, and upvotes "
            "of each post."
        ),
        args_model=RedditArgs,
    )

    def __init__(self, subreddit: str = "nba", timeout: float = 10.0) -> None:
        self.subreddit = subreddit
        self.timeout = timeout

    async def execute(self, tool_input: ToolInput) -> str:
        """Fetch the subreddit listing and summarise its posts.

        Raises:
            ToolArgumentsError: If the arguments do not match ``RedditArgs``.
            httpx.HTTPStatusError: On a non-2xx response.
            httpx.TimeoutException: If the request exceeds ``self.timeout``.
        """
        validate_args(self.TOOL_DEFINITION.name, RedditArgs, tool_input.tool_args)

        url = _REDDIT_URL.format(subreddit=self.subreddit)
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.get(url, headers={"User-Agent": _USER_AGENT})
            response.raise_for_status()
            data = response.json()

        posts = [_summarise(child["data"]) for child in data["data"]["children"]]
        logger.debug("Fetched %d post(s) from r/%s", len(posts), self.subreddit)
        return json.dumps(posts)

    def as_dispatcher_entry(self):
        """Return the async handler to register with ``ToolRegistry``."""
        return self.execute


def _summarise(post: dict[str, Any]) -> dict[str, Any]:
    return {
        "title": post.get("title"),
        "link": f"https://reddit.com{post.get('permalink', '')}",
        "subreddit": post.get("subreddit_name_prefixed"),
        "author": post.get("author"),
        "upvotes": post.get("ups"),
    }
