"""
Dad joke tool.

Fetches a random joke from https://icanhazdadjoke.com/ (no API key needed).
"""

from __future__ import annotations

import logging

import httpx
from pydantic import BaseModel

from toolturn.conversation.messages import ToolDefinition, ToolInput
from toolturn.conversation.tools.base import make_definition, validate_args

logger = logging.getLogger(__name__)

_DAD_JOKE_URL = "https://icanhazdadjoke.com/"


class DadJokeArgs(BaseModel):
    """The dad joke tool takes no arguments."""


class DadJokeTool:
    """Returns a random dad joke as plain text.

    Attributes:
        TOOL_DEFINITION: Ready-to-use ``ToolDefinition`` for the registry.
        timeout: HTTP request timeout in seconds.
    """

    TOOL_DEFINITION: ToolDefinition = make_definition(
        name="dad_joke",
        description=(
            "Use this tool to get a dad joke when the user asks for a joke "
            "or wants a laugh."
        ),
        args_model=DadJokeArgs,
    )

    def __init__(self, timeout: float = 10.0) -> None:
        self.timeout = timeout

    async def execute(self, tool_input: ToolInput) -> str:
        """Fetch one joke.

        Raises:
            ToolArgumentsError: If the arguments do not match ``DadJokeArgs``.
            httpx.HTTPStatusError: On a non-2xx response.
            httpx.TimeoutException: If the request exceeds ``self.timeout``.
        """
        validate_args(self.TOOL_DEFINITION.name, DadJokeArgs, tool_input.tool_args)

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.get(
                _DAD_JOKE_URL, headers={"Accept": "application/json"}
            )
            response.raise_for_status()
            joke: str = response.json()["joke"]

        logger.debug("Fetched dad joke (%d chars)", len(joke))
        return joke

    def as_dispatcher_entry(self):
        """Return the async handler to register with ``ToolRegistry``."""
        return self.execute
