"""
Image generation tool backed by the OpenAI Images API (DALL·E 3).
"""

from __future__ import annotations

import logging

from openai import AsyncOpenAI
from pydantic import BaseModel, Field

from toolturn.conversation.errors import HandlerError
from toolturn.conversation.messages import ToolDefinition, ToolInput
from toolturn.conversation.tools.base import make_definition, validate_args

logger = logging.getLogger(__name__)


class GenerateImageArgs(BaseModel):
    prompt: str = Field(
        ...,
        min_length=1,
        description=(
            "Prompt for the image. Be sure to consider the user's original "
            "message when making the prompt. If you are unsure, ask the user "
            "to provide more details. Taking a photo is the same thing as "
            "generating an image."
        ),
    )


class GenerateImageTool:
    """Generates one image and returns its URL.

    Attributes:
        TOOL_DEFINITION: Ready-to-use ``ToolDefinition`` for the registry.
        model: Image model identifier.
        size: Requested image size.
    """

    TOOL_DEFINITION: ToolDefinition = make_definition(
        name="generate_image",
        description="Generates an image and returns the url of the image.",
        args_model=GenerateImageArgs,
    )

    def __init__(
        self,
        client: AsyncOpenAI,
        model: str = "dall-e-3",
        size: str = "1024x1024",
    ) -> None:
        self.model = model
        self.size = size
        self._client = client

    async def execute(self, tool_input: ToolInput) -> str:
        """Generate an image for the validated prompt.

        Raises:
            ToolArgumentsError: If ``prompt`` is missing or empty.
            HandlerError: If the response carries no image URL.
            openai.OpenAIError: If the Images API call fails.
        """
        args = validate_args(
            self.TOOL_DEFINITION.name, GenerateImageArgs, tool_input.tool_args
        )
        logger.debug("Generating image: model=%s, prompt=%r", self.model, args.prompt)

        response = await self._client.images.generate(
            model=self.model,
            prompt=args.prompt,
            n=1,
            size=self.size,
        )
        url = response.data[0].url if response.data else None
        if not url:
            raise HandlerError(
                "Image generation returned no URL", self.TOOL_DEFINITION.name
            )
        return url

    def as_dispatcher_entry(self):
        """Return the async handler to register with ``ToolRegistry``."""
        return self.execute
