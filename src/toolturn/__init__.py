"""
toolturn - a conversational agent with a single-step tool-calling cycle.

Each turn records the user message, asks the model for one reply, and runs at
most one requested tool, recording its result for the model's next call.

Quick Start:
    >>> from toolturn import Agent, OpenAICompatibleProvider, get_settings
    >>> from toolturn.conversation.tools import build_default_registry
    >>> settings = get_settings()
    >>> agent = Agent(
    ...     provider=OpenAICompatibleProvider(model=settings.openai_model),
    ...     registry=build_default_registry(settings),
    ... )
    >>> history = await agent.run_turn("tell me a dad joke")
"""

from toolturn.config import Settings, get_settings
from toolturn.conversation import Agent, ConversationStore, OpenAICompatibleProvider

__version__ = "0.1.0"
__all__ = [
    "Agent",
    "ConversationStore",
    "OpenAICompatibleProvider",
    "Settings",
    "get_settings",
]
