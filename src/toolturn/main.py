"""
toolturn - Main Entry Point.

Usage:
    toolturn run "tell me a dad joke"
    toolturn run "generate an image of a sunset" --tool generate_image
    toolturn serve --port 8765
"""

import argparse
import asyncio
import logging
import sys
from typing import Sequence

from toolturn.config import Settings, get_settings
from toolturn.conversation.agent import Agent
from toolturn.conversation.errors import AgentError
from toolturn.conversation.messages import AssistantMessage, Message, ToolMessage
from toolturn.conversation.providers import OpenAICompatibleProvider
from toolturn.conversation.session import SessionManager
from toolturn.conversation.tools import build_default_registry

logger = logging.getLogger(__name__)


def build_provider(settings: Settings) -> OpenAICompatibleProvider:
    return OpenAICompatibleProvider(
        base_url=settings.openai_base_url,
        model=settings.openai_model,
        api_key=settings.openai_api_key,
        temperature=settings.openai_temperature,
        system_prompt=settings.system_prompt,
    )


def build_sessions(settings: Settings) -> SessionManager:
    """Wire the provider and built-in tools into a ``SessionManager``."""
    return SessionManager(
        provider=build_provider(settings),
        registry=build_default_registry(settings),
    )


def format_message(message: Message) -> str:
    """Render one message as a labelled console line."""
    if isinstance(message, AssistantMessage):
        if message.tool_calls:
            calls = ", ".join(f"{tc.name}({tc.arguments})" for tc in message.tool_calls)
            return f"[assistant] requested tool: {calls}"
        return f"[assistant] {message.content or ''}"
    if isinstance(message, ToolMessage):
        return f"[tool:{message.tool_call_id}] {message.content}"
    return f"[{message.role}] {message.content}"


async def run_once(settings: Settings, message: str, tool_names: Sequence[str] | None) -> int:
    """Run a single turn and print the resulting history."""
    registry = build_default_registry(settings)
    agent = Agent(provider=build_provider(settings), registry=registry)
    try:
        tools = registry.get_definitions(tool_names)
        history = await agent.run_turn(message, tools)
    except AgentError as exc:
        logger.error("Turn failed: %s", exc)
        for entry in agent.store.all():
            print(format_message(entry))
        return 1

    for entry in history:
        print(format_message(entry))
    return 0


def serve(settings: Settings, host: str, port: int) -> None:
    """Serve the REST API with uvicorn."""
    import uvicorn

    from toolturn.conversation.server import create_app

    app = create_app(build_sessions(settings))
    logger.info("Starting REST API server on %s:%d", host, port)
    uvicorn.run(app, host=host, port=port, log_level=settings.log_level.lower())


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="toolturn",
        description="Conversational agent with a single-step tool-calling cycle",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable DEBUG logging",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Run one conversation turn")
    run_parser.add_argument("message", help="The user message")
    run_parser.add_argument(
        "--tool",
        dest="tools",
        action="append",
        metavar="NAME",
        help="Offer only this tool (repeatable; default: all tools)",
    )

    serve_parser = subparsers.add_parser("serve", help="Serve the REST API")
    serve_parser.add_argument("--host", default=settings.host)
    serve_parser.add_argument("--port", type=int, default=settings.port)
    return parser


def cli_main(argv: Sequence[str] | None = None) -> int:
    """Entry point for the toolturn console script."""
    settings = get_settings()
    args = build_parser(settings).parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if args.command == "serve":
        serve(settings, args.host, args.port)
        return 0
    return asyncio.run(run_once(settings, args.message, args.tools))


if __name__ == "__main__":
    sys.exit(cli_main())
