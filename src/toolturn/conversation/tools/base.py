"""
Shared helpers for tool implementations.

Each tool declares a pydantic ``Args`` model. Its JSON schema becomes the
``parameters`` of the tool's ``ToolDefinition``, and the same model validates
the arguments the model sends before the tool acts on them.
"""

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from toolturn.conversation.errors import ToolArgumentsError
from toolturn.conversation.messages import ToolDefinition

ArgsT = TypeVar("ArgsT", bound=BaseModel)


def make_definition(name: str, description: str, args_model: type[BaseModel]) -> ToolDefinition:
    """Build a ``ToolDefinition`` whose parameters come from *args_model*."""
    return ToolDefinition(
        name=name,
        description=description,
        parameters=args_model.model_json_schema(),
    )


def validate_args(tool_name: str, args_model: type[ArgsT], tool_args: dict[str, Any]) -> ArgsT:
    """Validate *tool_args* against *args_model*.

    Raises:
        ToolArgumentsError: If the arguments do not match the model.
    """
    try:
        return args_model.model_validate(tool_args)
    except ValidationError as exc:
        raise ToolArgumentsError(
            f"Invalid arguments for tool {tool_name!r}: {exc}", tool_name
        ) from exc
