"""MCP tools exposed by the boilerplate server.

Copyright (C) 2024 MCP Boilerplate

This program is free software: you can redistribute it and/or modify
it under the terms of the GNU General Public License as published by
the Free Software Foundation, either version 3 of the License, or
(at your option) any later version.

This program is distributed in the hope that it will be useful,
but WITHOUT ANY WARRANTY; without even the implied warranty of
MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
GNU General Public License for more details.

You should have received a copy of the GNU General Public License
along with this program.  If not, see <https://www.gnu.org/licenses/>.
"""

import math
from typing import List, Union

from mcp.types import TextContent
from pydantic import BaseModel, Field

from .config import Settings
from .errors import ToolExecutionError
from .log import get_logger

logger = get_logger(__name__)

# Inputs are rejected above this magnitude; sums past it lose integer precision.
MAX_ADD_OPERAND = 1e15

SIMULATED_ERROR_NAME = "error"


# Pydantic models for structured tool inputs
class GreetInput(BaseModel):
    """Input model for the greet tool."""

    name: str = Field(description="The name of the person to greet.")
    greeting: str = Field(default="Hello", description="The greeting phrase to use (optional).")


class AddInput(BaseModel):
    """Input model for the add tool."""

    a: Union[int, float] = Field(description="The first number.")
    b: Union[int, float] = Field(description="The second number.")


def _text(text: str) -> List[TextContent]:
    return [TextContent(type="text", text=text)]


def _format_number(value: Union[int, float]) -> str:
    """Render a number the way a client expects to read it back (3.0 -> '3')."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def greet_tool(input_data: GreetInput, settings: Settings) -> List[TextContent]:
    """Greet someone, prefixed with the configured greeting prefix.

    Args:
        input_data: Validated greet input
        settings: Server settings supplying the greeting prefix

    Returns:
        A single text content item

    Raises:
        ToolExecutionError: If greeting fails. The name ``error`` (any case)
            always fails, to exercise the error path end to end.
    """
    tool_name = "greet"
    name, greeting = input_data.name, input_data.greeting
    logger.info(f"Executing {tool_name} tool", name=name, greeting=greeting, tool_name=tool_name)
    try:
        if name.lower() == SIMULATED_ERROR_NAME:
            raise RuntimeError("Simulated error during greeting.")
        return _text(f"{settings.greeting_prefix}{greeting}, {name}!")
    except Exception as e:
        logger.error(
            f"Error executing {tool_name} tool",
            name=name,
            greeting=greeting,
            tool_name=tool_name,
            exc_info=True,
        )
        raise ToolExecutionError(
            tool_name, str(e), cause=e, context={"name": name, "greeting": greeting}
        ) from e


def add_tool(input_data: AddInput) -> List[TextContent]:
    """Add two numbers.

    Raises:
        ToolExecutionError: If either operand is not finite or exceeds 1e15 in
            magnitude.
    """
    tool_name = "add"
    a, b = input_data.a, input_data.b
    logger.info(f"Executing {tool_name} tool", a=a, b=b, tool_name=tool_name)
    try:
        for operand in (a, b):
            if not math.isfinite(operand) or abs(operand) > MAX_ADD_OPERAND:
                raise ValueError(
                    f"Operand {operand} is out of range; magnitude must not exceed {MAX_ADD_OPERAND:.0e}."
                )
        total = a + b
        return _text(
            f"The sum of {_format_number(a)} and {_format_number(b)} is {_format_number(total)}."
        )
    except Exception as e:
        logger.error(f"Error executing {tool_name} tool", a=a, b=b, tool_name=tool_name, exc_info=True)
        raise ToolExecutionError(tool_name, str(e), cause=e, context={"a": a, "b": b}) from e
