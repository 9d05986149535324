"""Conversion of tool actions into ``ToolDefinition`` records."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from castor.models import ToolDefinition
from castor.schema import any_schema, to_json_schema

if TYPE_CHECKING:
    from castor.actions import Action


def to_tool_definition(tool: Action[Any, Any]) -> ToolDefinition:
    """Describe *tool* for a backend.

    A tool without a declared output schema gets an open schema: it makes no
    output promise, which is different from producing no output.
    """
    output_schema = (
        any_schema()
        if tool.output_schema is None
        else to_json_schema(tool.output_schema)
    )
    return ToolDefinition(
        name=tool.name,
        input_schema=to_json_schema(tool.input_schema),
        output_schema=output_schema,
        description=tool.description,
    )
