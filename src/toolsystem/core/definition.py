"""Tool metadata and the machine-readable descriptor derived from it.

A descriptor is what an agent reads to learn how to call a tool:

    {
      "arguments": [
        {"description": "...", "name": "query", "type": {"type": "string"}}
      ],
      "description": "Search the web for results based on a query string.",
      "example": {"arguments": {"query": "latest news on AI"}, "tool_name": "web_search"},
      "tool_name": "web_search"
    }

Descriptors are built once per tool at declaration time and never change.
"""

from __future__ import annotations

import types
from collections.abc import Sequence
from typing import TYPE_CHECKING, Literal, Union, get_args, get_origin

from pydantic import BaseModel, ConfigDict, Field

from ..codec import dump_model

if TYPE_CHECKING:
    from .argument import ToolArgument

TypeTag = Literal["string", "number", "integer", "boolean", "object"]

# Identity lookup; bool must never be confused with int here
_TYPE_TAGS: dict[object, TypeTag] = {
    bool: "boolean",
    int: "integer",
    float: "number",
    str: "string",
}


class ToolDefinition(BaseModel):
    """Identity and documentation of a tool.

    Attributes:
        name: Unique identifier, snake_case by convention (e.g. "web_search")
        description: What the tool does, shown to the agent
        instructions: Longer usage notes; empty when the tool declares none
    """

    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    instructions: str = ""


class ArgumentDefinition(BaseModel):
    """Metadata attached to every declared argument shape."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    example: str = Field(..., min_length=1)


class ArgumentTypeDescriptor(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: TypeTag


class ArgumentDescriptor(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    type: ArgumentTypeDescriptor


class ToolExample(BaseModel):
    model_config = ConfigDict(frozen=True)

    tool_name: str
    arguments: dict[str, bool | int | float | str] = Field(default_factory=dict)


class ToolDescriptor(BaseModel):
    """Structured tool schema. `example` is omitted from JSON when absent."""

    model_config = ConfigDict(frozen=True)

    tool_name: str
    description: str
    arguments: list[ArgumentDescriptor] = Field(default_factory=list)
    example: ToolExample | None = None

    def to_json(self) -> str:
        """Pretty JSON: sorted keys, 2-space indent, literal slashes."""
        return dump_model(self, pretty=True, exclude_none=True).decode()


# ─────────────────────────────────────────────────────────────────────────────
# Descriptor generation
# ─────────────────────────────────────────────────────────────────────────────

def infer_type_tag(annotation: object) -> TypeTag:
    """Map a field annotation to its descriptor type tag.

    ``X | None`` is inspected as ``X``. Anything unrecognized maps to
    ``"string"``.
    """
    if get_origin(annotation) in (Union, types.UnionType):
        members = [a for a in get_args(annotation) if a is not type(None)]
        if len(members) == 1:
            annotation = members[0]
    return _TYPE_TAGS.get(annotation, "string")


def shape_type_tag(shape: type[ToolArgument]) -> TypeTag:
    """Type tag of an argument shape, taken from its first declared field."""
    fields = iter(shape.model_fields.values())
    first = next(fields, None)
    return "string" if first is None else infer_type_tag(first.annotation)


def build_descriptor(definition: ToolDefinition, shapes: Sequence[type[ToolArgument]]) -> ToolDescriptor:
    """Build the descriptor for a tool from its definition and argument shapes.

    Shapes keep declaration order. The example maps each shape name to its
    example string; a tool with no shapes gets an example with no arguments.
    """
    arguments: list[ArgumentDescriptor] = []
    example_args: dict[str, bool | int | float | str] = {}
    for shape in shapes:
        arg = shape.argument_definition
        arguments.append(ArgumentDescriptor(
            name=arg.name,
            description=arg.description,
            type=ArgumentTypeDescriptor(type=shape_type_tag(shape)),
        ))
        example_args[arg.name] = arg.example
    return ToolDescriptor(
        tool_name=definition.name,
        description=definition.description,
        arguments=arguments,
        example=ToolExample(tool_name=definition.name, arguments=example_args),
    )
