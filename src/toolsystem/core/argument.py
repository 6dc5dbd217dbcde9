"""Argument shapes: typed inputs a tool accepts.

An argument shape is a frozen pydantic model tagged with `@argument`:

    >>> @argument("number", "The number to take the square root of", example="16.0")
    ... class NumberArgument(ToolArgument):
    ...     value: float
    ...
    >>> NumberArgument.argument_definition.example
    '16.0'

The example is mandatory. Declaring a shape without one fails immediately
with MissingExampleError, so no tool can publish a descriptor with a blank
example.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import ClassVar, TypeVar

from pydantic import BaseModel, ConfigDict

from ..errors import InvalidArgumentType, MissingExampleError, NoArguments
from .definition import ArgumentDefinition

A = TypeVar("A", bound="ToolArgument")


class ToolArgument(BaseModel):
    """Base for argument shapes. Subclasses are immutable value objects."""

    model_config = ConfigDict(frozen=True)

    argument_definition: ClassVar[ArgumentDefinition]

    @classmethod
    def is_declared(cls) -> bool:
        """True when this class itself was tagged with `@argument`."""
        return "argument_definition" in vars(cls)


class EmptyArgument(ToolArgument):
    """Argument type of tools that take no input."""


def argument(name: str, description: str, example: str | None = None) -> Callable[[type[A]], type[A]]:
    """Declare an argument shape.

    Args:
        name: Argument name as it appears in the descriptor and in tool calls
        description: What the argument means
        example: Non-empty example value, rendered into the descriptor example

    Raises:
        MissingExampleError: example is missing or empty
    """
    if not example:
        raise MissingExampleError(name)
    definition = ArgumentDefinition(name=name, description=description, example=example)

    def decorator(cls: type[A]) -> type[A]:
        if not (isinstance(cls, type) and issubclass(cls, ToolArgument)):
            raise TypeError(f"@argument requires a ToolArgument subclass, got {cls!r}")
        cls.argument_definition = definition
        return cls

    return decorator


def decode_argument(arguments: Sequence[object], cls: type[A]) -> A:
    """Return the first argument, checked against the expected shape.

    Raises:
        NoArguments: arguments is empty
        InvalidArgumentType: the first argument is not an instance of cls
    """
    if not arguments:
        raise NoArguments()
    first = arguments[0]
    if not isinstance(first, cls):
        raise InvalidArgumentType(f"expected {cls.__name__}, got {type(first).__name__}")
    return first
