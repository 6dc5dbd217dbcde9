"""BaseTool: the typed tool contract.

A tool is a class with a definition, zero or more argument shapes and an
async `call`. Subclasses are completed by the `@tool` decorator, which
fills in the class-level metadata and descriptor:

    >>> @argument("number", "The number to take the square root of", example="16.0")
    ... class NumberArgument(ToolArgument):
    ...     value: float
    ...
    >>> @tool("square_root", "Calculate the square root of a number", arguments=(NumberArgument,))
    ... class SquareRootTool(BaseTool[NumberArgument]):
    ...     async def call(self, arguments):
    ...         arg = self.first_argument(arguments)
    ...         if arg.value < 0:
    ...             raise ExecutionFailed("Cannot take square root of a negative number")
    ...         return Number(math.sqrt(arg.value))

Tools keep no state between calls.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import TYPE_CHECKING, ClassVar, Generic, TypeVar

from .argument import EmptyArgument, ToolArgument, decode_argument
from .definition import ToolDefinition, ToolDescriptor, build_descriptor

if TYPE_CHECKING:
    from ..value import Value

TArg = TypeVar("TArg", bound=ToolArgument)


class BaseTool(ABC, Generic[TArg]):
    """Abstract base class for all tools.

    Class attributes (set by `@tool`):
        definition: Name, description and instructions
        argument_types: Declared argument shapes, in declaration order
        argument_type: First declared shape, or EmptyArgument
        tool_descriptor: Structured descriptor
        json_description: Pretty JSON of the descriptor
    """

    definition: ClassVar[ToolDefinition]
    argument_types: ClassVar[tuple[type[ToolArgument], ...]] = ()
    argument_type: ClassVar[type[ToolArgument]] = EmptyArgument
    tool_descriptor: ClassVar[ToolDescriptor]
    json_description: ClassVar[str]

    @classmethod
    def _complete(cls, definition: ToolDefinition, argument_types: Sequence[type[ToolArgument]]) -> None:
        """Attach definition and descriptor to the class."""
        for shape in argument_types:
            if not shape.is_declared():
                raise TypeError(f"{shape.__name__} is not declared with @argument")
        cls.definition = definition
        cls.argument_types = tuple(argument_types)
        cls.argument_type = cls.argument_types[0] if cls.argument_types else EmptyArgument
        cls.tool_descriptor = build_descriptor(definition, cls.argument_types)
        cls.json_description = cls.tool_descriptor.to_json()

    # ─────────────────────────────────────────────────────────────────
    # Metadata shortcuts
    # ─────────────────────────────────────────────────────────────────

    @property
    def name(self) -> str:
        return self.definition.name

    @property
    def description(self) -> str:
        return self.definition.description

    @property
    def instructions(self) -> str:
        return self.definition.instructions

    # ─────────────────────────────────────────────────────────────────
    # Execution
    # ─────────────────────────────────────────────────────────────────

    @abstractmethod
    async def call(self, arguments: Sequence[TArg]) -> Value:
        """Execute the tool.

        Raises:
            ToolError: NoArguments / InvalidArgumentType for bad input,
                ExecutionFailed for tool-specific failures
        """
        ...

    def first_argument(self, arguments: Sequence[object]) -> TArg:
        """First argument checked against this tool's argument type."""
        return decode_argument(arguments, self.argument_type)  # type: ignore[return-value]

    def __repr__(self) -> str:
        definition = getattr(type(self), "definition", None)
        name = definition.name if definition else None
        return f"{type(self).__name__}(name={name!r})"
