"""The @tool decorator for tool classes and plain functions.

On a BaseTool subclass, `@tool` collects the nested `@argument` shapes in
declaration order and attaches definition and descriptor:

    >>> @tool("web_search", "Search the web for results based on a query string.")
    ... class WebSearchTool(BaseTool["WebSearchTool.Query"]):
    ...     @argument("query", "The query string to search the web for.", example="latest news on AI")
    ...     class Query(ToolArgument):
    ...         text: str
    ...
    ...     async def call(self, arguments):
    ...         return Text(f"Results for: {self.first_argument(arguments).text}")

On a function, it builds a FunctionTool instance. The function receives the
argument sequence and may be sync (run in a worker thread) or async:

    >>> @tool("greet", "Greet someone by name", arguments=(NameArgument,))
    ... def greet(arguments):
    ...     return Text(f"Hello, {arguments[0].name}!")
"""

from __future__ import annotations

import asyncio
import inspect
import re
from collections.abc import Awaitable, Callable, Sequence
from functools import wraps
from typing import TypeVar, overload

from ..log import get_logger
from ..value import Value, from_python
from .argument import ToolArgument
from .base import BaseTool
from .definition import ToolDefinition

logger = get_logger("tools")

T = TypeVar("T", bound=BaseTool)  # type: ignore[type-arg]

ToolFunction = Callable[[Sequence[ToolArgument]], object] | Callable[[Sequence[ToolArgument]], Awaitable[object]]


# ─────────────────────────────────────────────────────────────────────────────
# FunctionTool: BaseTool wrapper for functions
# ─────────────────────────────────────────────────────────────────────────────

class FunctionTool(BaseTool[ToolArgument]):
    """BaseTool implementation that wraps a decorated function.

    Each instance gets its own subclass so the class-level metadata of
    different function tools never collide.
    """

    def __init__(
        self,
        func: ToolFunction,
        definition: ToolDefinition,
        argument_types: Sequence[type[ToolArgument]] = (),
    ) -> None:
        self._func = func
        self._is_async = inspect.iscoroutinefunction(func)
        cls = type(f"FunctionTool_{definition.name}", (FunctionTool,), {})
        cls._complete(definition, argument_types)
        self.__class__ = cls

    async def call(self, arguments: Sequence[ToolArgument]) -> Value:
        """Run the wrapped function; plain Python results are wrapped in a Value."""
        if self._is_async:
            result = await self._func(arguments)  # type: ignore[misc]
        else:
            result = await asyncio.to_thread(self._func, arguments)
        return result if isinstance(result, Value) else from_python(result)

    @property
    def func(self) -> ToolFunction:
        """Access the original wrapped function."""
        return self._func


# ─────────────────────────────────────────────────────────────────────────────
# The @tool Decorator
# ─────────────────────────────────────────────────────────────────────────────

@overload
def tool(name: type[T], /) -> type[T]: ...

@overload
def tool(name: ToolFunction, /) -> FunctionTool: ...

@overload
def tool(
    name: str | None = None,
    description: str | None = None,
    instructions: str = "",
    *,
    arguments: Sequence[type[ToolArgument]] | None = None,
) -> Callable[[type[T] | ToolFunction], type[T] | FunctionTool]: ...


def tool(
    name: str | type[T] | ToolFunction | None = None,
    description: str | None = None,
    instructions: str = "",
    *,
    arguments: Sequence[type[ToolArgument]] | None = None,
) -> type[T] | FunctionTool | Callable[[type[T] | ToolFunction], type[T] | FunctionTool]:
    """Declare a tool from a BaseTool subclass or a function.

    Args:
        name: Tool name (defaults to the class/function name in snake_case)
        description: Tool description (defaults to first line of docstring)
        instructions: Optional usage notes carried in the definition
        arguments: Argument shapes, in order. For classes, defaults to the
            nested `@argument` classes in declaration order.

    Raises:
        ValueError: no description given and no docstring to derive one from
        TypeError: target is neither a BaseTool subclass nor callable
    """
    def decorator(target: type[T] | ToolFunction) -> type[T] | FunctionTool:
        tool_name = name if isinstance(name, str) else _to_snake_case(target.__name__)
        tool_desc = description or _extract_description(target.__doc__)
        if not tool_desc:
            raise ValueError(f"Tool '{tool_name}' needs a description")
        definition = ToolDefinition(name=tool_name, description=tool_desc, instructions=instructions)

        if isinstance(target, type):
            if not issubclass(target, BaseTool):
                raise TypeError(f"@tool requires a BaseTool subclass or a function, got {target!r}")
            shapes = tuple(arguments) if arguments is not None else collect_arguments(target)
            target._complete(definition, shapes)
            logger.debug(f"Declared tool '{tool_name}' with {len(shapes)} argument(s)")
            return target

        if not callable(target):
            raise TypeError(f"@tool requires a BaseTool subclass or a function, got {target!r}")
        instance = FunctionTool(target, definition, tuple(arguments or ()))
        wraps(target)(instance)
        logger.debug(f"Declared function tool '{tool_name}'")
        return instance

    # Support both @tool and @tool(...) syntax
    if name is not None and not isinstance(name, str):
        return decorator(name)
    return decorator


def collect_arguments(cls: type) -> tuple[type[ToolArgument], ...]:
    """Nested `@argument` classes of cls, in declaration order."""
    return tuple(
        member for member in vars(cls).values()
        if isinstance(member, type) and issubclass(member, ToolArgument) and member.is_declared()
    )


# ─────────────────────────────────────────────────────────────────────────────
# Utilities
# ─────────────────────────────────────────────────────────────────────────────

def _to_snake_case(name: str) -> str:
    """Convert CamelCase or mixed to snake_case."""
    s1 = re.sub(r"(.)([A-Z][a-z]+)", r"\1_\2", name)
    return re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", s1).lower()


def _extract_description(docstring: str | None) -> str | None:
    """First line of a docstring."""
    if not docstring or not docstring.strip():
        return None
    return docstring.strip().splitlines()[0].strip()
