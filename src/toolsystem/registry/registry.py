"""Dynamic dispatch registry: routes tool calls by name to handlers.

Handlers take a ToolCall and return a string (or an awaitable of one).
Typed tools are bridged with `register_tool`, which validates the call's
arguments into the tool's argument shape before invoking it.

    >>> registry = get_registry()
    >>> registry.register_tool(SquareRootTool())
    >>> @registry.handler("echo")
    ... def echo(call):
    ...     return call.get_string("text") or ""
    ...
    >>> await registry.handle_tool(ToolCall(tool_name="square_root", arguments={"number": 16.0}))
    '4.0'
"""

from __future__ import annotations

import inspect
import threading
from collections.abc import Awaitable, Callable
from typing import Any, TypeAlias

from pydantic import ValidationError

from ..core import BaseTool, EmptyArgument, ToolArgument
from ..errors import InvalidArgumentType, UnknownTool
from ..log import get_logger
from .call import ToolCall, ToolResponse

logger = get_logger("registry")

ToolHandler: TypeAlias = Callable[[ToolCall], str | Awaitable[str]]


class ToolRegistry:
    """Name to handler map for dispatching inbound tool calls.

    Registration and lookup are thread-safe. Handlers run outside the lock,
    so concurrent dispatches never block each other.
    """

    __slots__ = ("_handlers", "_lock")

    def __init__(self) -> None:
        self._handlers: dict[str, ToolHandler] = {}
        self._lock = threading.RLock()

    # ─────────────────────────────────────────────────────────────────
    # Registration
    # ─────────────────────────────────────────────────────────────────

    def register(self, name: str, handler: ToolHandler) -> None:
        """Register a handler. Re-registering a name replaces the old handler."""
        with self._lock:
            replaced = name in self._handlers
            self._handlers[name] = handler
        logger.debug(f"Registered handler '{name}'" + (" (replaced)" if replaced else ""))

    def handler(self, name: str) -> Callable[[ToolHandler], ToolHandler]:
        """Decorator form of `register`."""
        def decorator(fn: ToolHandler) -> ToolHandler:
            self.register(name, fn)
            return fn
        return decorator

    def register_tool(self, tool: BaseTool[Any]) -> None:
        """Register a typed tool under its definition name.

        The handler validates the call's arguments into the tool's argument
        type, calls the tool and returns the output's display string.
        """
        async def run(call: ToolCall) -> str:
            output = await tool.call(_build_arguments(tool, call))
            return str(output)

        self.register(tool.definition.name, run)

    def unregister(self, name: str) -> bool:
        """Remove a handler by name. Returns True if found."""
        with self._lock:
            return self._handlers.pop(name, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._handlers.clear()

    # ─────────────────────────────────────────────────────────────────
    # Introspection
    # ─────────────────────────────────────────────────────────────────

    def is_registered(self, name: str) -> bool:
        with self._lock:
            return name in self._handlers

    @property
    def registered_tools(self) -> list[str]:
        """Names of all registered tools, in no particular order."""
        with self._lock:
            return list(self._handlers)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._handlers

    def __len__(self) -> int:
        with self._lock:
            return len(self._handlers)

    # ─────────────────────────────────────────────────────────────────
    # Dispatch
    # ─────────────────────────────────────────────────────────────────

    async def handle_tool(self, call: ToolCall) -> str:
        """Dispatch a call to its handler.

        Raises:
            UnknownTool: no handler is registered under call.tool_name
            Exception: whatever the handler raises, unchanged
        """
        with self._lock:
            handler = self._handlers.get(call.tool_name)
            available = () if handler is not None else tuple(self._handlers)
        if handler is None:
            logger.warning(f"Unknown tool '{call.tool_name}'")
            raise UnknownTool(call.tool_name, available)

        logger.debug(f"Dispatching '{call.tool_name}' with {len(call.arguments)} argument(s)")
        try:
            result = handler(call)
            if inspect.isawaitable(result):
                result = await result
        except Exception as e:
            logger.warning(f"Tool '{call.tool_name}' failed: {e}")
            raise
        return result if isinstance(result, str) else str(result)

    async def handle_response(self, response: ToolResponse) -> str | None:
        """Dispatch the response's tool call, if it carries one."""
        if response.tool is None:
            return None
        return await self.handle_tool(response.tool)

    def __repr__(self) -> str:
        return f"ToolRegistry(tools={sorted(self.registered_tools)})"


def _build_arguments(tool: BaseTool[Any], call: ToolCall) -> list[ToolArgument]:
    """Validate a call's arguments into the tool's argument type.

    A single-field shape reads its value from the key named after the
    argument; other shapes validate the whole argument object.
    """
    shape = tool.argument_type
    if shape is EmptyArgument:
        return []
    raw = call.raw_arguments()
    name = shape.argument_definition.name
    fields = list(shape.model_fields)
    data = {fields[0]: raw[name]} if len(fields) == 1 and name in raw else raw
    try:
        return [shape.model_validate(data)]
    except ValidationError as e:
        raise InvalidArgumentType(f"{shape.__name__}: {e.errors()[0]['msg']}") from e


# ─────────────────────────────────────────────────────────────────────────────
# Global Registry
# ─────────────────────────────────────────────────────────────────────────────

_registry: ToolRegistry | None = None
_registry_lock = threading.Lock()


def get_registry() -> ToolRegistry:
    """Get the global tool registry instance."""
    global _registry
    if _registry is None:
        with _registry_lock:
            if _registry is None:
                _registry = ToolRegistry()
    return _registry


def set_registry(registry: ToolRegistry) -> None:
    """Replace the global registry."""
    global _registry
    with _registry_lock:
        _registry = registry


def reset_registry() -> None:
    """Reset the global registry (useful for testing)."""
    global _registry
    with _registry_lock:
        if _registry is not None:
            _registry.clear()
        _registry = None
