"""Dynamic dispatch of inbound tool calls."""

from .call import ArgumentValue, ToolCall, ToolResponse
from .registry import ToolHandler, ToolRegistry, get_registry, reset_registry, set_registry

__all__ = [
    "ToolCall",
    "ToolResponse",
    "ArgumentValue",
    "ToolHandler",
    "ToolRegistry",
    "get_registry",
    "set_registry",
    "reset_registry",
]
