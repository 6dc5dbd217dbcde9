"""Error taxonomy for tool declaration, execution, and dispatch.

Every failure the framework raises is a ToolError subclass carrying a
machine-readable ErrorCode. Nothing here is retried or suppressed: errors
surface to the immediate caller, which decides how to present them.

Tool bodies that prefer to downgrade a failure into a regular string
output can use `ToolError.render()`:

    >>> try:
    ...     arg = decode_argument(arguments, QueryArgument)
    ... except ToolError as e:
    ...     return Text(e.render())
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import StrEnum


class ErrorCode(StrEnum):
    """Standard error codes for framework failures."""
    NO_ARGUMENTS = "NO_ARGUMENTS"
    INVALID_ARGUMENT_TYPE = "INVALID_ARGUMENT_TYPE"
    EXECUTION_FAILED = "EXECUTION_FAILED"
    UNKNOWN_TOOL = "UNKNOWN_TOOL"
    DECODE_ERROR = "DECODE_ERROR"
    MISSING_EXAMPLE = "MISSING_EXAMPLE"


class ToolError(Exception):
    """Base class for all toolsystem errors."""

    code: ErrorCode = ErrorCode.EXECUTION_FAILED

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def render(self) -> str:
        """Format as a user-facing error string."""
        return f"Error: {self.message}"


class NoArguments(ToolError):
    """Argument decode attempted on an empty argument sequence."""

    code = ErrorCode.NO_ARGUMENTS

    def __init__(self, message: str = "No arguments provided") -> None:
        super().__init__(message)


class InvalidArgumentType(ToolError):
    """First argument does not match the requested argument type."""

    code = ErrorCode.INVALID_ARGUMENT_TYPE

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail
        super().__init__(f"Invalid argument type: {detail}" if detail else "Invalid argument type")


class ExecutionFailed(ToolError):
    """Tool-specific failure with a human-readable reason."""

    code = ErrorCode.EXECUTION_FAILED

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Tool execution failed: {reason}")


class UnknownTool(ToolError):
    """Registry lookup miss.

    The message enumerates the names that were registered when the error
    was raised, so callers can show valid alternatives.
    """

    code = ErrorCode.UNKNOWN_TOOL

    def __init__(self, name: str, available: Iterable[str] = ()) -> None:
        self.name = name
        self.available = tuple(available)
        super().__init__(f"Unknown tool: {name}. Available tools: {', '.join(self.available)}")


class DecodeError(ToolError):
    """Malformed or unrecognized wire data."""

    code = ErrorCode.DECODE_ERROR


class MissingExampleError(ToolError):
    """Argument shape declared without a non-empty example string."""

    code = ErrorCode.MISSING_EXAMPLE

    def __init__(self, argument: str) -> None:
        self.argument = argument
        super().__init__(f"Argument '{argument}' is missing required example parameter")
