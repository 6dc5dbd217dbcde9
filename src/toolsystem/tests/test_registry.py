"""Tests for inbound payloads and the dynamic dispatch registry."""

import asyncio
import logging
import math
import struct

import pytest
from pydantic import ValidationError

from toolsystem import (
    BaseTool,
    DecodeError,
    ExecutionFailed,
    InvalidArgumentType,
    Map,
    Number,
    Text,
    ToolArgument,
    ToolCall,
    ToolRegistry,
    ToolResponse,
    UnknownTool,
    argument,
    get_registry,
    reset_registry,
    set_registry,
    tool,
)
from toolsystem.value import Boolean, Integer


@argument("number", "The number to take the square root of", example="16.0")
class NumberArgument(ToolArgument):
    value: float


@tool("square_root", "Calculate the square root of a number", arguments=(NumberArgument,))
class SquareRootTool(BaseTool[NumberArgument]):
    async def call(self, arguments):
        arg = self.first_argument(arguments)
        if arg.value < 0:
            raise ExecutionFailed("Cannot take square root of a negative number")
        return Number(math.sqrt(arg.value))


@argument("user", "User lookup", example="ada")
class UserQuery(ToolArgument):
    username: str
    include_email: bool = False


@tool("lookup_user", "Look up a user profile", arguments=(UserQuery,))
class LookupUserTool(BaseTool[UserQuery]):
    async def call(self, arguments):
        query = self.first_argument(arguments)
        profile = {"username": query.username, "url": f"https://example.com/u/{query.username}"}
        if query.include_email:
            profile["email"] = f"{query.username}@example.com"
        return Map(profile)


@tool("ping", "Check that the service is alive")
class PingTool(BaseTool):
    async def call(self, arguments):
        return Text("pong")


# ─────────────────────────────────────────────────────────────────────────────
# ToolCall / ToolResponse
# ─────────────────────────────────────────────────────────────────────────────

RESPONSE = b"""{
  "message": "Working on it",
  "tool": {
    "tool_name": "inspect",
    "arguments": {"flag": true, "count": 10, "ratio": 0.85, "label": "x", "missing": null}
  }
}"""


def test_call_arguments_use_scalar_precedence() -> None:
    call = ToolResponse.from_json(RESPONSE).tool
    assert call is not None
    assert call.arguments == {
        "flag": Boolean(True),
        "count": Integer(10),
        "ratio": Number(0.85),
        "label": Text("x"),
        "missing": None,
    }


def test_typed_getters() -> None:
    call = ToolResponse.from_json(RESPONSE).tool
    assert call.get_bool("flag") is True
    assert call.get_int("count") == 10
    assert call.get_double("ratio") == 0.85
    assert call.get_string("label") == "x"
    # getters do not convert between kinds
    assert call.get_double("count") is None
    assert call.get_string("count") is None
    assert call.get_int("absent") is None


def test_get_float_narrows_to_single_precision() -> None:
    call = ToolCall(tool_name="t", arguments={"ratio": 0.85})
    narrowed = call.get_float("ratio")
    assert narrowed == struct.unpack("f", struct.pack("f", 0.85))[0]
    assert narrowed != 0.85
    assert narrowed == pytest.approx(0.85)


def test_generic_get_with_default() -> None:
    call = ToolCall(tool_name="t", arguments={"count": 3})
    assert call.get("count", int) == 3
    assert call.get("count", str) is None
    assert call.get("absent", str, "fallback") == "fallback"
    assert call.get("count", bytes, b"") == b""


def test_null_argument_is_present_but_empty() -> None:
    call = ToolResponse.from_json(RESPONSE).tool
    assert call.has_argument("missing")
    assert call.get_string("missing") is None
    assert not call.has_argument("absent")
    assert sorted(call.argument_keys) == ["count", "flag", "label", "missing", "ratio"]


def test_nested_argument_values_are_rejected() -> None:
    with pytest.raises(DecodeError):
        ToolCall.from_json(b'{"tool_name": "t", "arguments": {"nested": {"a": 1}}}')


def test_argument_too_large_for_double_is_rejected() -> None:
    with pytest.raises(ValidationError, match="out of double range"):
        ToolCall.model_validate({"tool_name": "t", "arguments": {"n": 10**400}})
    with pytest.raises(DecodeError):
        ToolCall.from_json({"tool_name": "t", "arguments": {"n": 10**400}})


def test_response_without_tool() -> None:
    response = ToolResponse.from_json(b'{"message": "Hello"}')
    assert response.tool is None
    assert response.to_dict() == {"message": "Hello"}


def test_call_serializes_raw_scalars() -> None:
    call = ToolCall(tool_name="t", arguments={"a": 1, "b": None, "c": "s"})
    assert call.to_dict() == {"tool_name": "t", "arguments": {"a": 1, "b": None, "c": "s"}}
    assert ToolCall.from_json(call.to_json()) == call


# ─────────────────────────────────────────────────────────────────────────────
# Registration
# ─────────────────────────────────────────────────────────────────────────────

def test_register_and_introspect() -> None:
    registry = ToolRegistry()
    registry.register("a", lambda call: "A")
    registry.register("b", lambda call: "B")

    assert registry.is_registered("a")
    assert "b" in registry
    assert not registry.is_registered("c")
    assert sorted(registry.registered_tools) == ["a", "b"]
    assert len(registry) == 2


def test_unregister_and_clear() -> None:
    registry = ToolRegistry()
    registry.register("a", lambda call: "A")
    assert registry.unregister("a")
    assert not registry.unregister("a")
    registry.register("b", lambda call: "B")
    registry.clear()
    assert len(registry) == 0


@pytest.mark.asyncio
async def test_last_registration_wins() -> None:
    registry = ToolRegistry()
    registry.register("t", lambda call: "first")
    registry.register("t", lambda call: "second")
    assert await registry.handle_tool(ToolCall(tool_name="t")) == "second"
    assert len(registry) == 1


@pytest.mark.asyncio
async def test_decorator_registration_with_async_handler() -> None:
    registry = ToolRegistry()

    @registry.handler("greet")
    async def greet(call: ToolCall) -> str:
        await asyncio.sleep(0)
        return f"Hello, {call.get_string('name')}!"

    result = await registry.handle_tool(ToolCall(tool_name="greet", arguments={"name": "Ada"}))
    assert result == "Hello, Ada!"


# ─────────────────────────────────────────────────────────────────────────────
# Dispatch
# ─────────────────────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_unknown_tool_lists_available() -> None:
    registry = ToolRegistry()
    registry.register("a", lambda call: "A")
    registry.register("b", lambda call: "B")

    with pytest.raises(UnknownTool) as exc_info:
        await registry.handle_tool(ToolCall(tool_name="c"))
    assert str(exc_info.value) == "Unknown tool: c. Available tools: a, b"
    assert exc_info.value.name == "c"
    assert exc_info.value.available == ("a", "b")


@pytest.mark.asyncio
async def test_handler_errors_propagate_unchanged() -> None:
    registry = ToolRegistry()
    error = ExecutionFailed("backend down")

    def failing(call: ToolCall) -> str:
        raise error

    registry.register("fail", failing)
    with pytest.raises(ExecutionFailed) as exc_info:
        await registry.handle_tool(ToolCall(tool_name="fail"))
    assert exc_info.value is error


@pytest.mark.asyncio
async def test_register_tool_bridges_typed_tool() -> None:
    registry = ToolRegistry()
    registry.register_tool(SquareRootTool())

    assert registry.is_registered("square_root")
    result = await registry.handle_tool(ToolCall(tool_name="square_root", arguments={"number": 16}))
    assert result == "4.0"


@pytest.mark.asyncio
async def test_register_tool_tool_failure() -> None:
    registry = ToolRegistry()
    registry.register_tool(SquareRootTool())
    with pytest.raises(ExecutionFailed, match="negative number"):
        await registry.handle_tool(ToolCall(tool_name="square_root", arguments={"number": -4}))


@pytest.mark.asyncio
async def test_register_tool_invalid_arguments() -> None:
    registry = ToolRegistry()
    registry.register_tool(SquareRootTool())
    with pytest.raises(InvalidArgumentType):
        await registry.handle_tool(ToolCall(tool_name="square_root", arguments={"number": "abc"}))
    with pytest.raises(InvalidArgumentType):
        await registry.handle_tool(ToolCall(tool_name="square_root", arguments={}))


@pytest.mark.asyncio
async def test_register_tool_multi_field_shape_returns_display_string() -> None:
    registry = ToolRegistry()
    registry.register_tool(LookupUserTool())
    call = ToolCall(tool_name="lookup_user", arguments={"username": "ada", "include_email": True})
    assert await registry.handle_tool(call) == (
        "{\n"
        '  "email": "ada@example.com",\n'
        '  "url": "https://example.com/u/ada",\n'
        '  "username": "ada"\n'
        "}"
    )


@pytest.mark.asyncio
async def test_register_tool_without_arguments() -> None:
    registry = ToolRegistry()
    registry.register_tool(PingTool())
    assert await registry.handle_tool(ToolCall(tool_name="ping", arguments={"extra": 1})) == "pong"


@pytest.mark.asyncio
async def test_handle_response() -> None:
    registry = ToolRegistry()
    registry.register_tool(SquareRootTool())

    assert await registry.handle_response(ToolResponse(message="no tool")) is None
    response = ToolResponse.from_json(
        b'{"message": "ok", "tool": {"tool_name": "square_root", "arguments": {"number": 2.25}}}'
    )
    assert await registry.handle_response(response) == "1.5"


@pytest.mark.asyncio
async def test_concurrent_dispatch() -> None:
    registry = ToolRegistry()
    registry.register_tool(SquareRootTool())
    calls = [ToolCall(tool_name="square_root", arguments={"number": n * n}) for n in range(1, 6)]
    results = await asyncio.gather(*(registry.handle_tool(c) for c in calls))
    assert results == ["1.0", "2.0", "3.0", "4.0", "5.0"]


# ─────────────────────────────────────────────────────────────────────────────
# Logging
# ─────────────────────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_unknown_tool_logs_warning(caplog: pytest.LogCaptureFixture) -> None:
    registry = ToolRegistry()
    with caplog.at_level(logging.WARNING, logger="toolsystem.registry"):
        with pytest.raises(UnknownTool):
            await registry.handle_tool(ToolCall(tool_name="ghost"))
    assert any("ghost" in r.getMessage() and r.levelno == logging.WARNING for r in caplog.records)


def test_registration_logs_debug(caplog: pytest.LogCaptureFixture) -> None:
    registry = ToolRegistry()
    with caplog.at_level(logging.DEBUG, logger="toolsystem.registry"):
        registry.register("t", lambda call: "x")
    assert any(r.name == "toolsystem.registry" and "'t'" in r.getMessage() for r in caplog.records)


# ─────────────────────────────────────────────────────────────────────────────
# Global registry
# ─────────────────────────────────────────────────────────────────────────────

def test_global_registry_is_shared() -> None:
    assert get_registry() is get_registry()


def test_set_and_reset_registry() -> None:
    custom = ToolRegistry()
    custom.register("x", lambda call: "x")
    set_registry(custom)
    assert get_registry() is custom

    reset_registry()
    assert len(custom) == 0
    assert get_registry() is not custom
