"""Inbound tool-call payloads from an agent or remote API.

    {"message": "Calculating...", "tool": {"tool_name": "sqrt", "arguments": {"number": 16.0}}}

Argument values are untagged JSON scalars (or null). Each is decoded by
trying boolean, integer, float, then string, so ``10`` becomes an
Integer and ``0.85`` a Number. Nested arrays or objects are rejected.
"""

from __future__ import annotations

import struct
from collections.abc import Mapping
from typing import Any, TypeAlias, TypeVar, overload

import orjson
from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from ..codec import decode_scalar, load_model
from ..errors import DecodeError
from ..value import Boolean, Integer, Number, Text

T = TypeVar("T", str, int, float, bool)

ArgumentValue: TypeAlias = Text | Integer | Number | Boolean | None


class ToolCall(BaseModel):
    """A request to run a named tool with loosely typed arguments."""

    model_config = ConfigDict(frozen=True)

    tool_name: str
    arguments: dict[str, Any] = Field(default_factory=dict)

    @field_validator("arguments", mode="before")
    @classmethod
    def _decode_arguments(cls, v: object) -> dict[str, ArgumentValue]:
        if not isinstance(v, Mapping):
            raise ValueError("arguments must be an object")
        decoded: dict[str, ArgumentValue] = {}
        for key, raw in v.items():
            if raw is None or isinstance(raw, (Text, Integer, Number, Boolean)):
                decoded[key] = raw
                continue
            try:
                decoded[key] = decode_scalar(raw)
            except DecodeError as e:
                raise ValueError(f"argument '{key}': {e.message}") from e
        return decoded

    @field_serializer("arguments")
    def _encode_arguments(self, arguments: dict[str, ArgumentValue]) -> dict[str, object]:
        return _raw(arguments)

    # ─────────────────────────────────────────────────────────────────
    # Typed getters: None when absent, null, or of another kind
    # ─────────────────────────────────────────────────────────────────

    def get_string(self, key: str) -> str | None:
        v = self.arguments.get(key)
        return v.as_text() if v is not None else None

    def get_int(self, key: str) -> int | None:
        v = self.arguments.get(key)
        return v.as_integer() if v is not None else None

    def get_double(self, key: str) -> float | None:
        v = self.arguments.get(key)
        return v.as_number() if v is not None else None

    def get_float(self, key: str) -> float | None:
        """Like get_double, narrowed to single precision."""
        d = self.get_double(key)
        return None if d is None else struct.unpack("f", struct.pack("f", d))[0]

    def get_bool(self, key: str) -> bool | None:
        v = self.arguments.get(key)
        return v.as_boolean() if v is not None else None

    @overload
    def get(self, key: str, type: type[T]) -> T | None: ...
    @overload
    def get(self, key: str, type: type[T], default: T) -> T: ...

    def get(self, key: str, type: type[T], default: T | None = None) -> T | None:  # noqa: A002
        """Getter selected by Python type, with an optional fallback."""
        getter = {
            str: self.get_string,
            int: self.get_int,
            float: self.get_double,
            bool: self.get_bool,
        }.get(type)
        if getter is None:
            return default
        found = getter(key)
        return default if found is None else found  # type: ignore[return-value]

    def has_argument(self, key: str) -> bool:
        """True if the key is present, even with a null value."""
        return key in self.arguments

    @property
    def argument_keys(self) -> list[str]:
        return list(self.arguments)

    def raw_arguments(self) -> dict[str, object]:
        """Arguments as plain JSON scalars."""
        return _raw(self.arguments)

    # ─────────────────────────────────────────────────────────────────
    # Serialization
    # ─────────────────────────────────────────────────────────────────

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json")

    def to_json(self) -> bytes:
        return orjson.dumps(self.to_dict())

    @classmethod
    def from_json(cls, data: bytes | str | Mapping[str, Any]) -> ToolCall:
        return load_model(cls, data)


def _raw(arguments: Mapping[str, ArgumentValue]) -> dict[str, object]:
    return {k: None if v is None else v.value for k, v in arguments.items()}


class ToolResponse(BaseModel):
    """Agent reply: a message and, optionally, a tool to run."""

    model_config = ConfigDict(frozen=True)

    message: str
    tool: ToolCall | None = None

    def to_dict(self) -> dict[str, Any]:
        """`tool` is omitted when absent."""
        data: dict[str, Any] = {"message": self.message}
        if self.tool is not None:
            data["tool"] = self.tool.to_dict()
        return data

    def to_json(self) -> bytes:
        return orjson.dumps(self.to_dict())

    @classmethod
    def from_json(cls, data: bytes | str | Mapping[str, Any]) -> ToolResponse:
        return load_model(cls, data)
