"""AnyTool: type-erased tools for heterogeneous collections.

Tools with different argument types cannot share a typed container. AnyTool
wraps any BaseTool behind a single interface that accepts an untyped
argument sequence.

An AnyTool is in one of two states:

- LiveTool: wraps a real tool. `call` keeps only the arguments that are
  instances of the tool's argument type and delegates.
- DecodedTool: rebuilt from serialized form. Only the definition survives
  serialization, so `call` always fails.

    >>> erased = AnyTool.wrap(SquareRootTool())
    >>> await erased.call([NumberArgument(value=16.0)])
    Number(value=4.0)
    >>> restored = AnyTool.from_json(erased.to_json())
    >>> restored.definition == erased.definition
    True
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

import orjson
from pydantic import BaseModel, ConfigDict

from ..codec import load_model
from ..errors import DecodeError, ExecutionFailed
from .base import BaseTool
from .definition import ToolDefinition

if TYPE_CHECKING:
    from pydantic import GetCoreSchemaHandler
    from pydantic_core import CoreSchema

    from ..value import Value

_LOST_IMPLEMENTATION = "Cannot execute decoded AnyTool - original tool implementation lost during encoding"


class _SerializedTool(BaseModel):
    model_config = ConfigDict(frozen=True)

    definition: ToolDefinition


class AnyTool(ABC):
    """Type-erased tool. Construct with `AnyTool.wrap` or `AnyTool.from_dict`."""

    __slots__ = ("definition",)

    definition: ToolDefinition

    @staticmethod
    def wrap(tool: BaseTool[Any]) -> LiveTool:
        return LiveTool(tool)

    @property
    def name(self) -> str:
        return self.definition.name

    @property
    def description(self) -> str:
        return self.definition.description

    @property
    def instructions(self) -> str:
        return self.definition.instructions

    @abstractmethod
    async def call(self, arguments: Sequence[object]) -> Value: ...

    # ─────────────────────────────────────────────────────────────────
    # Serialization (definition only)
    # ─────────────────────────────────────────────────────────────────

    def to_dict(self) -> dict[str, Any]:
        return {"definition": self.definition.model_dump(mode="json")}

    def to_json(self) -> bytes:
        return orjson.dumps(self.to_dict())

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> DecodedTool:
        """Rebuild from `{"definition": {...}}`. The result cannot be called."""
        if not isinstance(data, Mapping):
            raise DecodeError(f"Expected an object, got {type(data).__name__}")
        return DecodedTool(load_model(_SerializedTool, data).definition)

    @classmethod
    def from_json(cls, data: bytes | str) -> DecodedTool:
        return DecodedTool(load_model(_SerializedTool, data).definition)

    def __str__(self) -> str:
        return f"AnyTool({self.definition.name}: {self.definition.description})"

    # Pydantic integration: validates from AnyTool/BaseTool instances or the
    # serialized dict/JSON form, serializes to the definition-only dict.
    @classmethod
    def __get_pydantic_core_schema__(cls, source: type, handler: GetCoreSchemaHandler) -> CoreSchema:
        from pydantic_core import core_schema

        def validate(raw: object) -> AnyTool:
            match raw:
                case AnyTool():
                    return raw
                case BaseTool():
                    return LiveTool(raw)
            try:
                if isinstance(raw, Mapping):
                    return AnyTool.from_dict(raw)
                if isinstance(raw, (bytes, str)):
                    return AnyTool.from_json(raw)
            except DecodeError as e:
                raise ValueError(str(e)) from e
            raise ValueError(f"Cannot build AnyTool from {type(raw).__name__}")

        return core_schema.no_info_plain_validator_function(
            validate,
            serialization=core_schema.plain_serializer_function_ser_schema(lambda t: t.to_dict()),
        )


class LiveTool(AnyTool):
    """AnyTool wrapping a real tool implementation."""

    __slots__ = ("_tool",)

    def __init__(self, tool: BaseTool[Any]) -> None:
        self._tool = tool
        self.definition = tool.definition

    @property
    def tool(self) -> BaseTool[Any]:
        return self._tool

    async def call(self, arguments: Sequence[object]) -> Value:
        # Arguments of other shapes are dropped, not rejected
        shape = self._tool.argument_type
        return await self._tool.call([a for a in arguments if isinstance(a, shape)])

    def __repr__(self) -> str:
        return f"LiveTool({self._tool!r})"


class DecodedTool(AnyTool):
    """AnyTool restored from serialized form; carries metadata only."""

    __slots__ = ()

    def __init__(self, definition: ToolDefinition) -> None:
        self.definition = definition

    async def call(self, arguments: Sequence[object]) -> Value:
        raise ExecutionFailed(_LOST_IMPLEMENTATION)

    def __repr__(self) -> str:
        return f"DecodedTool(name={self.definition.name!r})"


def erase(tool: BaseTool[Any]) -> LiveTool:
    """Wrap a typed tool as an AnyTool."""
    return AnyTool.wrap(tool)
