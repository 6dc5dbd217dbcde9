"""Closed value model for tool outputs and generic argument values.

A Value is exactly one of eight immutable cases:

    Text(str)         Number(float)     Integer(int64)    Boolean(bool)
    Binary(bytes)     List([...])       Map({...})        MapList([{...}, ...])

Structured cases hold plain Python scalars. Scalar Value instances given
as entries are unwrapped on construction, so ``List([Text("a"), 1])``
equals ``List(["a", 1])``. Entries of any other type are kept in memory
but are dropped when the value is encoded for the wire (see
`toolsystem.codec`).

Example:
    >>> out = Map({"name": "John", "age": 30, "active": True})
    >>> out.as_map()["age"]
    30
    >>> print(Integer(42))
    42
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar, TypeAlias

from .errors import DecodeError

if TYPE_CHECKING:
    from pydantic import GetCoreSchemaHandler
    from pydantic_core import CoreSchema

INT64_MIN, INT64_MAX = -(2**63), 2**63 - 1

Scalar: TypeAlias = str | int | float | bool


class Value:
    """Base of the closed value union. Use the concrete cases to construct."""

    __slots__ = ()

    tag: ClassVar[str]
    value: object

    # ─────────────────────────────────────────────────────────────────
    # Typed accessors (None when the case differs)
    # ─────────────────────────────────────────────────────────────────

    def as_text(self) -> str | None:
        return self.value if isinstance(self, Text) else None

    def as_number(self) -> float | None:
        return self.value if isinstance(self, Number) else None

    def as_integer(self) -> int | None:
        return self.value if isinstance(self, Integer) else None

    def as_boolean(self) -> bool | None:
        return self.value if isinstance(self, Boolean) else None

    def as_binary(self) -> bytes | None:
        return self.value if isinstance(self, Binary) else None

    def as_list(self) -> tuple[object, ...] | None:
        return self.value if isinstance(self, List) else None

    def as_map(self) -> dict[str, object] | None:
        return self.value if isinstance(self, Map) else None

    def as_map_list(self) -> tuple[dict[str, object], ...] | None:
        return self.value if isinstance(self, MapList) else None

    @property
    def is_scalar(self) -> bool:
        return isinstance(self, (Text, Number, Integer, Boolean))

    def to_raw(self) -> object:
        """Payload as plain Python data (bytes stay bytes)."""
        match self:
            case List():
                return list(self.value)
            case Map():
                return dict(self.value)
            case MapList():
                return [dict(m) for m in self.value]
            case _:
                return self.value

    # Pydantic integration: fields typed as Value validate from Value
    # instances or tagged envelopes, and serialize to tagged envelopes.
    @classmethod
    def __get_pydantic_core_schema__(cls, source: type, handler: GetCoreSchemaHandler) -> CoreSchema:
        from pydantic_core import core_schema

        from .codec import decode, encode

        def validate(raw: object) -> Value:
            if isinstance(raw, Value):
                return raw
            try:
                return decode(raw)
            except DecodeError as e:
                raise ValueError(str(e)) from e

        return core_schema.no_info_plain_validator_function(
            validate,
            serialization=core_schema.plain_serializer_function_ser_schema(encode),
        )


@dataclass(frozen=True, slots=True)
class Text(Value):
    tag: ClassVar[str] = "string"
    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str):
            raise TypeError(f"Text requires a str, got {type(self.value).__name__}")

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class Number(Value):
    tag: ClassVar[str] = "double"
    value: float

    def __post_init__(self) -> None:
        if isinstance(self.value, bool):
            raise TypeError("Number requires a float, got bool")
        object.__setattr__(self, "value", float(self.value))

    def __str__(self) -> str:
        return repr(self.value)


@dataclass(frozen=True, slots=True)
class Integer(Value):
    tag: ClassVar[str] = "int"
    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise TypeError(f"Integer requires an int, got {type(self.value).__name__}")
        if not INT64_MIN <= self.value <= INT64_MAX:
            raise ValueError(f"Integer out of int64 range: {self.value}")

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True, slots=True)
class Boolean(Value):
    tag: ClassVar[str] = "bool"
    value: bool

    def __post_init__(self) -> None:
        if not isinstance(self.value, bool):
            raise TypeError(f"Boolean requires a bool, got {type(self.value).__name__}")

    def __str__(self) -> str:
        return "true" if self.value else "false"


@dataclass(frozen=True, slots=True)
class Binary(Value):
    tag: ClassVar[str] = "data"
    value: bytes

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", bytes(self.value))

    def __str__(self) -> str:
        return f"Data({len(self.value)} bytes)"


@dataclass(frozen=True, slots=True)
class List(Value):
    tag: ClassVar[str] = "array"
    value: tuple[object, ...]

    def __init__(self, value: Iterable[object] = ()) -> None:
        object.__setattr__(self, "value", tuple(_unwrap(item) for item in value))

    def __len__(self) -> int:
        return len(self.value)

    def __str__(self) -> str:
        return f"[{', '.join(_display(item) for item in self.value)}]"


@dataclass(frozen=True, slots=True)
class Map(Value):
    """String-keyed entries. Equality ignores insertion order; display sorts keys.

    Unhashable, like the dict it holds.
    """

    tag: ClassVar[str] = "dictionary"
    value: dict[str, object]
    __hash__ = None  # type: ignore[assignment]

    def __init__(self, value: Mapping[str, object] | None = None) -> None:
        object.__setattr__(self, "value", {str(k): _unwrap(v) for k, v in (value or {}).items()})

    def __len__(self) -> int:
        return len(self.value)

    def __getitem__(self, key: str) -> object:
        return self.value[key]

    def __str__(self) -> str:
        from .codec import pretty_json
        return pretty_json(_displayable(self.value))


@dataclass(frozen=True, slots=True)
class MapList(Value):
    tag: ClassVar[str] = "dictionaryArray"
    value: tuple[dict[str, object], ...]
    __hash__ = None  # type: ignore[assignment]

    def __init__(self, value: Iterable[Mapping[str, object] | Map] = ()) -> None:
        object.__setattr__(self, "value", tuple(
            Map(m.value if isinstance(m, Map) else m).value for m in value
        ))

    def __len__(self) -> int:
        return len(self.value)

    def __str__(self) -> str:
        from .codec import pretty_json
        return pretty_json([_displayable(m) for m in self.value])


# ─────────────────────────────────────────────────────────────────────────────
# Entry helpers
# ─────────────────────────────────────────────────────────────────────────────

def scalar_kind(item: object) -> str | None:
    """Wire tag of a supported entry, or None if the entry would be dropped.

    bool is checked before int since bool subclasses int.
    """
    if isinstance(item, bool):
        return "bool"
    if isinstance(item, int):
        return "int" if INT64_MIN <= item <= INT64_MAX else None
    if isinstance(item, float):
        return "double"
    if isinstance(item, str):
        return "string"
    return None


def _unwrap(item: object) -> object:
    return item.value if isinstance(item, Value) and item.is_scalar else item


def _display(item: object) -> str:
    match item:
        case bool():
            return "true" if item else "false"
        case float():
            return repr(item)
        case _:
            return str(item)


def _displayable(entries: Mapping[str, object]) -> dict[str, Scalar]:
    """Display path keeps unsupported entries as their string form."""
    return {k: v if scalar_kind(v) else str(v) for k, v in entries.items()}


def from_python(obj: object) -> Value:
    """Wrap plain Python data in the matching Value case.

    Sequences of mappings become MapList, other sequences List.
    """
    match obj:
        case Value():
            return obj
        case bool():
            return Boolean(obj)
        case int():
            return Integer(obj)
        case float():
            return Number(obj)
        case str():
            return Text(obj)
        case bytes() | bytearray() | memoryview():
            return Binary(bytes(obj))
        case Mapping():
            return Map(obj)
        case list() | tuple() if obj and all(isinstance(m, (Mapping, Map)) for m in obj):
            return MapList(obj)
        case list() | tuple():
            return List(obj)
    raise TypeError(f"Cannot represent {type(obj).__name__} as a Value")
