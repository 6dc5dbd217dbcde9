"""Wire codec for Values, descriptors, and other payload models.

Tagged envelope (one canonical form per Value case):

    {"type": "int", "value": 30}
    {"type": "dictionary", "value": {"age": 30, "name": "John"}}

The tag removes JSON's number ambiguity for outputs. Untagged payloads
(array elements, dictionary values, inbound tool-call arguments) are
decoded by trying boolean, integer, float, then string; the first match
wins. Structured payloads carry only string/int/double/bool leaves;
anything else is dropped on encode and skipped on decode.

Pretty JSON (display only) sorts keys, indents by two spaces, and never
escapes ``/``.

Transport codecs wrap the envelope as bytes: orjson (default) and
msgpack.

    >>> from toolsystem.codec import dumps, loads
    >>> loads(dumps(Integer(30)))
    Integer(value=30)
"""

from __future__ import annotations

import base64
import binascii
from collections.abc import Mapping
from enum import StrEnum
from typing import TYPE_CHECKING, Protocol, TypeVar, runtime_checkable

import msgpack
import orjson
from pydantic import BaseModel, ValidationError

from .errors import DecodeError
from .value import (
    INT64_MAX,
    INT64_MIN,
    Binary,
    Boolean,
    Integer,
    List,
    Map,
    MapList,
    Number,
    Text,
    Value,
    scalar_kind,
)

if TYPE_CHECKING:
    from .value import Scalar

M = TypeVar("M", bound=BaseModel)

_PRETTY = orjson.OPT_INDENT_2 | orjson.OPT_SORT_KEYS


# ═══════════════════════════════════════════════════════════════════════════════
# Pretty JSON (display path)
# ═══════════════════════════════════════════════════════════════════════════════

def pretty_json(obj: object) -> str:
    """Sorted keys, 2-space indent, ``": "`` separators, literal slashes."""
    return orjson.dumps(obj, option=_PRETTY).decode()


# ═══════════════════════════════════════════════════════════════════════════════
# Untagged scalars
# ═══════════════════════════════════════════════════════════════════════════════

def decode_scalar(raw: object) -> Text | Integer | Number | Boolean:
    """Decode an untagged JSON scalar: boolean, then integer, then float, then string.

    Integers outside the int64 range fall through to Number.

    Raises:
        DecodeError: raw is null, an array, an object, any non-JSON type, or
            an integer too large for a double
    """
    if isinstance(raw, bool):
        return Boolean(raw)
    if isinstance(raw, int) and INT64_MIN <= raw <= INT64_MAX:
        return Integer(raw)
    if isinstance(raw, (int, float)):
        return _number(raw)
    if isinstance(raw, str):
        return Text(raw)
    raise DecodeError(f"Unsupported value type: {type(raw).__name__}")


def _number(raw: int | float) -> Number:
    try:
        return Number(float(raw))
    except OverflowError as e:
        raise DecodeError(f"Number out of double range: {raw}") from e


def _entry(raw: object) -> Scalar | None:
    try:
        return decode_scalar(raw).value
    except DecodeError:
        return None


def _decode_entries(payload: Mapping[str, object]) -> dict[str, Scalar]:
    return {k: v for k, raw in payload.items() if (v := _entry(raw)) is not None}


def _encode_entries(entries: Mapping[str, object]) -> dict[str, Scalar]:
    return {k: v for k, v in entries.items() if scalar_kind(v)}  # type: ignore[misc]


# ═══════════════════════════════════════════════════════════════════════════════
# Tagged envelope
# ═══════════════════════════════════════════════════════════════════════════════

def encode(value: Value) -> dict[str, object]:
    """Encode a Value into its ``{"type", "value"}`` envelope (JSON-ready dict).

    Unsupported entries of List/Map/MapList are silently omitted.
    """
    match value:
        case Text() | Number() | Integer() | Boolean():
            payload: object = value.value
        case Binary():
            payload = base64.b64encode(value.value).decode("ascii")
        case List():
            payload = [item for item in value.value if scalar_kind(item)]
        case Map():
            payload = _encode_entries(value.value)
        case MapList():
            payload = [_encode_entries(m) for m in value.value]
        case _:
            raise TypeError(f"Expected a Value, got {type(value).__name__}")
    return {"type": value.tag, "value": payload}


def decode(obj: object) -> Value:
    """Decode a ``{"type", "value"}`` envelope.

    Raises:
        DecodeError: not an object, missing keys, unknown tag, or a payload
            whose JSON type does not match the tag
    """
    if not isinstance(obj, Mapping):
        raise DecodeError(f"Expected a tagged object, got {type(obj).__name__}")
    if "type" not in obj:
        raise DecodeError("Missing 'type' in value envelope")
    if "value" not in obj:
        raise DecodeError("Missing 'value' in value envelope")

    tag, payload = obj["type"], obj["value"]
    match tag:
        case "string" if isinstance(payload, str):
            return Text(payload)
        case "double" if isinstance(payload, (int, float)) and not isinstance(payload, bool):
            return _number(payload)
        case "int" if isinstance(payload, int) and not isinstance(payload, bool):
            if not INT64_MIN <= payload <= INT64_MAX:
                raise DecodeError(f"Integer out of int64 range: {payload}")
            return Integer(payload)
        case "bool" if isinstance(payload, bool):
            return Boolean(payload)
        case "data" if isinstance(payload, str):
            try:
                return Binary(base64.b64decode(payload, validate=True))
            except binascii.Error as e:
                raise DecodeError(f"Invalid base64 payload: {e}") from e
        case "array" if isinstance(payload, list):
            return List(v for raw in payload if (v := _entry(raw)) is not None)
        case "dictionary" if isinstance(payload, Mapping):
            return Map(_decode_entries(payload))
        case "dictionaryArray" if isinstance(payload, list):
            if not all(isinstance(m, Mapping) for m in payload):
                raise DecodeError("dictionaryArray entries must be objects")
            return MapList(_decode_entries(m) for m in payload)
        case "string" | "double" | "int" | "bool" | "data" | "array" | "dictionary" | "dictionaryArray":
            raise DecodeError(f"Payload of type {type(payload).__name__} does not match tag '{tag}'")
    raise DecodeError(f"Unknown value type: {tag}")


def dumps(value: Value) -> bytes:
    """Encode a Value envelope to compact JSON bytes."""
    return orjson.dumps(encode(value))


def loads(data: bytes | str) -> Value:
    """Decode a Value envelope from JSON bytes/str."""
    try:
        obj = orjson.loads(data)
    except orjson.JSONDecodeError as e:
        raise DecodeError(f"Malformed JSON: {e}") from e
    return decode(obj)


# ═══════════════════════════════════════════════════════════════════════════════
# Models (definitions, descriptors, call payloads)
# ═══════════════════════════════════════════════════════════════════════════════

def dump_model(model: BaseModel, *, pretty: bool = False, exclude_none: bool = False) -> bytes:
    """Serialize a pydantic model to JSON bytes, optionally in display form."""
    data = model.model_dump(mode="json", exclude_none=exclude_none)
    return orjson.dumps(data, option=_PRETTY if pretty else None)


def load_model(cls: type[M], data: bytes | str | Mapping[str, object]) -> M:
    """Parse and validate a model, mapping every failure to DecodeError."""
    if not isinstance(data, (Mapping, bytes, bytearray, memoryview, str)):
        raise DecodeError(f"Cannot load {cls.__name__} from {type(data).__name__}")
    try:
        obj = data if isinstance(data, Mapping) else orjson.loads(data)
        return cls.model_validate(obj)
    except orjson.JSONDecodeError as e:
        raise DecodeError(f"Malformed JSON: {e}") from e
    except ValidationError as e:
        raise DecodeError(f"Invalid {cls.__name__}: {e}") from e


# ═══════════════════════════════════════════════════════════════════════════════
# Transport codecs
# ═══════════════════════════════════════════════════════════════════════════════

class CodecType(StrEnum):
    """Supported codec types."""
    ORJSON = "orjson"
    MSGPACK = "msgpack"


@runtime_checkable
class Codec(Protocol):
    """Protocol for envelope transport codecs."""

    name: str
    content_type: str

    def encode(self, value: Value) -> bytes: ...
    def decode(self, data: bytes) -> Value: ...


class OrjsonCodec:
    """Envelope as compact JSON."""

    __slots__ = ()
    name = "orjson"
    content_type = "application/json"

    def encode(self, value: Value) -> bytes:
        return dumps(value)

    def decode(self, data: bytes) -> Value:
        return loads(data)


class MsgpackCodec:
    """Envelope as MessagePack; same structure as the JSON form."""

    __slots__ = ()
    name = "msgpack"
    content_type = "application/msgpack"

    def encode(self, value: Value) -> bytes:
        return msgpack.packb(encode(value), use_bin_type=True)

    def decode(self, data: bytes) -> Value:
        try:
            obj = msgpack.unpackb(data, raw=False)
        except (ValueError, msgpack.exceptions.UnpackException) as e:
            raise DecodeError(f"Malformed msgpack: {e}") from e
        return decode(obj)


_orjson = OrjsonCodec()
_msgpack = MsgpackCodec()

_CODECS: dict[str, Codec] = {"orjson": _orjson, "msgpack": _msgpack}


def get_codec(name: str | CodecType | None = None) -> Codec:
    """Get codec by name (default from settings)."""
    if name is None:
        from .settings import get_settings
        name = get_settings().codec.default
    try:
        return _CODECS[str(name)]
    except KeyError:
        raise ValueError(f"Unknown codec: {name}. Available: {', '.join(_CODECS)}") from None


def register_codec(name: str, codec: Codec) -> None:
    """Register custom codec implementation."""
    _CODECS[name] = codec
