"""Tagged argument and result values.

JSON values are tagged exactly once, when a structured message is parsed,
and the tag alone decides how the value is written to the wire. On the way
back the next token's format decides the tag.

Binary objects are recognised in every position and travel as MessagePack
bin values::

    {"BinaryHeader": 3, "BinaryBytes": "DEADBE"}

Two tagging modes exist. *Extended* mode is used for Invocation arguments and
additionally recognises nested JSON arrays (sent as their JSON text). Plain
mode (StreamItem items, Completion results) otherwise only
distinguishes booleans, strings and integers; everything else travels as an
opaque value.
"""

from __future__ import annotations

import json
import logging
from enum import StrEnum
from typing import Any, Final

import msgspec

from . import protocol
from .errors import InvalidFieldType
from .protocol import Field
from .tokens import TokenFormat, TokenReader, TokenWriter

logger = logging.getLogger(__name__)

_NESTED_ARRAY_DECODER: Final = json.JSONDecoder()


class ValueKind(StrEnum):
    BOOLEAN = "boolean"
    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    NESTED_ARRAY = "nested_array"
    BINARY = "binary"
    OPAQUE = "opaque"


class TaggedValue(msgspec.Struct, frozen=True):
    kind: ValueKind
    value: Any

    def to_json(self) -> Any:
        if self.kind is ValueKind.BINARY:
            return {
                Field.BINARY_HEADER: len(self.value),
                Field.BINARY_BYTES: self.value.hex().upper(),
            }
        return self.value


def tag_value(value: Any, field: str, *, extended: bool = False) -> TaggedValue:
    """Classify a JSON value.

    Raises:
        InvalidFieldType: for integers outside the MessagePack range or
            malformed binary objects.
    """
    if isinstance(value, bool):
        return TaggedValue(ValueKind.BOOLEAN, value)
    if isinstance(value, str):
        return TaggedValue(ValueKind.STRING, value)
    if isinstance(value, int):
        if not protocol.MSGPACK_INT_MIN <= value <= protocol.MSGPACK_INT_MAX:
            raise InvalidFieldType(field, "an integer within the 64-bit MessagePack range")
        return TaggedValue(ValueKind.INTEGER, value)
    if isinstance(value, float):
        return TaggedValue(ValueKind.FLOAT, value)
    if isinstance(value, dict) and Field.BINARY_HEADER in value and Field.BINARY_BYTES in value:
        return TaggedValue(ValueKind.BINARY, _binary_payload(value, field))
    if extended and isinstance(value, list):
        return TaggedValue(ValueKind.NESTED_ARRAY, value)
    return TaggedValue(ValueKind.OPAQUE, value)


def _binary_payload(value: dict[str, Any], field: str) -> bytes:
    header = value[Field.BINARY_HEADER]
    encoded = value[Field.BINARY_BYTES]
    if isinstance(header, bool) or not isinstance(header, int) or header < 0:
        raise InvalidFieldType(f"{field}.{Field.BINARY_HEADER}", "a non-negative integer")
    if not isinstance(encoded, str):
        raise InvalidFieldType(f"{field}.{Field.BINARY_BYTES}", "a hex string")
    try:
        payload = bytes.fromhex(encoded)
    except ValueError as exc:
        raise InvalidFieldType(f"{field}.{Field.BINARY_BYTES}", f"a hex string ({exc})") from exc
    if header != len(payload):
        raise InvalidFieldType(
            f"{field}.{Field.BINARY_HEADER}",
            f"equal to the number of bytes in {Field.BINARY_BYTES} ({len(payload)})",
        )
    return payload


def write_value(writer: TokenWriter, tagged: TaggedValue, field: str, *, null_sentinel: bool) -> None:
    """Pack *tagged* according to its kind.

    With *null_sentinel* the string ``"null"`` (any case) is written as nil.
    """
    match tagged.kind:
        case ValueKind.STRING if null_sentinel and tagged.value.lower() == protocol.NULL_SENTINEL:
            writer.nil()
        case ValueKind.NESTED_ARRAY:
            writer.value(msgspec.json.encode(tagged.value).decode("utf-8"), field)
        case ValueKind.FLOAT:
            writer.value(float(tagged.value), field)
        case _:
            writer.value(tagged.value, field)


def read_value(reader: TokenReader, field: str, *, extended: bool, nil_as_sentinel: bool) -> TaggedValue:
    """Read the next token as a tagged value, mirroring :func:`write_value`."""
    token = reader.peek_format()
    match token:
        case TokenFormat.NIL if nil_as_sentinel:
            reader.skip()
            return TaggedValue(ValueKind.STRING, protocol.NULL_SENTINEL)
        case TokenFormat.BOOLEAN:
            return TaggedValue(ValueKind.BOOLEAN, reader.read_bool(field))
        case TokenFormat.INTEGER:
            return TaggedValue(ValueKind.INTEGER, reader.read_int(field))
        case TokenFormat.STRING if extended:
            return _string_argument(reader.read_str(field))
        case TokenFormat.STRING:
            return TaggedValue(ValueKind.STRING, reader.read_str(field))
        case TokenFormat.FLOAT if extended:
            return TaggedValue(ValueKind.FLOAT, reader.read_float(field))
        case TokenFormat.BINARY:
            return TaggedValue(ValueKind.BINARY, reader.read_bin(field))
    if extended:
        logger.info("Argument '%s' has unhandled wire type %s; kept as opaque value", field, token.value)
    return TaggedValue(ValueKind.OPAQUE, reader.read_any())


def _string_argument(text: str) -> TaggedValue:
    text = text.replace(protocol.NUL_CHAR, "")
    if not text.startswith(protocol.NESTED_ARRAY_PREFIX):
        return TaggedValue(ValueKind.STRING, text)
    # The closing bracket is appended unconditionally; only the first complete
    # JSON value is kept, anything after it is dropped.
    try:
        nested, _ = _NESTED_ARRAY_DECODER.raw_decode(text + protocol.NESTED_ARRAY_SUFFIX)
    except json.JSONDecodeError:
        logger.debug("String argument starting with '[' is not a JSON array; kept verbatim")
        return TaggedValue(ValueKind.STRING, text)
    return TaggedValue(ValueKind.NESTED_ARRAY, nested)
