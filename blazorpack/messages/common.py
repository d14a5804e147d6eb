"""Helpers shared by the message variant codecs."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

from ..protocol import protocol
from ..protocol.errors import InvalidFieldType, MalformedHeader, MessageValidationError, MissingRequiredField
from ..protocol.protocol import Field
from ..protocol.tokens import TokenReader, TokenWriter

logger = logging.getLogger(__name__)


def require(message: Mapping[str, Any], field: str) -> Any:
    if field not in message:
        raise MissingRequiredField(field)
    return message[field]


def require_int(message: Mapping[str, Any], field: str) -> int:
    value = require(message, field)
    # bool is an int subclass but JSON true/false are not integers.
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidFieldType(field, "an integer")
    return value


def require_str(message: Mapping[str, Any], field: str) -> str:
    value = require(message, field)
    if not isinstance(value, str):
        raise InvalidFieldType(field, "a string")
    return value


def require_list(message: Mapping[str, Any], field: str) -> list[Any]:
    value = require(message, field)
    if not isinstance(value, list):
        raise InvalidFieldType(field, "an array")
    return value


def optional_str(message: Mapping[str, Any], field: str) -> str | None:
    value = message.get(field)
    if value is None:
        return None
    if not isinstance(value, str):
        raise InvalidFieldType(field, "a string")
    return value


def optional_bool(message: Mapping[str, Any], field: str) -> bool | None:
    value = message.get(field)
    if value is None:
        return None
    if not isinstance(value, bool):
        raise InvalidFieldType(field, "a boolean")
    return value


def optional_list(message: Mapping[str, Any], field: str) -> list[Any] | None:
    value = message.get(field)
    if value is None:
        return None
    if not isinstance(value, list):
        raise InvalidFieldType(field, "an array")
    return value


def run_validation(name: str, parse: Callable[[Mapping[str, Any]], Any], message: Mapping[str, Any]) -> bool:
    """Return True when *parse* accepts *message*; log the violated rule otherwise."""
    try:
        parse(message)
    except MessageValidationError as exc:
        logger.error("Invalid %s message: %s", name, exc.message)
        return False
    return True


def write_headers(writer: TokenWriter) -> None:
    writer.map_header(protocol.DEFAULT_MAP_HEADER)


def read_headers(reader: TokenReader) -> int:
    """Consume the headers map and return its entry count.

    Entries are skipped; the codec does not represent header contents.
    """
    count = reader.read_map_header(Field.HEADERS)
    if count:
        logger.info("Unexpected non-empty headers map with %d entries; entries skipped", count)
        for _ in range(count * 2):
            reader.skip()
    return count


def write_invocation_id(writer: TokenWriter, invocation_id: str | None) -> None:
    if invocation_id is None:
        writer.nil()
    else:
        writer.value(invocation_id, Field.INVOCATION_ID)


def read_invocation_id(reader: TokenReader) -> str | None:
    if reader.try_read_nil():
        return None
    return reader.read_str(Field.INVOCATION_ID)


def expect_elements(array_length: int | None, minimum: int, name: str) -> None:
    """Reject an array header that declares fewer elements than *name* needs."""
    if array_length is not None and array_length < minimum:
        raise MalformedHeader(f"{name} message declares {array_length} elements, expected at least {minimum}")


def skip_extra(reader: TokenReader, array_length: int | None, consumed: int, name: str) -> None:
    """Skip declared array elements beyond the first *consumed*."""
    if array_length is None or array_length <= consumed:
        return
    logger.debug("Skipping %d extra element(s) of %s message", array_length - consumed, name)
    for _ in range(array_length - consumed):
        reader.skip()
