"""MessagePack token access for positional Hub Protocol messages.

Hub Protocol messages are arrays whose elements are read one at a time and
whose wire type is inspected before it is consumed, so the codec works on
tokens rather than on whole decoded objects. :class:`TokenReader` wraps a
``msgpack.Unpacker`` fed with exactly one frame payload; :class:`TokenWriter`
wraps a ``msgpack.Packer`` and accumulates the packed tokens.

Every ``msgpack`` failure is translated into the codec's own error types
here, so callers only ever see :mod:`blazorpack.protocol.errors`.
"""

from __future__ import annotations

from collections.abc import Callable
from enum import StrEnum
from typing import Any, Final, TypeVar

import msgpack

from .errors import IncompleteMessage, InvalidFieldType, MalformedHeader, UnexpectedValueType

R = TypeVar("R")


class TokenFormat(StrEnum):
    NIL = "nil"
    BOOLEAN = "boolean"
    INTEGER = "integer"
    FLOAT = "float"
    STRING = "string"
    BINARY = "binary"
    ARRAY = "array"
    MAP = "map"
    EXTENSION = "extension"
    NEVER_USED = "never-used"


_FIXED_LEADS: Final[dict[int, TokenFormat]] = {
    0xC0: TokenFormat.NIL,
    0xC1: TokenFormat.NEVER_USED,
    0xC2: TokenFormat.BOOLEAN,
    0xC3: TokenFormat.BOOLEAN,
    0xC4: TokenFormat.BINARY,
    0xC5: TokenFormat.BINARY,
    0xC6: TokenFormat.BINARY,
    0xC7: TokenFormat.EXTENSION,
    0xC8: TokenFormat.EXTENSION,
    0xC9: TokenFormat.EXTENSION,
    0xCA: TokenFormat.FLOAT,
    0xCB: TokenFormat.FLOAT,
    0xD4: TokenFormat.EXTENSION,
    0xD5: TokenFormat.EXTENSION,
    0xD6: TokenFormat.EXTENSION,
    0xD7: TokenFormat.EXTENSION,
    0xD8: TokenFormat.EXTENSION,
    0xD9: TokenFormat.STRING,
    0xDA: TokenFormat.STRING,
    0xDB: TokenFormat.STRING,
    0xDC: TokenFormat.ARRAY,
    0xDD: TokenFormat.ARRAY,
    0xDE: TokenFormat.MAP,
    0xDF: TokenFormat.MAP,
}


def _classify_lead(lead: int) -> TokenFormat:
    if lead <= 0x7F or lead >= 0xE0:
        return TokenFormat.INTEGER
    if lead <= 0x8F:
        return TokenFormat.MAP
    if lead <= 0x9F:
        return TokenFormat.ARRAY
    if lead <= 0xBF:
        return TokenFormat.STRING
    if 0xCC <= lead <= 0xD3:
        return TokenFormat.INTEGER
    return _FIXED_LEADS[lead]


# Format of a token indexed by its first byte.
LEAD_FORMATS: Final[tuple[TokenFormat, ...]] = tuple(_classify_lead(lead) for lead in range(256))


class TokenReader:
    """Sequential reader over a single frame payload."""

    def __init__(self, payload: bytes | bytearray | memoryview) -> None:
        self._payload = bytes(payload)
        self._unpacker = msgpack.Unpacker(raw=False, strict_map_key=False, timestamp=3)
        self._unpacker.feed(self._payload)

    @property
    def position(self) -> int:
        return int(self._unpacker.tell())

    def __len__(self) -> int:
        return len(self._payload)

    def has_more(self) -> bool:
        return self.position < len(self._payload)

    def peek_format(self) -> TokenFormat:
        """Return the format of the next token without consuming it."""
        position = self.position
        if position >= len(self._payload):
            raise IncompleteMessage(f"Unexpected end of message at offset {position}")
        return LEAD_FORMATS[self._payload[position]]

    def read_array_header(self, field: str = "array") -> int:
        if self.peek_format() is not TokenFormat.ARRAY:
            raise MalformedHeader(f"Expected array header for '{field}' at offset {self.position}")
        return self._call(self._unpacker.read_array_header)

    def read_map_header(self, field: str = "map") -> int:
        if self.peek_format() is not TokenFormat.MAP:
            raise MalformedHeader(f"Expected map header for '{field}' at offset {self.position}")
        return self._call(self._unpacker.read_map_header)

    def try_read_nil(self) -> bool:
        """Consume the next token if it is nil."""
        if self.peek_format() is not TokenFormat.NIL:
            return False
        self.skip()
        return True

    def read_int(self, field: str) -> int:
        return int(self._read_expected(TokenFormat.INTEGER, field))

    def read_bool(self, field: str) -> bool:
        return bool(self._read_expected(TokenFormat.BOOLEAN, field))

    def read_float(self, field: str) -> float:
        return float(self._read_expected(TokenFormat.FLOAT, field))

    def read_str(self, field: str) -> str:
        return str(self._read_expected(TokenFormat.STRING, field))

    def read_bin(self, field: str) -> bytes:
        return bytes(self._read_expected(TokenFormat.BINARY, field))

    def read_any(self) -> Any:
        """Consume the next token (and any nested tokens) as a Python value."""
        self.peek_format()
        return self._call(self._unpacker.unpack)

    def skip(self) -> None:
        self.peek_format()
        self._call(self._unpacker.skip)

    def _read_expected(self, expected: TokenFormat, field: str) -> Any:
        actual = self.peek_format()
        if actual is not expected:
            raise UnexpectedValueType(
                f"Field '{field}' expected {expected.value}, got {actual.value} at offset {self.position}"
            )
        return self._call(self._unpacker.unpack)

    def _call(self, func: Callable[[], R]) -> R:
        try:
            return func()
        except msgpack.OutOfData as exc:
            raise IncompleteMessage(f"MessagePack token truncated at offset {self.position}") from exc
        except (TypeError, ValueError) as exc:
            raise UnexpectedValueType(f"Malformed MessagePack token at offset {self.position}: {exc}") from exc


class TokenWriter:
    """Accumulates packed MessagePack tokens for one frame payload."""

    def __init__(self, *, use_single_float: bool = False) -> None:
        self._packer = msgpack.Packer(use_bin_type=True, use_single_float=use_single_float)
        self._buffer = bytearray()

    def __len__(self) -> int:
        return len(self._buffer)

    def array_header(self, size: int) -> None:
        self._buffer += self._packer.pack_array_header(size)

    def map_header(self, size: int) -> None:
        self._buffer += self._packer.pack_map_header(size)

    def nil(self) -> None:
        self._buffer += self._packer.pack(None)

    def value(self, value: Any, field: str = "value") -> None:
        """Pack *value* with its natural MessagePack type."""
        try:
            self._buffer += self._packer.pack(value)
        except (TypeError, ValueError, OverflowError) as exc:
            raise InvalidFieldType(field, f"a MessagePack-encodable value ({exc})") from exc

    def getvalue(self) -> bytes:
        return bytes(self._buffer)
