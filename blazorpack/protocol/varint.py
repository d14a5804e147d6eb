"""Unsigned variable-length integers used as frame length prefixes.

Encoding is little-endian base-128: seven value bits per byte, with the high
bit set on every byte except the last.

Example:
    >>> encode(300)
    b'\\xac\\x02'
    >>> decode(b"\\xac\\x02\\x95")
    (300, 2)
"""

from __future__ import annotations

from typing import Any

from construct import ConstructError, Struct, Tell, VarInt  # type: ignore

from . import protocol
from .errors import TruncatedVarInt

# Value followed by the stream position once the terminating byte is read.
VARINT_STRUCT: Any = Struct(
    "value" / VarInt,
    "consumed" / Tell,
)


def encode(value: int) -> bytes:
    """Return the minimal VarInt encoding of *value*."""
    if not 0 <= value <= protocol.VARINT_MAX:
        raise ValueError(f"VarInt value {value} outside unsigned 32-bit range")
    return VarInt.build(value)


def decode(data: bytes | bytearray | memoryview) -> tuple[int, int]:
    """Read a VarInt at offset 0 of *data*.

    Returns:
        The decoded value and the number of bytes it occupied.

    Raises:
        TruncatedVarInt: if the buffer ends before a terminating byte.
    """
    try:
        container = VARINT_STRUCT.parse(bytes(data))
    except ConstructError as exc:
        raise TruncatedVarInt(f"Truncated VarInt in {len(data)} byte buffer: {exc}") from exc
    return int(container.value), int(container.consumed)
