"""BlazorPack frame building and batch walking.

Frame Structure:
    [VarInt length] [length bytes of MessagePack payload]

A batch is zero or more frames laid back to back. The declared length
always equals the payload byte count that follows, so a reader never has to
look past ``offset + prefix_length + length``.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

import msgspec
from construct import GreedyBytes, Prefixed, VarInt  # type: ignore

from . import protocol, varint
from .errors import IncompleteMessage

FRAME_STRUCT: Any = Prefixed(VarInt, GreedyBytes)


class FrameSpan(msgspec.Struct, frozen=True, kw_only=True):
    """Location of one frame inside a batch blob.

    Attributes:
        offset: Index of the first VarInt byte within the blob.
        prefix_length: Number of bytes the VarInt occupied.
        length: Declared payload length.
        payload: The payload bytes (exactly ``length`` of them).
    """

    offset: int
    prefix_length: int
    length: int
    payload: bytes

    @property
    def end(self) -> int:
        return self.offset + self.prefix_length + self.length


def build_frame(payload: bytes) -> bytes:
    """Prefix *payload* with its VarInt length."""
    if len(payload) > protocol.VARINT_MAX:
        raise ValueError(f"Payload too large ({len(payload)} bytes) for a VarInt length prefix")
    return FRAME_STRUCT.build(payload)


def iter_frames(blob: bytes | bytearray | memoryview) -> Iterator[FrameSpan]:
    """Yield every frame of *blob* in order.

    Raises:
        TruncatedVarInt: if a length prefix is cut short.
        IncompleteMessage: if a declared length exceeds the remaining bytes.
    """
    data = bytes(blob)
    total = len(data)
    offset = 0
    while offset < total:
        length, prefix_length = varint.decode(data[offset : offset + protocol.VARINT_MAX_BYTES])
        start = offset + prefix_length
        end = start + length
        if end > total:
            raise IncompleteMessage(
                f"Frame at offset {offset} declares {length} bytes, " f"only {total - start} available"
            )
        yield FrameSpan(offset=offset, prefix_length=prefix_length, length=length, payload=data[start:end])
        offset = end
