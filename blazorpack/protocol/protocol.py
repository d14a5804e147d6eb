"""Hub Protocol constants for the BlazorPack codec.

Message type discriminants, completion result kinds and the fixed array
header sizes written by each variant.
"""

from __future__ import annotations

from enum import IntEnum
from types import MappingProxyType
from typing import Final, Mapping


class HubMessageType(IntEnum):
    INVOCATION = 1
    STREAM_ITEM = 2
    COMPLETION = 3
    STREAM_INVOCATION = 4
    CANCEL_INVOCATION = 5
    PING = 6
    CLOSE = 7


class ResultKind(IntEnum):
    ERROR = 1
    VOID = 2
    NON_VOID = 3


class Field:
    """Key names of the structured (JSON) representation."""

    MESSAGE_TYPE: Final[str] = "MessageType"
    HEADERS: Final[str] = "Headers"
    INVOCATION_ID: Final[str] = "InvocationId"
    TARGET: Final[str] = "Target"
    ARGUMENTS: Final[str] = "Arguments"
    STREAM_IDS: Final[str] = "StreamIds"
    ITEM: Final[str] = "Item"
    RESULT_KIND: Final[str] = "ResultKind"
    RESULT: Final[str] = "Result"
    ERROR: Final[str] = "Error"
    ALLOW_RECONNECT: Final[str] = "AllowReconnect"
    BINARY_HEADER: Final[str] = "BinaryHeader"
    BINARY_BYTES: Final[str] = "BinaryBytes"


DEFAULT_MAP_HEADER: Final[int] = 0
NULL_SENTINEL: Final[str] = "null"
NUL_CHAR: Final[str] = "\0"
NESTED_ARRAY_PREFIX: Final[str] = "["
NESTED_ARRAY_SUFFIX: Final[str] = "]"

VARINT_MAX: Final[int] = 0xFFFFFFFF
# Longest prefix accepted while scanning a batch (a 64-bit value).
VARINT_MAX_BYTES: Final[int] = 10
MSGPACK_INT_MIN: Final[int] = -(2**63)
MSGPACK_INT_MAX: Final[int] = 2**64 - 1

ERROR_PLACEHOLDER_KEY: Final[str] = "BlazorPack Error"
ERROR_PLACEHOLDER_TEXT: Final[str] = "Message is incomplete or incompatible"

INVOCATION_ARRAY_HEADER: Final[int] = 5
CANCEL_INVOCATION_ARRAY_HEADER: Final[int] = 3
COMPLETION_RESULT_HEADER: Final[int] = 5
COMPLETION_NORES_HEADER: Final[int] = 4
CLOSE_RECONNECT_ARRAY_HEADER: Final[int] = 3
CLOSE_NORECON_ARRAY_HEADER: Final[int] = 2

# Completion array size keyed by whether a Result slot is written.
COMPLETION_ARRAY_HEADERS: Final[Mapping[bool, int]] = MappingProxyType(
    {True: COMPLETION_RESULT_HEADER, False: COMPLETION_NORES_HEADER}
)
# Close array size keyed by whether AllowReconnect is written.
CLOSE_ARRAY_HEADERS: Final[Mapping[bool, int]] = MappingProxyType(
    {True: CLOSE_RECONNECT_ARRAY_HEADER, False: CLOSE_NORECON_ARRAY_HEADER}
)

RESULT_KINDS_WITH_VALUE: Final[frozenset[int]] = frozenset({ResultKind.ERROR, ResultKind.NON_VOID})


def message_type_name(message_type: int) -> str:
    try:
        return HubMessageType(message_type).name
    except ValueError:
        return f"UNKNOWN({message_type})"
