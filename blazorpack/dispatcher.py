"""Message type discrimination for both directions of the codec.

The dispatch table is built once and never mutated. Unknown discriminants
fall back to the Invocation codec, in both directions.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Final

import msgspec

from .messages import cancel_invocation, close, completion, invocation, ping, stream_item
from .messages.common import require_int
from .protocol.contracts import VariantCodec
from .protocol.errors import MalformedHeader
from .protocol.protocol import Field, HubMessageType, message_type_name
from .protocol.tokens import TokenFormat, TokenReader

logger = logging.getLogger(__name__)

DISPATCH_TABLE: Final[Mapping[int, VariantCodec]] = MappingProxyType(
    {
        HubMessageType.INVOCATION: invocation.CODEC,
        HubMessageType.STREAM_ITEM: stream_item.CODEC,
        HubMessageType.COMPLETION: completion.CODEC,
        HubMessageType.STREAM_INVOCATION: invocation.CODEC,
        HubMessageType.CANCEL_INVOCATION: cancel_invocation.CODEC,
        HubMessageType.PING: ping.CODEC,
        HubMessageType.CLOSE: close.CODEC,
    }
)
FALLBACK_CODEC: Final[VariantCodec] = invocation.CODEC


class Classified(msgspec.Struct, frozen=True, kw_only=True):
    """A frame whose type discriminant has been read.

    Attributes:
        codec: Codec that decodes the rest of the frame.
        reader: Reader positioned right after the discriminant.
        message_type: The discriminant as sent.
        array_length: Declared element count, ``None`` for a header-less frame.
    """

    codec: VariantCodec
    reader: TokenReader
    message_type: int
    array_length: int | None

    def decode(self) -> Any:
        return self.codec.decode(self.reader, self.message_type, self.array_length)


def codec_for(message_type: int) -> VariantCodec:
    codec = DISPATCH_TABLE.get(message_type)
    if codec is None:
        logger.info("Unknown message type %d; handling as %s", message_type, FALLBACK_CODEC.name)
        return FALLBACK_CODEC
    return codec


def classify_binary(payload: bytes) -> Classified | None:
    """Read the array header and type discriminant of one frame payload.

    Returns:
        ``None`` for an array that declares zero elements, which carries no
        message.

    Raises:
        MalformedHeader: if the payload starts with neither an array header
            nor a bare integer.
        UnexpectedValueType: if the first array element is not an integer.
    """
    reader = TokenReader(payload)
    lead = reader.peek_format()
    match lead:
        case TokenFormat.ARRAY:
            array_length: int | None = reader.read_array_header(Field.MESSAGE_TYPE)
            if array_length == 0:
                return None
        case TokenFormat.INTEGER:
            # Ping and StreamItem are written without an array header.
            array_length = None
        case _:
            raise MalformedHeader(f"Expected array header or message type, got {lead.value}")

    message_type = reader.read_int(Field.MESSAGE_TYPE)
    logger.debug(
        "Classified frame as %s (elements=%s)",
        message_type_name(message_type),
        "header-less" if array_length is None else array_length,
    )
    return Classified(
        codec=codec_for(message_type),
        reader=reader,
        message_type=message_type,
        array_length=array_length,
    )


def classify_structured(message: Mapping[str, Any]) -> VariantCodec:
    """Select the codec for a structured message.

    Raises:
        MissingRequiredField: if ``MessageType`` is absent.
        InvalidFieldType: if ``MessageType`` is not an integer.
    """
    return codec_for(require_int(message, Field.MESSAGE_TYPE))
