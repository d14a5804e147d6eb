"""Close messages.

Wire layout::

    [MessageType, Error | nil, AllowReconnect?]

Three elements when ``AllowReconnect`` is given, two otherwise. An ``Error``
of ``"null"`` (any case) is written as nil and decoded back to ``"null"``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..config.model import CodecConfig
from ..protocol import protocol
from ..protocol.contracts import VariantCodec
from ..protocol.frame import build_frame
from ..protocol.protocol import Field
from ..protocol.structures import CloseMessage
from ..protocol.tokens import TokenReader, TokenWriter
from . import common

NAME = "Close"


def parse(message: Mapping[str, Any]) -> CloseMessage:
    return CloseMessage(
        message_type=common.require_int(message, Field.MESSAGE_TYPE),
        error=common.require_str(message, Field.ERROR),
        allow_reconnect=common.optional_bool(message, Field.ALLOW_RECONNECT),
    )


def validate(message: Mapping[str, Any]) -> bool:
    return common.run_validation(NAME, parse, message)


def encode(message: Mapping[str, Any], config: CodecConfig) -> bytes:
    close = parse(message)
    has_reconnect = close.allow_reconnect is not None
    writer = TokenWriter(use_single_float=config.use_single_float)
    writer.array_header(protocol.CLOSE_ARRAY_HEADERS[has_reconnect])
    writer.value(close.message_type, Field.MESSAGE_TYPE)
    _write_error(writer, close.error)
    if has_reconnect:
        writer.value(close.allow_reconnect, Field.ALLOW_RECONNECT)
    elif config.echo_close_error:
        # Legacy peers expect the error repeated after the two-element array.
        _write_error(writer, close.error)
    return build_frame(writer.getvalue())


def decode(reader: TokenReader, message_type: int, array_length: int | None) -> CloseMessage:
    common.expect_elements(array_length, protocol.CLOSE_NORECON_ARRAY_HEADER, NAME)
    error = protocol.NULL_SENTINEL if reader.try_read_nil() else reader.read_str(Field.ERROR)

    if array_length is None:
        has_reconnect = reader.has_more()
    else:
        has_reconnect = array_length >= protocol.CLOSE_RECONNECT_ARRAY_HEADER
    allow_reconnect = None
    if has_reconnect and not reader.try_read_nil():
        allow_reconnect = reader.read_bool(Field.ALLOW_RECONNECT)
    common.skip_extra(reader, array_length, protocol.CLOSE_ARRAY_HEADERS[has_reconnect], NAME)
    return CloseMessage(message_type=message_type, error=error, allow_reconnect=allow_reconnect)


def _write_error(writer: TokenWriter, error: str) -> None:
    if error.lower() == protocol.NULL_SENTINEL:
        writer.nil()
    else:
        writer.value(error, Field.ERROR)


CODEC = VariantCodec(name=NAME, validate=validate, encode=encode, decode=decode)
