"""CancelInvocation messages: ``[MessageType, {}, InvocationId | nil]``."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..config.model import CodecConfig
from ..protocol import protocol
from ..protocol.contracts import VariantCodec
from ..protocol.frame import build_frame
from ..protocol.protocol import Field
from ..protocol.structures import CancelInvocationMessage
from ..protocol.tokens import TokenReader, TokenWriter
from . import common

NAME = "CancelInvocation"


def parse(message: Mapping[str, Any]) -> CancelInvocationMessage:
    return CancelInvocationMessage(
        message_type=common.require_int(message, Field.MESSAGE_TYPE),
        headers=common.require_int(message, Field.HEADERS),
        invocation_id=common.optional_str(message, Field.INVOCATION_ID),
    )


def validate(message: Mapping[str, Any]) -> bool:
    return common.run_validation(NAME, parse, message)


def encode(message: Mapping[str, Any], config: CodecConfig) -> bytes:
    cancel = parse(message)
    writer = TokenWriter(use_single_float=config.use_single_float)
    writer.array_header(protocol.CANCEL_INVOCATION_ARRAY_HEADER)
    writer.value(cancel.message_type, Field.MESSAGE_TYPE)
    common.write_headers(writer)
    common.write_invocation_id(writer, cancel.invocation_id)
    return build_frame(writer.getvalue())


def decode(reader: TokenReader, message_type: int, array_length: int | None) -> CancelInvocationMessage:
    common.expect_elements(array_length, protocol.CANCEL_INVOCATION_ARRAY_HEADER, NAME)
    headers = common.read_headers(reader)
    invocation_id = common.read_invocation_id(reader)
    common.skip_extra(reader, array_length, protocol.CANCEL_INVOCATION_ARRAY_HEADER, NAME)
    return CancelInvocationMessage(
        message_type=message_type,
        headers=headers,
        invocation_id=invocation_id,
    )


CODEC = VariantCodec(name=NAME, validate=validate, encode=encode, decode=decode)
