"""StreamItem messages.

Written without an array header::

    MessageType, {}, InvocationId | nil, Item

Decode also accepts the array-wrapped form used by other Hub Protocol peers.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..config.model import CodecConfig
from ..protocol.contracts import VariantCodec
from ..protocol.frame import build_frame
from ..protocol.protocol import Field
from ..protocol.structures import StreamItemMessage
from ..protocol.tokens import TokenReader, TokenWriter
from ..protocol.values import read_value, tag_value, write_value
from . import common

NAME = "StreamItem"
ELEMENT_COUNT = 4


def parse(message: Mapping[str, Any]) -> StreamItemMessage:
    message_type = common.require_int(message, Field.MESSAGE_TYPE)
    headers = common.require_int(message, Field.HEADERS)
    item = common.require(message, Field.ITEM)
    invocation_id = common.optional_str(message, Field.INVOCATION_ID)
    return StreamItemMessage(
        message_type=message_type,
        headers=headers,
        item=tag_value(item, Field.ITEM),
        invocation_id=invocation_id,
    )


def validate(message: Mapping[str, Any]) -> bool:
    return common.run_validation(NAME, parse, message)


def encode(message: Mapping[str, Any], config: CodecConfig) -> bytes:
    stream_item = parse(message)
    writer = TokenWriter(use_single_float=config.use_single_float)
    writer.value(stream_item.message_type, Field.MESSAGE_TYPE)
    common.write_headers(writer)
    common.write_invocation_id(writer, stream_item.invocation_id)
    write_value(writer, stream_item.item, Field.ITEM, null_sentinel=False)
    return build_frame(writer.getvalue())


def decode(reader: TokenReader, message_type: int, array_length: int | None) -> StreamItemMessage:
    common.expect_elements(array_length, ELEMENT_COUNT, NAME)
    headers = common.read_headers(reader)
    invocation_id = common.read_invocation_id(reader)
    item = read_value(reader, Field.ITEM, extended=False, nil_as_sentinel=False)
    common.skip_extra(reader, array_length, ELEMENT_COUNT, NAME)
    return StreamItemMessage(
        message_type=message_type,
        headers=headers,
        item=item,
        invocation_id=invocation_id,
    )


CODEC = VariantCodec(name=NAME, validate=validate, encode=encode, decode=decode)
