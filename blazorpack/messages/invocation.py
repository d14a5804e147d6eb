"""Invocation and StreamInvocation messages.

Wire layout::

    [MessageType, {}, InvocationId | nil, Target, [Arguments...]] StreamIds?

The array header always declares five elements. ``StreamIds`` travels after
the array as a string holding its compact JSON text, so it counts toward the
frame length but not toward the array header. A sixth array element is
accepted on decode as well.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import msgspec

from ..config.model import CodecConfig
from ..protocol import protocol
from ..protocol.contracts import VariantCodec
from ..protocol.errors import UnexpectedValueType
from ..protocol.frame import build_frame
from ..protocol.protocol import Field
from ..protocol.structures import InvocationMessage
from ..protocol.tokens import TokenFormat, TokenReader, TokenWriter
from ..protocol.values import read_value, tag_value, write_value
from . import common

NAME = "Invocation"


def parse(message: Mapping[str, Any]) -> InvocationMessage:
    message_type = common.require_int(message, Field.MESSAGE_TYPE)
    headers = common.require_int(message, Field.HEADERS)
    target = common.require_str(message, Field.TARGET)
    arguments = common.require_list(message, Field.ARGUMENTS)
    invocation_id = common.optional_str(message, Field.INVOCATION_ID)
    stream_ids = common.optional_list(message, Field.STREAM_IDS)
    return InvocationMessage(
        message_type=message_type,
        headers=headers,
        target=target,
        arguments=tuple(
            tag_value(argument, f"{Field.ARGUMENTS}[{index}]", extended=True)
            for index, argument in enumerate(arguments)
        ),
        invocation_id=invocation_id,
        stream_ids=stream_ids,
    )


def validate(message: Mapping[str, Any]) -> bool:
    return common.run_validation(NAME, parse, message)


def encode(message: Mapping[str, Any], config: CodecConfig) -> bytes:
    invocation = parse(message)
    writer = TokenWriter(use_single_float=config.use_single_float)
    writer.array_header(protocol.INVOCATION_ARRAY_HEADER)
    writer.value(invocation.message_type, Field.MESSAGE_TYPE)
    common.write_headers(writer)
    common.write_invocation_id(writer, invocation.invocation_id)
    writer.value(invocation.target, Field.TARGET)
    writer.array_header(len(invocation.arguments))
    for index, argument in enumerate(invocation.arguments):
        write_value(writer, argument, f"{Field.ARGUMENTS}[{index}]", null_sentinel=True)
    if invocation.stream_ids is not None:
        writer.value(msgspec.json.encode(invocation.stream_ids).decode("utf-8"), Field.STREAM_IDS)
    return build_frame(writer.getvalue())


def decode(reader: TokenReader, message_type: int, array_length: int | None) -> InvocationMessage:
    common.expect_elements(array_length, protocol.INVOCATION_ARRAY_HEADER, NAME)
    headers = common.read_headers(reader)
    invocation_id = common.read_invocation_id(reader)
    target = reader.read_str(Field.TARGET)
    count = reader.read_array_header(Field.ARGUMENTS)
    arguments = tuple(
        read_value(reader, f"{Field.ARGUMENTS}[{index}]", extended=True, nil_as_sentinel=True)
        for index in range(count)
    )

    stream_ids = None
    consumed = protocol.INVOCATION_ARRAY_HEADER
    if array_length is not None and array_length > consumed:
        stream_ids = _read_stream_ids(reader)
        consumed += 1
    common.skip_extra(reader, array_length, consumed, NAME)
    if stream_ids is None and reader.has_more():
        stream_ids = _read_stream_ids(reader)

    return InvocationMessage(
        message_type=message_type,
        headers=headers,
        target=target,
        arguments=arguments,
        invocation_id=invocation_id,
        stream_ids=stream_ids,
    )


def _read_stream_ids(reader: TokenReader) -> list[Any] | None:
    if reader.try_read_nil():
        return None
    if reader.peek_format() is TokenFormat.ARRAY:
        return list(reader.read_any())
    text = reader.read_str(Field.STREAM_IDS)
    try:
        stream_ids = msgspec.json.decode(text)
    except msgspec.DecodeError as exc:
        raise UnexpectedValueType(f"Field '{Field.STREAM_IDS}' is not valid JSON: {exc}") from exc
    if not isinstance(stream_ids, list):
        raise UnexpectedValueType(f"Field '{Field.STREAM_IDS}' must hold a JSON array")
    return stream_ids


CODEC = VariantCodec(name=NAME, validate=validate, encode=encode, decode=decode)
