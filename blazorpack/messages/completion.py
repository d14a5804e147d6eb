"""Completion messages.

Wire layout::

    [MessageType, {}, InvocationId | nil, ResultKind, Result?]

``ResultKind`` 1 (error) and 3 (non-void) carry a ``Result`` and use a
five-element header; 2 (void) carries none and uses four.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from ..config.model import CodecConfig
from ..protocol import protocol
from ..protocol.contracts import VariantCodec
from ..protocol.errors import InvalidResultKind, MalformedHeader
from ..protocol.frame import build_frame
from ..protocol.protocol import Field, ResultKind
from ..protocol.structures import CompletionMessage
from ..protocol.tokens import TokenReader, TokenWriter
from ..protocol.values import read_value, tag_value, write_value
from . import common

logger = logging.getLogger(__name__)

NAME = "Completion"


def parse(message: Mapping[str, Any]) -> CompletionMessage:
    message_type = common.require_int(message, Field.MESSAGE_TYPE)
    headers = common.require_int(message, Field.HEADERS)
    result_kind = common.require_int(message, Field.RESULT_KIND)
    invocation_id = common.optional_str(message, Field.INVOCATION_ID)
    result = message.get(Field.RESULT)

    if not ResultKind.ERROR <= result_kind <= ResultKind.NON_VOID:
        raise InvalidResultKind(
            Field.RESULT_KIND,
            f"field '{Field.RESULT_KIND}' must be between {ResultKind.ERROR:d} and {ResultKind.NON_VOID:d}, "
            f"got {result_kind}",
        )
    if result_kind in protocol.RESULT_KINDS_WITH_VALUE and result is None:
        raise InvalidResultKind(
            Field.RESULT, f"'{Field.RESULT_KIND}' {result_kind} requires a '{Field.RESULT}' field"
        )
    if result_kind not in protocol.RESULT_KINDS_WITH_VALUE and result is not None:
        raise InvalidResultKind(
            Field.RESULT, f"'{Field.RESULT_KIND}' {result_kind} does not allow a '{Field.RESULT}' field"
        )

    return CompletionMessage(
        message_type=message_type,
        headers=headers,
        result_kind=result_kind,
        invocation_id=invocation_id,
        result=tag_value(result, Field.RESULT) if result is not None else None,
    )


def validate(message: Mapping[str, Any]) -> bool:
    return common.run_validation(NAME, parse, message)


def encode(message: Mapping[str, Any], config: CodecConfig) -> bytes:
    completion = parse(message)
    writer = TokenWriter(use_single_float=config.use_single_float)
    writer.array_header(protocol.COMPLETION_ARRAY_HEADERS[completion.result is not None])
    writer.value(completion.message_type, Field.MESSAGE_TYPE)
    common.write_headers(writer)
    common.write_invocation_id(writer, completion.invocation_id)
    writer.value(completion.result_kind, Field.RESULT_KIND)
    if completion.result is not None:
        write_value(writer, completion.result, Field.RESULT, null_sentinel=True)
    return build_frame(writer.getvalue())


def decode(reader: TokenReader, message_type: int, array_length: int | None) -> CompletionMessage:
    common.expect_elements(array_length, protocol.COMPLETION_NORES_HEADER, NAME)
    headers = common.read_headers(reader)
    invocation_id = common.read_invocation_id(reader)
    result_kind = reader.read_int(Field.RESULT_KIND)

    if array_length is None:
        has_result = reader.has_more()
    else:
        has_result = array_length >= protocol.COMPLETION_RESULT_HEADER
    result = read_value(reader, Field.RESULT, extended=False, nil_as_sentinel=True) if has_result else None
    consumed = protocol.COMPLETION_ARRAY_HEADERS[has_result]
    common.skip_extra(reader, array_length, consumed, NAME)

    if result_kind in protocol.RESULT_KINDS_WITH_VALUE and result is None:
        raise MalformedHeader(f"{NAME} with {Field.RESULT_KIND} {result_kind} carries no result")
    if result_kind not in protocol.RESULT_KINDS_WITH_VALUE and result is not None:
        logger.info("%s with %s %d carries a result; dropped", NAME, Field.RESULT_KIND, result_kind)
        result = None

    return CompletionMessage(
        message_type=message_type,
        headers=headers,
        result_kind=result_kind,
        invocation_id=invocation_id,
        result=result,
    )


CODEC = VariantCodec(name=NAME, validate=validate, encode=encode, decode=decode)
