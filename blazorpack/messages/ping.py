"""Ping messages.

Written as the bare type integer, without array header or headers map. Both
``06`` and ``[6]`` decode to a Ping.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..config.model import CodecConfig
from ..protocol.contracts import VariantCodec
from ..protocol.frame import build_frame
from ..protocol.protocol import Field
from ..protocol.structures import PingMessage
from ..protocol.tokens import TokenReader, TokenWriter
from . import common

NAME = "Ping"


def parse(message: Mapping[str, Any]) -> PingMessage:
    return PingMessage(message_type=common.require_int(message, Field.MESSAGE_TYPE))


def validate(message: Mapping[str, Any]) -> bool:
    return common.run_validation(NAME, parse, message)


def encode(message: Mapping[str, Any], config: CodecConfig) -> bytes:
    ping = parse(message)
    writer = TokenWriter(use_single_float=config.use_single_float)
    writer.value(ping.message_type, Field.MESSAGE_TYPE)
    return build_frame(writer.getvalue())


def decode(reader: TokenReader, message_type: int, array_length: int | None) -> PingMessage:
    common.skip_extra(reader, array_length, 1, NAME)
    return PingMessage(message_type=message_type)


CODEC = VariantCodec(name=NAME, validate=validate, encode=encode, decode=decode)
