"""Contract shared by every message variant codec."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any, TypeAlias

import msgspec

from ..config.model import CodecConfig
from .structures import HubMessage
from .tokens import TokenReader

StructuredMessage: TypeAlias = Mapping[str, Any]

Validator: TypeAlias = Callable[[StructuredMessage], bool]
Encoder: TypeAlias = Callable[[StructuredMessage, CodecConfig], bytes]
Decoder: TypeAlias = Callable[[TokenReader, int, int | None], HubMessage]


class VariantCodec(msgspec.Struct, frozen=True):
    """Immutable bundle of the three operations a message variant offers.

    Attributes:
        name: Display name of the variant.
        validate: Check a structured message, logging the failed rule.
        encode: Build the complete frame (VarInt prefix included) for a
            structured message that passed ``validate``.
        decode: Read the remaining elements of a frame whose type
            discriminant has already been consumed. ``array_length`` is the
            declared element count, or ``None`` for a header-less frame.
    """

    name: str
    validate: Validator
    encode: Encoder
    decode: Decoder
