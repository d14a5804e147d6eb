"""Batch segmentation and assembly, plus the two JSON entry points.

A batch is the concatenation of zero or more length-prefixed frames. Decode
failures and encode failures both affect the whole batch: a batch that cannot
be decoded is shown as a single error placeholder, and a batch that cannot be
encoded produces no bytes at all.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

import msgspec

from .config.model import DEFAULT_CONFIG, CodecConfig
from .dispatcher import classify_binary, classify_structured
from .protocol.errors import BatchEncodeError, BlazorPackError, InvalidFieldType
from .protocol.frame import iter_frames
from .protocol.structures import ErrorPlaceholder, HubMessage
from .util import log_hexdump

logger = logging.getLogger(__name__)

RenderedMessage = HubMessage | ErrorPlaceholder


def segment(blob: bytes | bytearray | memoryview) -> list[HubMessage]:
    """Decode every frame of *blob*, in order.

    Frames whose array declares zero elements carry no message and are
    dropped.

    Raises:
        FrameDecodeError: on the first frame that cannot be decoded.
    """
    messages: list[HubMessage] = []
    for span in iter_frames(blob):
        log_hexdump(logger, logging.DEBUG, f"frame@{span.offset}", span.payload)
        classified = classify_binary(span.payload)
        if classified is None:
            logger.debug("Frame at offset %d holds no message; dropped", span.offset)
            continue
        messages.append(classified.decode())
    return messages


def assemble(messages: Sequence[Any], config: CodecConfig = DEFAULT_CONFIG) -> bytes:
    """Encode structured messages into one batch.

    Raises:
        BatchEncodeError: naming the index of the first message that fails.
    """
    output = bytearray()
    for index, message in enumerate(messages):
        try:
            if not isinstance(message, Mapping):
                raise InvalidFieldType(f"[{index}]", "a JSON object")
            codec = classify_structured(message)
        except BlazorPackError as exc:
            raise BatchEncodeError(index, exc.message) from exc
        if not codec.validate(message):
            raise BatchEncodeError(index, f"{codec.name} message failed validation")
        try:
            output += codec.encode(message, config)
        except BlazorPackError as exc:
            raise BatchEncodeError(index, exc.message) from exc
    return bytes(output)


def blazor_unpack(blob: bytes | bytearray | memoryview) -> list[RenderedMessage]:
    """Decode *blob*, substituting a single placeholder if any frame fails."""
    try:
        return list(segment(blob))
    except BlazorPackError as exc:
        logger.warning("Failed to decode BlazorPack batch of %d bytes: %s", len(blob), exc.message)
        return [ErrorPlaceholder()]


def render_messages(messages: Sequence[RenderedMessage], config: CodecConfig = DEFAULT_CONFIG) -> str:
    rendered = (
        msgspec.json.format(msgspec.json.encode(message.to_json()), indent=config.json_indent).decode("utf-8")
        for message in messages
    )
    return "[" + config.message_separator.join(rendered) + "]"


def unpack_to_json(blob: bytes | bytearray | memoryview, config: CodecConfig | None = None) -> str:
    """Render a binary batch as a JSON array of messages."""
    active = config or DEFAULT_CONFIG
    messages = blazor_unpack(blob)
    try:
        return render_messages(messages, active)
    except (TypeError, msgspec.EncodeError) as exc:
        # Opaque maps may carry keys JSON cannot express (nil, bool).
        logger.warning("Failed to render BlazorPack batch of %d bytes as JSON: %s", len(blob), exc)
        return render_messages([ErrorPlaceholder()], active)


def pack_from_json(text: str | bytes | Sequence[Any], config: CodecConfig | None = None) -> bytes | None:
    """Encode a JSON array of messages into a binary batch.

    *text* may be JSON text or an already-parsed list. Returns ``None`` when
    the input is not a JSON array or any message fails to encode.
    """
    active = config or DEFAULT_CONFIG
    if isinstance(text, (str, bytes)):
        try:
            messages = msgspec.json.decode(text)
        except msgspec.DecodeError as exc:
            logger.error("Input is not valid JSON: %s", exc)
            return None
    else:
        messages = text

    if not isinstance(messages, (list, tuple)):
        logger.error("Input must be a JSON array of messages, got %s", type(messages).__name__)
        return None

    try:
        return assemble(messages, active)
    except BatchEncodeError as exc:
        logger.error("Failed to encode BlazorPack batch: %s", exc.message)
        return None
