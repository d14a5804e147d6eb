"""Typed Hub Protocol messages.

Each variant is a frozen msgspec struct built once per decode (or parse)
call. ``to_json()`` renders the structured representation using the wire key
names; optional fields that are absent are left out rather than rendered as
``null``.
"""

from __future__ import annotations

from typing import Any, TypeAlias

import msgspec

from . import protocol
from .protocol import Field
from .values import TaggedValue


class InvocationMessage(msgspec.Struct, frozen=True, kw_only=True):
    """Invocation or StreamInvocation: ``[type, {}, id|nil, target, [args]]``."""

    message_type: int
    headers: int
    target: str
    arguments: tuple[TaggedValue, ...] = ()
    invocation_id: str | None = None
    stream_ids: list[Any] | None = None

    def to_json(self) -> dict[str, Any]:
        rendered: dict[str, Any] = {
            Field.MESSAGE_TYPE: self.message_type,
            Field.HEADERS: self.headers,
        }
        if self.invocation_id is not None:
            rendered[Field.INVOCATION_ID] = self.invocation_id
        rendered[Field.TARGET] = self.target
        rendered[Field.ARGUMENTS] = [argument.to_json() for argument in self.arguments]
        if self.stream_ids is not None:
            rendered[Field.STREAM_IDS] = self.stream_ids
        return rendered


class StreamItemMessage(msgspec.Struct, frozen=True, kw_only=True):
    message_type: int
    headers: int
    item: TaggedValue
    invocation_id: str | None = None

    def to_json(self) -> dict[str, Any]:
        rendered: dict[str, Any] = {
            Field.MESSAGE_TYPE: self.message_type,
            Field.HEADERS: self.headers,
        }
        if self.invocation_id is not None:
            rendered[Field.INVOCATION_ID] = self.invocation_id
        rendered[Field.ITEM] = self.item.to_json()
        return rendered


class CompletionMessage(msgspec.Struct, frozen=True, kw_only=True):
    message_type: int
    headers: int
    result_kind: int
    invocation_id: str | None = None
    result: TaggedValue | None = None

    def to_json(self) -> dict[str, Any]:
        rendered: dict[str, Any] = {
            Field.MESSAGE_TYPE: self.message_type,
            Field.HEADERS: self.headers,
        }
        if self.invocation_id is not None:
            rendered[Field.INVOCATION_ID] = self.invocation_id
        rendered[Field.RESULT_KIND] = self.result_kind
        if self.result is not None:
            rendered[Field.RESULT] = self.result.to_json()
        return rendered


class CancelInvocationMessage(msgspec.Struct, frozen=True, kw_only=True):
    message_type: int
    headers: int
    invocation_id: str | None = None

    def to_json(self) -> dict[str, Any]:
        rendered: dict[str, Any] = {
            Field.MESSAGE_TYPE: self.message_type,
            Field.HEADERS: self.headers,
        }
        if self.invocation_id is not None:
            rendered[Field.INVOCATION_ID] = self.invocation_id
        return rendered


class PingMessage(msgspec.Struct, frozen=True, kw_only=True):
    message_type: int

    def to_json(self) -> dict[str, Any]:
        return {Field.MESSAGE_TYPE: self.message_type}


class CloseMessage(msgspec.Struct, frozen=True, kw_only=True):
    """Close message; ``error`` holds ``"null"`` when no error was sent."""

    message_type: int
    error: str = protocol.NULL_SENTINEL
    allow_reconnect: bool | None = None

    def to_json(self) -> dict[str, Any]:
        rendered: dict[str, Any] = {
            Field.MESSAGE_TYPE: self.message_type,
            Field.ERROR: self.error,
        }
        if self.allow_reconnect is not None:
            rendered[Field.ALLOW_RECONNECT] = self.allow_reconnect
        return rendered


class ErrorPlaceholder(msgspec.Struct, frozen=True):
    """Stands in for a whole batch that could not be decoded."""

    text: str = protocol.ERROR_PLACEHOLDER_TEXT

    def to_json(self) -> dict[str, Any]:
        return {protocol.ERROR_PLACEHOLDER_KEY: self.text}


HubMessage: TypeAlias = (
    InvocationMessage
    | StreamItemMessage
    | CompletionMessage
    | CancelInvocationMessage
    | PingMessage
    | CloseMessage
)
