"""Error taxonomy for the BlazorPack codec.

Decode-side errors (:class:`FrameDecodeError`) abandon a whole batch; encode
side validation errors (:class:`MessageValidationError`) name the offending
field and fail the message that carries it.
"""

from __future__ import annotations


class BlazorPackError(ValueError):
    """Base class for every codec failure."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class FrameDecodeError(BlazorPackError):
    """Raised when binary input cannot be turned into messages."""


class TruncatedVarInt(FrameDecodeError):
    """The length prefix ended before its terminating byte."""


class MalformedHeader(FrameDecodeError):
    """An expected array or map header token is missing."""


class UnexpectedValueType(FrameDecodeError):
    """A positional field holds a wire type incompatible with its kind."""


class IncompleteMessage(FrameDecodeError):
    """A declared length runs past the end of the available bytes."""


class MessageValidationError(BlazorPackError):
    """Raised when a structured message fails validation."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field


class MissingRequiredField(MessageValidationError):
    def __init__(self, field: str) -> None:
        super().__init__(field, f"missing required field '{field}'")


class InvalidFieldType(MessageValidationError):
    def __init__(self, field: str, expected: str) -> None:
        super().__init__(field, f"field '{field}' must be {expected}")


class InvalidResultKind(MessageValidationError):
    pass


class BatchEncodeError(BlazorPackError):
    """Raised when any message of a batch cannot be encoded."""

    def __init__(self, index: int, message: str) -> None:
        super().__init__(f"message #{index}: {message}")
        self.index = index
