"""Codecs for the six Hub Protocol message variants."""

from . import cancel_invocation, close, completion, invocation, ping, stream_item

__all__ = [
    "cancel_invocation",
    "close",
    "completion",
    "invocation",
    "ping",
    "stream_item",
]
