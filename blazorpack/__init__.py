"""BlazorPack (MessagePack Hub Protocol) to JSON codec."""

from .batch import assemble, pack_from_json, segment, unpack_to_json
from .config import CodecConfig, load_codec_config
from .dispatcher import classify_binary, classify_structured
from .protocol.errors import (
    BatchEncodeError,
    BlazorPackError,
    FrameDecodeError,
    MessageValidationError,
)

__version__ = "1.1.0"

__all__ = [
    "BatchEncodeError",
    "BlazorPackError",
    "CodecConfig",
    "FrameDecodeError",
    "MessageValidationError",
    "__version__",
    "assemble",
    "classify_binary",
    "classify_structured",
    "load_codec_config",
    "pack_from_json",
    "segment",
    "unpack_to_json",
]
