"""Wire-level building blocks for the BlazorPack codec."""

from . import contracts, errors, frame, protocol, structures, tokens, values, varint
from .contracts import VariantCodec
from .protocol import HubMessageType, ResultKind

__all__ = [
    "HubMessageType",
    "ResultKind",
    "VariantCodec",
    "contracts",
    "errors",
    "frame",
    "protocol",
    "structures",
    "tokens",
    "values",
    "varint",
]
