"""Domain models"""

from .request import RequestDefinition, SignedRequest
from .stream_message import (
    ActionUpdate,
    LiquidityUpdate,
    RawMessage,
    StreamKind,
    StreamMessage,
    decode_frame,
)

__all__ = [
    "RequestDefinition",
    "SignedRequest",
    "StreamKind",
    "StreamMessage",
    "RawMessage",
    "ActionUpdate",
    "LiquidityUpdate",
    "decode_frame",
]
