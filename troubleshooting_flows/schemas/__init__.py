"""
Schemas - Wire Format Models

Defines the versioned JSON contract for flow graphs shared with the remote
agent and the article store.
"""

from troubleshooting_flows.schemas.wire import (
    DecodeErrorKind,
    FlowDecodeError,
    WireFlow,
    decode,
    encode,
    encode_json,
)

__all__ = [
    "DecodeErrorKind",
    "FlowDecodeError",
    "WireFlow",
    "decode",
    "encode",
    "encode_json",
]
