"""
Transport layer.

Direct HTTP POST transport (stateless) and subprocess relay transport
(stateful, performs the initialize handshake per request).
"""

from mcpbridge.transport.types import (
    RelayConfig,
    TransportConfig,
    TransportEvent,
    TransportEventType,
)
from mcpbridge.transport.base import (
    Transport,
    TransportError,
    DecodeError,
    TimeoutError,
    ProcessError,
)
from mcpbridge.transport.sse import decode_sse_body, decode_body
from mcpbridge.transport.http import DirectTransport
from mcpbridge.transport.subprocess import SubprocessTransport

__all__ = [
    "Transport",
    "TransportConfig",
    "RelayConfig",
    "TransportEvent",
    "TransportEventType",
    "TransportError",
    "DecodeError",
    "TimeoutError",
    "ProcessError",
    "decode_sse_body",
    "decode_body",
    "DirectTransport",
    "SubprocessTransport",
]
