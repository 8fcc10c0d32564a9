"""
JSON-RPC protocol layer.

Message framing, request builders, the response tag union, and the relay
session handshake state machine.
"""

from mcpbridge.protocol.messages import (
    PROTOCOL_VERSION,
    ClientInfo,
    JSONRPCRequest,
    JSONRPCResponse,
    JSONRPCError,
    RequestIdGenerator,
    initialize_request,
    list_tools_request,
    call_tool_request,
)
from mcpbridge.protocol.errors import (
    ProtocolError,
    PARSE_ERROR,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    INVALID_PARAMS,
    INTERNAL_ERROR,
    SERVER_NOT_INITIALIZED,
)
from mcpbridge.protocol.responses import (
    RemoteResponse,
    ToolsListed,
    CapabilitiesDeclared,
    ContentResult,
    BareResult,
    RpcError,
    classify_response,
)
from mcpbridge.protocol.state import (
    SessionState,
    SessionStateMachine,
    InvalidStateTransition,
)
from mcpbridge.protocol.session import HandshakeSession, SessionStep

__all__ = [
    # Messages
    "PROTOCOL_VERSION",
    "ClientInfo",
    "JSONRPCRequest",
    "JSONRPCResponse",
    "JSONRPCError",
    "RequestIdGenerator",
    "initialize_request",
    "list_tools_request",
    "call_tool_request",
    # Errors
    "ProtocolError",
    "PARSE_ERROR",
    "INVALID_REQUEST",
    "METHOD_NOT_FOUND",
    "INVALID_PARAMS",
    "INTERNAL_ERROR",
    "SERVER_NOT_INITIALIZED",
    # Responses
    "RemoteResponse",
    "ToolsListed",
    "CapabilitiesDeclared",
    "ContentResult",
    "BareResult",
    "RpcError",
    "classify_response",
    # State
    "SessionState",
    "SessionStateMachine",
    "InvalidStateTransition",
    "HandshakeSession",
    "SessionStep",
]
