"""Tool execution over a single transport."""

from __future__ import annotations

import logging

from mcpbridge.protocol.errors import ProtocolError
from mcpbridge.protocol.messages import RequestIdGenerator, call_tool_request, is_response
from mcpbridge.protocol.responses import RpcError, classify_response
from mcpbridge.tools.normalizer import normalize, normalize_failure
from mcpbridge.tools.types import ToolCall, ToolResult
from mcpbridge.transport.base import DecodeError, ProcessError, TimeoutError, Transport, TransportError

logger = logging.getLogger(__name__)


async def call_direct(
    transport: Transport,
    ids: RequestIdGenerator,
    call: ToolCall,
) -> ToolResult:
    """
    Send ``tools/call`` with no handshake and normalize the answer.

    Raises:
        TransportError: Connection failure, non-success status, or
            undecodable body (``DecodeError``, also raised when the body
            holds something other than a response, such as a notification).
        ProtocolError: The server refused the call because it has not
            been initialized; a stateful session is needed.
    """
    request = call_tool_request(ids, call.name, call.arguments)
    envelope = await transport.request(request.to_dict())
    if not is_response(envelope):
        raise DecodeError(f"Expected a tools/call response, got {sorted(envelope)}")
    response = classify_response(envelope)
    if isinstance(response, RpcError) and response.is_not_initialized:
        raise response.to_exception()
    return normalize(response)


async def call_stateful(
    transport: Transport,
    ids: RequestIdGenerator,
    call: ToolCall,
    timeout: float,
) -> ToolResult:
    """
    Send ``tools/call`` through a transport that runs the handshake itself.

    Every failure is returned as an error result rather than raised.
    """
    request = call_tool_request(ids, call.name, call.arguments)
    try:
        envelope = await transport.request(request.to_dict(), timeout=timeout)
    except TimeoutError as e:
        logger.warning(f"Tool {call.name!r} timed out: {e}")
        return ToolResult.from_text(f"Tool execution timed out after {timeout:g}s", is_error=True)
    except ProcessError as e:
        logger.warning(f"Relay failed while calling {call.name!r}: {e}")
        return normalize_failure(e)
    except ProtocolError as e:
        logger.warning(f"Relay handshake rejected for {call.name!r}: {e.message}")
        return normalize_failure(e, prefix="Tool execution error")
    except TransportError as e:
        logger.warning(f"Relay transport error calling {call.name!r}: {e}")
        return normalize_failure(e)

    return normalize(classify_response(envelope))
