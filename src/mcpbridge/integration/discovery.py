"""Tool discovery over a single transport."""

from __future__ import annotations

import logging

from mcpbridge.protocol.errors import ProtocolError
from mcpbridge.protocol.messages import (
    ClientInfo,
    RequestIdGenerator,
    initialize_request,
    list_tools_request,
)
from mcpbridge.protocol.responses import (
    CapabilitiesDeclared,
    RemoteResponse,
    RpcError,
    ToolsListed,
    classify_response,
)
from mcpbridge.tools.types import Tool, tools_from_capabilities, tools_from_descriptors
from mcpbridge.transport.base import Transport, TransportError

logger = logging.getLogger(__name__)


async def _list_tools(transport: Transport, ids: RequestIdGenerator) -> RemoteResponse:
    envelope = await transport.request(list_tools_request(ids).to_dict())
    return classify_response(envelope)


async def discover_direct(
    transport: Transport,
    ids: RequestIdGenerator,
    client_info: ClientInfo | None = None,
) -> list[Tool]:
    """
    Discover tools over a stateless transport.

    Steps, stopping at the first that yields tools:

    1. ``tools/list`` with no handshake.
    2. ``initialize``; tools declared in ``result.capabilities.tools`` are
       accepted as the listing.
    3. ``tools/list`` again, now that the server has seen ``initialize``.

    Returns an empty list when nothing yields tools. Never raises for a
    remote that simply has no tools configured.
    """
    try:
        first = await _list_tools(transport, ids)
    except TransportError as e:
        logger.info(f"Direct tools/list failed, trying initialize: {e}")
    else:
        if isinstance(first, ToolsListed):
            tools = tools_from_descriptors(first.tools)
            logger.info(f"Direct tools/list returned {len(tools)} tools")
            return tools
        if isinstance(first, RpcError) and first.is_not_initialized:
            logger.info("Server not initialized, performing initialize handshake")
        else:
            logger.info(f"Direct tools/list gave no tools ({type(first).__name__}), trying initialize")

    try:
        envelope = await transport.request(initialize_request(ids, client_info).to_dict())
    except TransportError as e:
        logger.warning(f"Direct initialize failed: {e}")
        return []

    init = classify_response(envelope)
    if isinstance(init, CapabilitiesDeclared):
        tools = tools_from_capabilities(init.tools)
        logger.info(f"Found {len(tools)} tools in server capabilities")
        return tools
    if isinstance(init, RpcError):
        logger.warning(f"Direct initialize rejected: {init.message}")

    try:
        second = await _list_tools(transport, ids)
    except TransportError as e:
        logger.warning(f"Direct tools/list after initialize failed: {e}")
        return []

    if isinstance(second, ToolsListed):
        tools = tools_from_descriptors(second.tools)
        logger.info(f"Direct tools/list after initialize returned {len(tools)} tools")
        return tools
    if isinstance(second, RpcError):
        logger.warning(f"Direct tools/list after initialize rejected: {second.message}")
    return []


async def discover_stateful(
    transport: Transport,
    ids: RequestIdGenerator,
    timeout: float | None = None,
) -> list[Tool]:
    """
    Discover tools over a transport that runs the handshake itself.

    Timeouts, relay failures and handshake rejections all resolve to an
    empty list.
    """
    try:
        envelope = await transport.request(list_tools_request(ids).to_dict(), timeout=timeout)
    except ProtocolError as e:
        logger.warning(f"Relay handshake rejected: {e.message}")
        return []
    except TransportError as e:
        logger.warning(f"Relay discovery failed: {e}")
        return []

    response = classify_response(envelope)
    if isinstance(response, ToolsListed):
        tools = tools_from_descriptors(response.tools)
        logger.info(f"Relay tools/list returned {len(tools)} tools")
        return tools
    if isinstance(response, CapabilitiesDeclared):
        return tools_from_capabilities(response.tools)
    if isinstance(response, RpcError):
        logger.warning(f"Relay tools/list rejected: {response.message}")
    return []
