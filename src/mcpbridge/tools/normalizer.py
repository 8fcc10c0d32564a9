"""Conversion of remote responses and failures into ToolResult values."""

from __future__ import annotations

from typing import Any, Callable, Mapping

from mcpbridge.lib import oj
from mcpbridge.protocol.responses import (
    BareResult,
    CapabilitiesDeclared,
    ContentResult,
    RemoteResponse,
    RpcError,
    ToolsListed,
    classify_response,
)
from mcpbridge.tools.types import ToolResult, content_block_from_dict

FALLBACK_ERROR_MESSAGE = "Unknown error"


def extract_error_message(
    error: Mapping[str, Any] | None = None,
    exc: BaseException | None = None,
    fallback: str = FALLBACK_ERROR_MESSAGE,
) -> str:
    """
    Pick the most specific error text available.

    Priority: ``error["message"]``, then the exception's message, then
    ``fallback``. No single field is assumed to be present.
    """
    if error is not None:
        message = error.get("message")
        if message:
            return str(message)
    if exc is not None:
        message = getattr(exc, "message", None) or str(exc)
        if message:
            return str(message)
    return fallback


def _stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    return oj.dumps_pretty(value)


def _from_error(response: RpcError) -> ToolResult:
    message = extract_error_message({"message": response.message})
    return ToolResult.from_text(f"Tool execution error: {message}", is_error=True)


def _from_content(response: ContentResult) -> ToolResult:
    blocks = response.content if isinstance(response.content, list) else [response.content]
    return ToolResult(
        content=tuple(content_block_from_dict(block) for block in blocks),
        is_error=response.is_error,
    )


def _from_bare(response: BareResult) -> ToolResult:
    return ToolResult.from_text(_stringify(response.value))


def _from_tools_listed(response: ToolsListed) -> ToolResult:
    return ToolResult.from_text(_stringify({"tools": response.tools}))


def _from_capabilities(response: CapabilitiesDeclared) -> ToolResult:
    return ToolResult.from_text(_stringify({"capabilities": {"tools": response.tools}}))


_NORMALIZERS: dict[type, Callable[[Any], ToolResult]] = {
    RpcError: _from_error,
    ContentResult: _from_content,
    BareResult: _from_bare,
    ToolsListed: _from_tools_listed,
    CapabilitiesDeclared: _from_capabilities,
}


def normalize(response: RemoteResponse) -> ToolResult:
    """Convert a classified response into a ToolResult."""
    return _NORMALIZERS[type(response)](response)


def normalize_response(envelope: dict[str, Any]) -> ToolResult:
    """Classify a raw JSON-RPC response envelope and convert it."""
    return normalize(classify_response(envelope))


def normalize_failure(
    exc: BaseException | None = None,
    prefix: str = "Error calling MCP tool",
    error: Mapping[str, Any] | None = None,
) -> ToolResult:
    """Error result for a call that produced no usable response."""
    message = extract_error_message(error=error, exc=exc)
    return ToolResult.from_text(f"{prefix}: {message}", is_error=True)
