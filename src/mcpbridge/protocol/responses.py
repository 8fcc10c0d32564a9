"""
Tagged view of the response shapes remote servers actually send.

Servers answer the same request in several ways: ``result.tools`` for a
listing, tools declared only inside ``result.capabilities.tools``, a
``result.content`` sequence for tool calls, a bare ``result`` of any JSON
type, or an ``error`` object. ``classify_response`` maps an envelope onto
exactly one of these tags so downstream code can dispatch on type.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from mcpbridge.protocol.errors import ProtocolError, mentions_not_initialized
from mcpbridge.protocol.messages import JSONRPCResponse


@dataclass(frozen=True)
class ToolsListed:
    """``result.tools`` is present."""

    tools: list[Any]


@dataclass(frozen=True)
class CapabilitiesDeclared:
    """``result.capabilities.tools`` is a non-empty mapping of tool name to descriptor."""

    tools: dict[str, Any]
    protocol_version: str | None = None


@dataclass(frozen=True)
class ContentResult:
    """``result.content`` is present."""

    content: Any
    is_error: bool = False


@dataclass(frozen=True)
class BareResult:
    """Any other ``result`` value."""

    value: Any


@dataclass(frozen=True)
class RpcError:
    """``error`` object."""

    code: int
    message: str
    data: Any = None

    @property
    def is_not_initialized(self) -> bool:
        return mentions_not_initialized(self.message)

    def to_exception(self) -> ProtocolError:
        return ProtocolError(code=self.code, message=self.message, data=self.data)


RemoteResponse = ToolsListed | CapabilitiesDeclared | ContentResult | BareResult | RpcError


def classify_response(envelope: dict[str, Any]) -> RemoteResponse:
    """Map a decoded JSON-RPC response envelope onto its tag."""
    response = JSONRPCResponse.from_dict(envelope)
    if response.error is not None:
        return RpcError(
            code=response.error.code,
            message=response.error.message,
            data=response.error.data,
        )

    result = response.result
    if not isinstance(result, dict):
        return BareResult(result)

    if "tools" in result and isinstance(result["tools"], list):
        return ToolsListed(result["tools"])

    capabilities = result.get("capabilities")
    if isinstance(capabilities, dict):
        declared = capabilities.get("tools")
        if isinstance(declared, dict) and declared:
            return CapabilitiesDeclared(declared, result.get("protocolVersion"))

    if "content" in result:
        return ContentResult(result["content"], is_error=result.get("isError") is True)

    return BareResult(result)


def is_initialize_result(envelope: dict[str, Any]) -> bool:
    """True when the envelope answers ``initialize`` (``result.protocolVersion`` present)."""
    result = envelope.get("result")
    return isinstance(result, dict) and "protocolVersion" in result
