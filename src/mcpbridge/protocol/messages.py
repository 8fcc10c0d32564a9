"""JSON-RPC 2.0 message types and MCP request builders."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Callable

from mcpbridge.protocol.errors import ProtocolError

PROTOCOL_VERSION = "2024-11-05"

DEFAULT_CLIENT_CAPABILITIES: dict[str, dict] = {
    "tools": {},
    "prompts": {},
    "resources": {},
}


class RequestIdGenerator:
    """
    Issues numeric request ids derived from a millisecond clock.

    Ids are strictly increasing for the lifetime of the generator, even when
    several requests are built within the same millisecond.
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._last = 0

    def next(self) -> int:
        """Return the next unused id."""
        candidate = int(self._clock() * 1000)
        self._last = max(candidate, self._last + 1)
        return self._last

    __call__ = next


@dataclass
class ClientInfo:
    """Information about this client sent during initialization."""

    name: str = "mcpbridge"
    version: str = "1.0.0"

    def to_dict(self) -> dict[str, str]:
        """Convert to wire format."""
        return {"name": self.name, "version": self.version}


@dataclass
class JSONRPCRequest:
    """
    JSON-RPC 2.0 request message.

    Requests expect a response from the recipient.
    """

    method: str
    id: int
    params: dict[str, Any] = field(default_factory=dict)
    jsonrpc: str = field(default="2.0", init=False)

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return {
            "jsonrpc": self.jsonrpc,
            "method": self.method,
            "params": self.params,
            "id": self.id,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "JSONRPCRequest":
        """Create from JSON dict."""
        return cls(
            method=data["method"],
            id=data["id"],
            params=data.get("params") or {},
        )

    def __str__(self) -> str:
        return f"Request({self.method}, id={self.id})"


@dataclass
class JSONRPCError:
    """JSON-RPC 2.0 error object."""

    code: int
    message: str
    data: Any = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dict."""
        error: dict[str, Any] = {
            "code": self.code,
            "message": self.message,
        }
        if self.data is not None:
            error["data"] = self.data
        return error

    def to_exception(self) -> ProtocolError:
        """Raise-able form of this error."""
        return ProtocolError(code=self.code, message=self.message, data=self.data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "JSONRPCError":
        """Create from JSON dict."""
        exc = ProtocolError.from_dict(data)
        return cls(code=exc.code, message=exc.message, data=exc.data)


@dataclass
class JSONRPCResponse:
    """
    JSON-RPC 2.0 response message.

    Either result or error must be present, but not both.
    """

    id: str | int | None
    result: Any = None
    error: JSONRPCError | None = None
    jsonrpc: str = field(default="2.0", init=False)

    @property
    def is_error(self) -> bool:
        """Check if this is an error response."""
        return self.error is not None

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dict."""
        msg: dict[str, Any] = {
            "jsonrpc": self.jsonrpc,
            "id": self.id,
        }
        if self.error is not None:
            msg["error"] = self.error.to_dict()
        else:
            msg["result"] = self.result
        return msg

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "JSONRPCResponse":
        """Create from JSON dict."""
        error = None
        if isinstance(data.get("error"), dict):
            error = JSONRPCError.from_dict(data["error"])
        return cls(
            id=data.get("id"),
            result=data.get("result"),
            error=error,
        )

    def __str__(self) -> str:
        if self.is_error:
            return f"Response(id={self.id}, error={self.error.code})"
        return f"Response(id={self.id}, success)"


def is_request(data: dict[str, Any]) -> bool:
    """Check if message is a request (has id and method)."""
    return "id" in data and "method" in data


def is_notification(data: dict[str, Any]) -> bool:
    """Check if message is a notification (has method, no id)."""
    return "method" in data and "id" not in data


def is_response(data: dict[str, Any]) -> bool:
    """Check if message is a response (no method, carries result or error)."""
    return "method" not in data and ("result" in data or "error" in data)


def initialize_request(
    ids: RequestIdGenerator,
    client_info: ClientInfo | None = None,
) -> JSONRPCRequest:
    """Build the ``initialize`` handshake request."""
    return JSONRPCRequest(
        method="initialize",
        id=ids.next(),
        params={
            "protocolVersion": PROTOCOL_VERSION,
            "capabilities": {key: {} for key in DEFAULT_CLIENT_CAPABILITIES},
            "clientInfo": (client_info or ClientInfo()).to_dict(),
        },
    )


def list_tools_request(ids: RequestIdGenerator) -> JSONRPCRequest:
    """Build a ``tools/list`` request."""
    return JSONRPCRequest(method="tools/list", id=ids.next())


def call_tool_request(
    ids: RequestIdGenerator,
    name: str,
    arguments: dict[str, Any] | None = None,
) -> JSONRPCRequest:
    """Build a ``tools/call`` request."""
    return JSONRPCRequest(
        method="tools/call",
        id=ids.next(),
        params={"name": name, "arguments": arguments or {}},
    )
