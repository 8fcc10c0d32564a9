"""Protocol error types and error codes."""

from dataclasses import dataclass
from typing import Any

# Standard JSON-RPC 2.0 error codes
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603

# Implementation-defined range (-32000 to -32099)
SERVER_NOT_INITIALIZED = -32002

ERROR_MESSAGES = {
    PARSE_ERROR: "Parse error",
    INVALID_REQUEST: "Invalid Request",
    METHOD_NOT_FOUND: "Method not found",
    INVALID_PARAMS: "Invalid params",
    INTERNAL_ERROR: "Internal error",
    SERVER_NOT_INITIALIZED: "Server not initialized",
}

NOT_INITIALIZED_MARKER = "not initialized"


def mentions_not_initialized(message: str | None) -> bool:
    """Check whether an error message reports a missing initialize handshake."""
    return bool(message) and NOT_INITIALIZED_MARKER in message


@dataclass
class ProtocolError(Exception):
    """
    Well-formed JSON-RPC error returned by the remote.

    Can be converted to/from JSON-RPC error objects.
    """

    code: int
    message: str
    data: Any = None

    def __post_init__(self):
        super().__init__(self.message)

    @property
    def is_not_initialized(self) -> bool:
        """True when the remote refused the request for lack of a handshake."""
        return mentions_not_initialized(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-RPC error object."""
        error: dict[str, Any] = {
            "code": self.code,
            "message": self.message,
        }
        if self.data is not None:
            error["data"] = self.data
        return error

    @classmethod
    def from_dict(cls, error: dict[str, Any]) -> "ProtocolError":
        """Create from JSON-RPC error object."""
        code = error.get("code")
        if not isinstance(code, int):
            code = INTERNAL_ERROR
        return cls(
            code=code,
            message=str(error.get("message") or ERROR_MESSAGES.get(code, "Unknown error")),
            data=error.get("data"),
        )

    def __str__(self) -> str:
        return f"ProtocolError({self.code}): {self.message}"

    def __repr__(self) -> str:
        return f"ProtocolError(code={self.code}, message={self.message!r}, data={self.data})"
