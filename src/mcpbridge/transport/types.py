"""Transport layer types and configuration."""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any


class TransportEventType(Enum):
    """Types of transport events for observability."""

    REQUEST_SENT = auto()
    RESPONSE_RECEIVED = auto()
    PROCESS_SPAWNED = auto()
    PROCESS_EXITED = auto()
    SESSION_STATE = auto()
    ERROR = auto()


@dataclass
class TransportEvent:
    """Event emitted by transport for observability."""

    type: TransportEventType
    timestamp: float
    data: dict[str, Any] | None = None
    error: Exception | None = None

    def __str__(self) -> str:
        base = f"[{self.type.name}]"
        if self.data:
            base += f" {self.data}"
        if self.error:
            base += f" error={self.error}"
        return base


@dataclass
class TransportConfig:
    """Configuration for the direct HTTP transport."""

    url: str
    """Endpoint that accepts JSON-RPC POSTs."""

    timeout: float = 30.0
    """Request timeout in seconds."""

    connect_timeout: float = 10.0
    """Connection establishment timeout in seconds."""

    headers: dict[str, str] = field(default_factory=dict)
    """Additional HTTP headers to include in requests."""

    verify_ssl: bool = True
    """Whether to verify SSL certificates."""

    def __post_init__(self) -> None:
        """Validate configuration."""
        if not self.url:
            raise ValueError("url is required")
        if not self.url.startswith(("http://", "https://")):
            raise ValueError("url must be an http:// or https:// URL")
        if self.timeout <= 0:
            raise ValueError("timeout must be positive")
        if self.connect_timeout <= 0:
            raise ValueError("connect_timeout must be positive")


@dataclass
class RelayConfig:
    """Configuration for the subprocess relay transport."""

    endpoint: str
    """Remote endpoint URL handed to the relay as an argument."""

    command: tuple[str, ...] = ("npx", "mcp-remote")
    """Relay executable and leading arguments; the endpoint is appended."""

    headers: dict[str, str] = field(default_factory=dict)
    """Headers the relay should forward, passed as ``--header "Name: value"``."""

    env: dict[str, str] | None = None
    """Extra environment variables for the relay process."""

    timeout: float = 30.0
    """Default session timeout in seconds."""

    max_line_bytes: int = 16 * 1024 * 1024
    """Longest output line accepted from the relay."""

    def __post_init__(self) -> None:
        """Validate configuration."""
        if not self.endpoint:
            raise ValueError("endpoint is required")
        if not self.command:
            raise ValueError("command must not be empty")
        self.command = tuple(self.command)
        if self.timeout <= 0:
            raise ValueError("timeout must be positive")

    def argv(self) -> list[str]:
        """Full argument vector for launching the relay."""
        args = [*self.command, self.endpoint]
        for name, value in self.headers.items():
            args.extend(["--header", f"{name}: {value}"])
        return args
