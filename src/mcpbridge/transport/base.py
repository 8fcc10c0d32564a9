"""Abstract base transport and error types."""

import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Callable

from mcpbridge.transport.types import TransportEvent, TransportEventType

logger = logging.getLogger(__name__)


class TransportError(Exception):
    """Base exception for transport errors (non-2xx status or connection failure)."""

    def __init__(
        self,
        message: str,
        cause: Exception | None = None,
        status: int | None = None,
    ):
        super().__init__(message)
        self.cause = cause
        self.status = status


class DecodeError(TransportError):
    """Response body had no usable SSE ``data:`` frame or was not valid JSON."""

    pass


class TimeoutError(TransportError):
    """No terminal response arrived within the time budget."""

    pass


class ProcessError(TransportError):
    """Relay process failed to launch, crashed, or exited before responding."""

    def __init__(
        self,
        message: str,
        cause: Exception | None = None,
        returncode: int | None = None,
    ):
        super().__init__(message, cause=cause)
        self.returncode = returncode


class Transport(ABC):
    """
    Abstract base class for tool-protocol transports.

    A transport sends one JSON-RPC request and returns the one JSON-RPC
    response envelope that answers it. Stateless transports send the request
    as-is; stateful transports run whatever handshake the remote requires
    before sending it.
    """

    def __init__(self) -> None:
        self._event_handlers: list[Callable[[TransportEvent], None]] = []

    def on_event(self, handler: Callable[[TransportEvent], None]) -> None:
        """
        Register an event handler for transport events.

        Args:
            handler: Callback invoked when transport events occur.
        """
        self._event_handlers.append(handler)

    def _emit(
        self,
        type: TransportEventType,
        data: dict[str, Any] | None = None,
        error: Exception | None = None,
    ) -> None:
        """Emit an event to all registered handlers."""
        event = TransportEvent(type=type, timestamp=time.time(), data=data, error=error)
        for handler in self._event_handlers:
            try:
                handler(event)
            except Exception:
                logger.exception(f"Transport event handler failed for {event}")

    @abstractmethod
    async def request(
        self,
        message: dict[str, Any],
        timeout: float | None = None,
    ) -> dict[str, Any]:
        """
        Send a JSON-RPC request and return its response envelope.

        Args:
            message: JSON-RPC request dict.
            timeout: Overrides the transport's default time budget.

        Returns:
            The decoded response envelope.

        Raises:
            TransportError: On connection failure or non-success status.
            DecodeError: If the response cannot be decoded.
            TimeoutError: If no response arrives in time.
            ProcessError: If a relay process fails.
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """
        Release every resource the transport holds.

        Safe to call multiple times.
        """
        pass

    async def __aenter__(self) -> "Transport":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
