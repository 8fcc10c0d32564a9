"""Initialize-then-operate handshake for a single relay session."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from mcpbridge.protocol.errors import ProtocolError
from mcpbridge.protocol.messages import (
    ClientInfo,
    JSONRPCRequest,
    JSONRPCResponse,
    RequestIdGenerator,
    initialize_request,
    is_response,
)
from mcpbridge.protocol.responses import is_initialize_result
from mcpbridge.protocol.state import SessionState, SessionStateMachine

logger = logging.getLogger(__name__)


@dataclass
class SessionStep:
    """What the transport must do after feeding one message."""

    outgoing: dict[str, Any] | None = None
    """Request to write to the relay input stream, if any."""

    response: dict[str, Any] | None = None
    """Terminal response envelope for the pending operation, if reached."""

    error: ProtocolError | None = None
    """Terminal handshake failure, if the relay rejected ``initialize``."""

    @property
    def is_terminal(self) -> bool:
        return self.response is not None or self.error is not None


class HandshakeSession:
    """
    Drives one relay session through the handshake.

    The session emits ``initialize`` first, waits for a response carrying
    ``result.protocolVersion``, then emits the pending operation and waits
    for the response that matches it. It performs no I/O: the transport
    feeds parsed output lines in and writes whatever the session hands back.

    Usage::

        session = HandshakeSession(list_tools_request(ids), ids)
        write(session.start())
        for message in lines:
            step = session.feed(message)
            if step.outgoing:
                write(step.outgoing)
            if step.is_terminal:
                break
    """

    def __init__(
        self,
        operation: JSONRPCRequest,
        ids: RequestIdGenerator,
        client_info: ClientInfo | None = None,
    ):
        self.operation = operation
        self._initialize = initialize_request(ids, client_info)
        self._machine = SessionStateMachine()
        self._writes = 0

    @property
    def state(self) -> SessionState:
        return self._machine.state

    @property
    def machine(self) -> SessionStateMachine:
        return self._machine

    @property
    def writes(self) -> int:
        """Number of requests handed to the transport so far."""
        return self._writes

    def start(self) -> dict[str, Any]:
        """Enter INITIALIZING and return the ``initialize`` request to write."""
        self._machine.transition(SessionState.INITIALIZING)
        self._writes += 1
        return self._initialize.to_dict()

    def feed(self, message: dict[str, Any]) -> SessionStep:
        """Advance the session with one parsed output message."""
        if self._machine.is_done or not is_response(message):
            return SessionStep()

        if self.state == SessionState.INITIALIZING:
            return self._on_initializing(message)

        if self.state == SessionState.AWAITING_RESULT and self._matches_operation(message):
            self._machine.finish("response")
            return SessionStep(response=message)

        logger.debug(f"Ignoring unrelated message in {self.state}: id={message.get('id')}")
        return SessionStep()

    def finish(self, reason: str) -> bool:
        """End the session (timeout, process exit, process error). Idempotent."""
        return self._machine.finish(reason)

    def _on_initializing(self, message: dict[str, Any]) -> SessionStep:
        if is_initialize_result(message):
            self._machine.transition(SessionState.READY)
            logger.debug(
                f"Handshake complete (protocol {message['result']['protocolVersion']}), "
                f"sending {self.operation.method}"
            )
            self._machine.transition(SessionState.AWAITING_RESULT)
            self._writes += 1
            return SessionStep(outgoing=self.operation.to_dict())

        response = JSONRPCResponse.from_dict(message)
        if response.is_error and response.id == self._initialize.id:
            self._machine.finish("initialize rejected")
            return SessionStep(error=response.error.to_exception())

        return SessionStep()

    def _matches_operation(self, message: dict[str, Any]) -> bool:
        if message.get("id") == self.operation.id:
            return True
        if message.get("id") == self._initialize.id:
            return False

        # Relays that rewrite ids are matched by shape
        if "error" in message:
            return True
        result = message.get("result")
        if self.operation.method == "tools/list":
            return isinstance(result, dict) and "tools" in result
        return "result" in message and not is_initialize_result(message)
