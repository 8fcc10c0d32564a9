"""Handshake state machine for a single relay session."""

import logging
from enum import Enum, auto
from typing import Callable

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """
    Relay session lifecycle states.

    State transitions:
        SPAWNED -> INITIALIZING -> READY -> AWAITING_RESULT -> DONE

    DONE is terminal and reachable from every state (timeout, process exit,
    process error, or a matching terminal response).
    """

    SPAWNED = auto()
    INITIALIZING = auto()
    READY = auto()
    AWAITING_RESULT = auto()
    DONE = auto()

    def __str__(self) -> str:
        return self.name


class InvalidStateTransition(Exception):
    """Raised when an invalid state transition is attempted."""

    def __init__(self, from_state: SessionState, to_state: SessionState):
        self.from_state = from_state
        self.to_state = to_state
        super().__init__(
            f"Invalid state transition: {from_state.name} -> {to_state.name}"
        )


# Called with (old_state, new_state)
StateTransitionCallback = Callable[[SessionState, SessionState], None]


class SessionStateMachine:
    """
    Enforces the initialize-before-operation ordering of a relay session.

    Notifies listeners when transitions occur.
    """

    VALID_TRANSITIONS: dict[SessionState, list[SessionState]] = {
        SessionState.SPAWNED: [SessionState.INITIALIZING, SessionState.DONE],
        SessionState.INITIALIZING: [SessionState.READY, SessionState.DONE],
        SessionState.READY: [SessionState.AWAITING_RESULT, SessionState.DONE],
        SessionState.AWAITING_RESULT: [SessionState.DONE],
        SessionState.DONE: [],
    }

    def __init__(self, initial_state: SessionState = SessionState.SPAWNED):
        self._state = initial_state
        self._listeners: list[StateTransitionCallback] = []
        self.done_reason: str | None = None

    @property
    def state(self) -> SessionState:
        """Current session state."""
        return self._state

    @property
    def is_ready(self) -> bool:
        """True once the handshake completed (READY or later, not DONE)."""
        return self._state in (SessionState.READY, SessionState.AWAITING_RESULT)

    @property
    def is_done(self) -> bool:
        """Check if the session reached its terminal state."""
        return self._state == SessionState.DONE

    def can_transition_to(self, new_state: SessionState) -> bool:
        """Check if transition to new_state is valid."""
        return new_state in self.VALID_TRANSITIONS.get(self._state, [])

    def transition(self, new_state: SessionState) -> None:
        """
        Transition to a new state.

        Raises:
            InvalidStateTransition: If the transition is not valid.
        """
        if not self.can_transition_to(new_state):
            raise InvalidStateTransition(self._state, new_state)

        old_state = self._state
        self._state = new_state
        self._notify(old_state, new_state)

    def finish(self, reason: str) -> bool:
        """
        Move to DONE from any state.

        Idempotent: finishing an already finished session is a no-op.

        Returns:
            True if this call performed the transition.
        """
        if self._state == SessionState.DONE:
            return False
        self.done_reason = reason
        self.transition(SessionState.DONE)
        return True

    def on_transition(self, callback: StateTransitionCallback) -> None:
        """Register a callback for state transitions."""
        self._listeners.append(callback)

    def remove_listener(self, callback: StateTransitionCallback) -> None:
        """Remove a previously registered callback."""
        try:
            self._listeners.remove(callback)
        except ValueError:
            pass

    def _notify(self, old_state: SessionState, new_state: SessionState) -> None:
        for listener in self._listeners:
            try:
                listener(old_state, new_state)
            except Exception:
                logger.exception(f"State listener failed on {old_state} -> {new_state}")

    def __str__(self) -> str:
        return f"SessionStateMachine({self._state.name})"

    def __repr__(self) -> str:
        return f"SessionStateMachine(state={self._state!r})"
