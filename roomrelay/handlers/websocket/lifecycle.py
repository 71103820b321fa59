"""Per-connection lifecycle state machine.

States move strictly forward:

    PENDING_AUTH -> SUBSCRIBED -> CLOSING -> CLOSED
    PENDING_AUTH -> CLOSING -> CLOSED          (rejected handshake)

``PENDING_AUTH`` is entered when the connection object is created, which is
the moment the transport handshake begins. Teardown is guarded by
``begin_close`` returning True only once, so racing close and error paths
deregister exactly once.
"""

from __future__ import annotations

import time
import uuid
import logging
from enum import Enum

from ...errors import InvalidTransition

logger = logging.getLogger(__name__)


class ConnectionState(str, Enum):
    PENDING_AUTH = "pending_auth"
    SUBSCRIBED = "subscribed"
    CLOSING = "closing"
    CLOSED = "closed"


_TRANSITIONS: dict[ConnectionState, frozenset[ConnectionState]] = {
    ConnectionState.PENDING_AUTH: frozenset({ConnectionState.SUBSCRIBED, ConnectionState.CLOSING}),
    ConnectionState.SUBSCRIBED: frozenset({ConnectionState.CLOSING}),
    ConnectionState.CLOSING: frozenset({ConnectionState.CLOSED}),
    ConnectionState.CLOSED: frozenset(),
}


class ConnectionLifecycle:
    """Tracks the state of one connection.

    Attributes:
        connection_id: Identifier shared with the connection handle and logs.
        opened_at: Monotonic timestamp of handshake start.
    """

    def __init__(self, connection_id: str | None = None) -> None:
        self.connection_id = connection_id or uuid.uuid4().hex
        self.opened_at = time.monotonic()
        self._state = ConnectionState.PENDING_AUTH

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def is_subscribed(self) -> bool:
        return self._state is ConnectionState.SUBSCRIBED

    def duration(self) -> float:
        return time.monotonic() - self.opened_at

    def _advance(self, target: ConnectionState) -> None:
        if target not in _TRANSITIONS[self._state]:
            raise InvalidTransition(self._state.value, target.value)
        logger.debug("connection %s: %s -> %s", self.connection_id, self._state.value, target.value)
        self._state = target

    def subscribe(self) -> None:
        """Handshake verified and registered with the room."""
        self._advance(ConnectionState.SUBSCRIBED)

    def begin_close(self) -> bool:
        """Enter CLOSING; returns False if teardown already started."""
        if self._state in (ConnectionState.CLOSING, ConnectionState.CLOSED):
            return False
        self._advance(ConnectionState.CLOSING)
        return True

    def finish(self) -> None:
        """Enter the terminal state (idempotent once CLOSED)."""
        if self._state is ConnectionState.CLOSED:
            return
        self._advance(ConnectionState.CLOSED)


__all__ = ["ConnectionLifecycle", "ConnectionState"]
