"""Opaque per-connection handle used as the room registry key."""

from __future__ import annotations

import uuid
import asyncio
import logging
from typing import Protocol

from ..config.websocket import WS_SEND_TIMEOUT_S, WS_CLOSE_TIMEOUT_S

logger = logging.getLogger(__name__)


class Transport(Protocol):
    """The subset of a WebSocket the registry needs."""

    async def send_text(self, data: str) -> None: ...

    async def close(self, code: int = 1000, reason: str | None = None) -> None: ...


class ConnectionHandle:
    """Reference to one live bidirectional connection.

    Handles compare and hash by identity, so two handles are never equal even
    when they wrap the same identity. Sends and closes are bounded by a
    timeout so a stalled peer cannot hold up its caller.
    """

    __slots__ = ("connection_id", "_transport", "_closed")

    def __init__(self, transport: Transport, connection_id: str | None = None) -> None:
        self.connection_id = connection_id or uuid.uuid4().hex
        self._transport = transport
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def mark_closed(self) -> None:
        """Record that the transport is gone without sending a close frame."""
        self._closed = True

    async def send(self, text: str, *, timeout: float = WS_SEND_TIMEOUT_S) -> None:
        """Send a text frame.

        Raises:
            ConnectionError: The handle was already closed.
            TimeoutError: The transport did not take the frame in time.
        """
        if self._closed:
            raise ConnectionError(f"connection {self.connection_id} is closed")
        await asyncio.wait_for(self._transport.send_text(text), timeout=timeout)

    async def close(self, code: int, reason: str = "", *, timeout: float = WS_CLOSE_TIMEOUT_S) -> bool:
        """Close the transport once; return False if it was already closed."""
        if self._closed:
            return False
        self._closed = True
        try:
            await asyncio.wait_for(self._transport.close(code=code, reason=reason), timeout=timeout)
        except Exception:  # noqa: BLE001
            logger.debug("close(%s) on connection %s failed", code, self.connection_id, exc_info=True)
        return True

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"ConnectionHandle({self.connection_id!r}, {state})"


__all__ = ["ConnectionHandle", "Transport"]
