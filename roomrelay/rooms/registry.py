"""Connection registry and fanout for a single room.

One ``RoomRegistry`` holds every live connection subscribed to one room key.
It is the only shared mutable state of a room, so every mutating operation
(register, deregister, set_display_name and the write-out phase of publish)
runs under one ``asyncio.Lock``:

- Two concurrent registrations for the same identity cannot both miss each
  other; the later one always supersedes the earlier.
- Two publishes never interleave their per-recipient sends, so every
  recipient observes events in the order they were published.

Sends inside a publish run concurrently and each one is bounded by a timeout,
so a stalled recipient delays a fanout by at most one send timeout. A
recipient whose send fails is removed from the room and its transport is
closed in the background; the publisher never sees the failure.
"""

from __future__ import annotations

import json
import time
import asyncio
import logging
from typing import Any
from collections.abc import Callable

from .handle import ConnectionHandle
from .metadata import DeliveryReport, ConnectionMetadata
from ..errors import InvalidName, NotRegistered
from ..telemetry.traces import publish_span
from ..telemetry.instruments import get_metrics
from ..config.websocket import (
    WS_SEND_TIMEOUT_S,
    WS_CLOSE_TIMEOUT_S,
    WS_CLOSE_SUPERSEDED_CODE,
    WS_CLOSE_SUPERSEDED_REASON,
    WS_CLOSE_INTERNAL_ERROR_CODE,
)

logger = logging.getLogger(__name__)

TimeFn = Callable[[], float]


class RoomRegistry:
    """Live connections of one room and the fanout over them.

    Attributes:
        room: The room key every entry belongs to.
        last_activity: Monotonic timestamp of the last mutation or publish.
    """

    def __init__(
        self,
        room: str,
        *,
        send_timeout: float = WS_SEND_TIMEOUT_S,
        close_timeout: float = WS_CLOSE_TIMEOUT_S,
        now_fn: TimeFn | None = None,
    ) -> None:
        self.room = room
        self._send_timeout = send_timeout
        self._close_timeout = close_timeout
        self._now = now_fn or time.monotonic
        self._entries: dict[ConnectionHandle, ConnectionMetadata] = {}
        self._lock = asyncio.Lock()
        self._background: set[asyncio.Task] = set()
        self.last_activity = self._now()

    def touch(self) -> None:
        self.last_activity = self._now()

    async def register(self, handle: ConnectionHandle, identity: str) -> ConnectionMetadata:
        """Insert a handle, superseding any live handle with the same identity.

        The predecessor is closed with the supersession code and removed
        before the new handle is inserted, all under the room lock.
        """
        async with self._lock:
            existing = self._entries.get(handle)
            if existing is not None:
                return existing
            predecessors = [h for h, meta in self._entries.items() if meta.identity == identity]
            for previous in predecessors:
                del self._entries[previous]
                await previous.close(
                    WS_CLOSE_SUPERSEDED_CODE,
                    WS_CLOSE_SUPERSEDED_REASON,
                    timeout=self._close_timeout,
                )
                get_metrics().supersessions_total.add(1)
                logger.info(
                    "identity=%s reconnected; closed previous connection %s",
                    identity,
                    previous.connection_id,
                )
            metadata = ConnectionMetadata(room=self.room, identity=identity, display_name=identity)
            self._entries[handle] = metadata
            self.touch()
            logger.info(
                "registered connection %s identity=%s (%s in room)",
                handle.connection_id,
                identity,
                len(self._entries),
            )
            return metadata

    async def set_display_name(self, handle: ConnectionHandle, name: str) -> None:
        """Replace the display name of a registered handle with ``name.strip()``.

        Raises:
            NotRegistered: The handle is not in this room.
            InvalidName: The name is empty after trimming.
        """
        async with self._lock:
            metadata = self._entries.get(handle)
            if metadata is None:
                raise NotRegistered(f"connection {handle.connection_id} is not registered in {self.room}")
            trimmed = name.strip() if isinstance(name, str) else ""
            if not trimmed:
                raise InvalidName("display name must not be empty")
            metadata.display_name = trimmed
            self.touch()

    async def publish(
        self,
        message: dict[str, Any],
        *,
        exclude_self: bool = False,
        source: ConnectionHandle | None = None,
    ) -> DeliveryReport:
        """Serialize ``message`` once and send it to every registered handle.

        Args:
            message: JSON-serializable event.
            exclude_self: Skip ``source`` when True.
            source: The publishing connection.

        Returns:
            Counts of successful and failed sends.
        """
        payload = json.dumps(message)
        event_type = str(message.get("type", "unknown"))
        async with self._lock:
            recipients = [
                handle for handle in self._entries
                if not (exclude_self and handle is source)
            ]
            with publish_span(room=self.room, event_type=event_type, recipients=len(recipients)):
                outcomes = await asyncio.gather(
                    *(self._deliver(handle, payload) for handle in recipients)
                )
            failed = [handle for handle, ok in zip(recipients, outcomes) if ok is False]
            for handle in failed:
                self._entries.pop(handle, None)
                self._retire(handle)
            self.touch()

        delivered = sum(1 for ok in outcomes if ok is True)
        report = DeliveryReport(delivered=delivered, failed=len(failed))
        metrics = get_metrics()
        metrics.messages_published_total.add(1, {"type": event_type})
        if report.delivered:
            metrics.deliveries_total.add(report.delivered, {"status": "delivered"})
        if report.failed:
            metrics.deliveries_total.add(report.failed, {"status": "failed"})
            logger.warning(
                "publish type=%s delivered=%s failed=%s; dropped failed recipients",
                event_type,
                report.delivered,
                report.failed,
            )
        return report

    async def _deliver(self, handle: ConnectionHandle, payload: str) -> bool | None:
        """Send to one recipient; None means it left before or during its turn."""
        if handle.closed or handle not in self._entries:
            return None
        try:
            await handle.send(payload, timeout=self._send_timeout)
        except Exception as exc:  # noqa: BLE001
            if handle.closed:
                return None
            logger.info(
                "send to connection %s failed: %s",
                handle.connection_id,
                type(exc).__name__,
            )
            return False
        return True

    def _retire(self, handle: ConnectionHandle) -> None:
        """Close a failed recipient without blocking the fanout."""
        task = asyncio.create_task(
            handle.close(WS_CLOSE_INTERNAL_ERROR_CODE, "Delivery failed", timeout=self._close_timeout)
        )
        self._background.add(task)
        task.add_done_callback(self._background.discard)

    async def deregister(self, handle: ConnectionHandle) -> ConnectionMetadata | None:
        """Remove a handle; returns its metadata, or None if already gone."""
        async with self._lock:
            metadata = self._entries.pop(handle, None)
            self.touch()
        if metadata is not None:
            logger.info(
                "deregistered connection %s identity=%s (%s in room)",
                handle.connection_id,
                metadata.identity,
                len(self._entries),
            )
        return metadata

    async def close_all(self, code: int, reason: str) -> int:
        """Close every live handle; their handlers deregister during teardown."""
        async with self._lock:
            handles = list(self._entries)
            results = await asyncio.gather(
                *(handle.close(code, reason, timeout=self._close_timeout) for handle in handles)
            )
        return sum(1 for closed in results if closed)

    def count(self) -> int:
        """Number of live registered handles."""
        return len(self._entries)

    def metadata_for(self, handle: ConnectionHandle) -> ConnectionMetadata | None:
        return self._entries.get(handle)

    def is_idle(self, idle_timeout_s: float, now: float | None = None) -> bool:
        """True when the room is empty and untouched for ``idle_timeout_s``."""
        if self._entries:
            return False
        current = self._now() if now is None else now
        return (current - self.last_activity) >= idle_timeout_s

    async def drain(self) -> None:
        """Wait for background closes of failed recipients to finish."""
        if self._background:
            await asyncio.gather(*list(self._background), return_exceptions=True)


__all__ = ["RoomRegistry"]
