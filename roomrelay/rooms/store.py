"""Room-keyed store of registries.

The store plays the part of the partition layer that routes a connection to
the registry of its room. Registries are created lazily on the first lease
and evicted by a background reaper once they have been empty, unleased and
untouched for the idle window.

Example:
    store = RoomStore()
    async with store.lease(token.room) as registry:
        metadata = await registry.register(handle, token.identity)
        ...
"""

from __future__ import annotations

import time
import asyncio
import logging
import contextlib
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager

from .registry import RoomRegistry
from ..config.rooms import ROOM_IDLE_TIMEOUT_S, ROOM_REAPER_TICK_S

logger = logging.getLogger(__name__)

RegistryFactory = Callable[[str], RoomRegistry]
TimeFn = Callable[[], float]


class RoomStore:
    """Owns one ``RoomRegistry`` per room key.

    A lease pins a registry for the lifetime of a connection. Pinned
    registries are never evicted, so every connection of a room always talks
    to the same registry instance.
    """

    def __init__(
        self,
        *,
        idle_timeout_s: float = ROOM_IDLE_TIMEOUT_S,
        reaper_tick_s: float = ROOM_REAPER_TICK_S,
        registry_factory: RegistryFactory | None = None,
        now_fn: TimeFn | None = None,
    ) -> None:
        self.idle_timeout_s = idle_timeout_s
        self.reaper_tick_s = reaper_tick_s
        self._now = now_fn or time.monotonic
        self._factory = registry_factory or (lambda room: RoomRegistry(room, now_fn=self._now))
        self._rooms: dict[str, RoomRegistry] = {}
        self._leases: dict[str, int] = {}
        self._lock = asyncio.Lock()  # Guards _rooms/_leases only, never held across I/O
        self._reaper: asyncio.Task | None = None

    @asynccontextmanager
    async def lease(self, room: str) -> AsyncIterator[RoomRegistry]:
        """Yield the registry for ``room``, creating it if needed."""
        async with self._lock:
            registry = self._rooms.get(room)
            if registry is None:
                registry = self._factory(room)
                self._rooms[room] = registry
                logger.info("created registry for room %s (%s rooms)", room, len(self._rooms))
            self._leases[room] = self._leases.get(room, 0) + 1
        try:
            yield registry
        finally:
            async with self._lock:
                remaining = self._leases.get(room, 1) - 1
                if remaining > 0:
                    self._leases[room] = remaining
                else:
                    self._leases.pop(room, None)
                registry.touch()

    def get(self, room: str) -> RoomRegistry | None:
        return self._rooms.get(room)

    def room_count(self) -> int:
        return len(self._rooms)

    def connection_count(self) -> int:
        return sum(registry.count() for registry in self._rooms.values())

    async def close_all(self, code: int, reason: str) -> int:
        """Close every connection in every room; returns how many were closed."""
        async with self._lock:
            registries = list(self._rooms.values())
        closed = 0
        for registry in registries:
            closed += await registry.close_all(code, reason)
        if closed:
            logger.info("closed %s connections across %s rooms", closed, len(registries))
        return closed

    async def evict_idle(self, now: float | None = None) -> int:
        """Drop registries that are empty, unleased and idle; return how many."""
        current = self._now() if now is None else now
        evicted = 0
        async with self._lock:
            for room, registry in list(self._rooms.items()):
                if self._leases.get(room):
                    continue
                if not registry.is_idle(self.idle_timeout_s, now=current):
                    continue
                del self._rooms[room]
                evicted += 1
                logger.info("evicted idle registry for room %s", room)
        return evicted

    def start_reaper(self) -> asyncio.Task | None:
        """Start the idle eviction daemon (idempotent)."""
        if self.reaper_tick_s <= 0:
            logger.info("room reaper disabled")
            return None
        if self._reaper is None or self._reaper.done():
            self._reaper = asyncio.create_task(self._reaper_loop())
        return self._reaper

    async def stop_reaper(self) -> None:
        """Stop the reaper and wait for it to exit."""
        task, self._reaper = self._reaper, None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    async def _reaper_loop(self) -> None:
        logger.info(
            "room reaper started tick=%ss idle_timeout=%ss",
            self.reaper_tick_s,
            self.idle_timeout_s,
        )
        while True:
            await asyncio.sleep(self.reaper_tick_s)
            try:
                evicted = await self.evict_idle()
            except Exception:  # noqa: BLE001
                logger.exception("room reaper pass failed")
                continue
            if evicted:
                logger.info("room reaper evicted %s rooms; %s remain", evicted, len(self._rooms))


__all__ = ["RoomStore"]
