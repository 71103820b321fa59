"""Runtime dependency container.

All long-lived runtime services are assembled at startup and passed explicitly
through request handlers. There are no module-level registries; every
connection reaches its room through the store held here.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..rooms.store import RoomStore
from ..config.websocket import WS_CLOSE_NORMAL_CODE, WS_CLOSE_NORMAL_REASON


@dataclass(slots=True)
class RuntimeDeps:
    """Process-wide runtime services initialized during startup."""

    room_store: RoomStore
    secret: str

    def start_daemons(self) -> None:
        self.room_store.start_reaper()

    async def shutdown(self) -> None:
        """Stop the reaper, then close every live connection normally."""
        await self.room_store.stop_reaper()
        await self.room_store.close_all(WS_CLOSE_NORMAL_CODE, WS_CLOSE_NORMAL_REASON)


__all__ = ["RuntimeDeps"]
