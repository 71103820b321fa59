"""Runtime dependency bootstrap.

Builds the room store and captures the signing secret once at startup.
Request handlers consume these dependencies directly.
"""

from __future__ import annotations

from ..rooms.store import RoomStore
from ..config.secrets import RELAY_WEBSOCKET_SECRET
from ..config.rooms import ROOM_IDLE_TIMEOUT_S, ROOM_REAPER_TICK_S
from .dependencies import RuntimeDeps


def build_runtime_deps(secret: str | None = None) -> RuntimeDeps:
    """Build runtime dependencies from configuration."""
    resolved = secret if secret is not None else RELAY_WEBSOCKET_SECRET
    if not resolved:
        raise RuntimeError("RELAY_WEBSOCKET_SECRET is required to verify connection tokens")
    store = RoomStore(idle_timeout_s=ROOM_IDLE_TIMEOUT_S, reaper_tick_s=ROOM_REAPER_TICK_S)
    return RuntimeDeps(room_store=store, secret=resolved)


__all__ = ["build_runtime_deps"]
