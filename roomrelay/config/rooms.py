"""Room registry housekeeping configuration."""

import os


# Seconds an empty room keeps its registry before the reaper drops it
ROOM_IDLE_TIMEOUT_S = float(os.getenv("ROOM_IDLE_TIMEOUT_S", "300"))
ROOM_REAPER_TICK_S = float(os.getenv("ROOM_REAPER_TICK_S", "30"))

# Separator between decision id and vertical key in a room key
ROOM_KEY_SEPARATOR = "__"


__all__ = [
    "ROOM_IDLE_TIMEOUT_S",
    "ROOM_REAPER_TICK_S",
    "ROOM_KEY_SEPARATOR",
]
