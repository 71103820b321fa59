"""Outbound event builders for room broadcasts."""

from __future__ import annotations

from typing import Any
from datetime import datetime, timezone

from ...auth.handshake import AuthToken
from ...rooms.metadata import ConnectionMetadata


def utc_timestamp(now: datetime | None = None) -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a ``Z`` suffix."""
    current = now or datetime.now(timezone.utc)
    return current.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_chat_event(
    metadata: ConnectionMetadata,
    token: AuthToken,
    text: str,
    *,
    now: datetime | None = None,
) -> dict[str, Any]:
    return {
        "type": "chat",
        "identity": metadata.identity,
        "displayName": metadata.display_name,
        "text": text,
        "time": utc_timestamp(now),
        **token.scope(),
    }


def build_name_event(
    metadata: ConnectionMetadata,
    token: AuthToken,
    *,
    now: datetime | None = None,
) -> dict[str, Any]:
    return {
        "type": "name",
        "identity": metadata.identity,
        "name": metadata.display_name,
        "time": utc_timestamp(now),
        **token.scope(),
    }


__all__ = ["build_chat_event", "build_name_event", "utc_timestamp"]
