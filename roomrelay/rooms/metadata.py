"""Per-connection metadata and fanout results."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class ConnectionMetadata:
    """Transient state for one registered connection.

    ``display_name`` starts as the identity and is replaced by name updates.
    The record lives exactly as long as the registration.
    """

    room: str
    identity: str
    display_name: str


@dataclass(frozen=True, slots=True)
class DeliveryReport:
    """Outcome counts for one publish call (observability, not errors)."""

    delivered: int = 0
    failed: int = 0

    @property
    def attempted(self) -> int:
        return self.delivered + self.failed


__all__ = ["ConnectionMetadata", "DeliveryReport"]
