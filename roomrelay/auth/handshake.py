"""Handshake token extraction from the ``Sec-WebSocket-Protocol`` header.

The client lists two sub-protocols: a base64 blob carrying
``decisionId:verticalKey:identity:hexHmac`` and, optionally, a fixed literal
(``chat``). Authentication is resolved here, before the connection is
accepted, so no application frame is ever exchanged with an unverified peer.
"""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass

from .tokens import verify, room_key
from ..config.rooms import ROOM_KEY_SEPARATOR
from ..config.websocket import WS_SUBPROTOCOL
from ..errors import Unauthorized, MalformedHandshake


@dataclass(frozen=True, slots=True)
class AuthToken:
    """A verified handshake credential."""

    decision_id: str
    vertical_key: str
    identity: str
    room: str

    def scope(self) -> dict[str, str]:
        """Room-scoping fields attached to every outbound event."""
        return {"decisionId": self.decision_id, "verticalKey": self.vertical_key}


def split_protocols(header: str | None) -> list[str]:
    """Split a comma-separated sub-protocol header into stripped entries."""
    if header is None:
        return []
    return [entry.strip() for entry in header.split(",")]


def _b64decode(encoded: str) -> str:
    """Decode standard or URL-safe base64, with or without padding."""
    normalized = encoded.replace("-", "+").replace("_", "/")
    normalized += "=" * (-len(normalized) % 4)
    try:
        raw = base64.b64decode(normalized, validate=True)
        return raw.decode("utf-8")
    except (binascii.Error, ValueError) as exc:
        raise MalformedHandshake("Connection token is not valid base64.") from exc


def _ambiguous_room_components(decision_id: str, vertical_key: str) -> bool:
    """True when the joined room key could also be produced by another pair."""
    if ROOM_KEY_SEPARATOR in decision_id or ROOM_KEY_SEPARATOR in vertical_key:
        return True
    return decision_id.endswith(ROOM_KEY_SEPARATOR[0]) or vertical_key.startswith(ROOM_KEY_SEPARATOR[-1])


def decode_handshake(header: str | None) -> tuple[str, str, str, str]:
    """Decode the token entry into ``(decision_id, vertical_key, identity, signature)``.

    Raises:
        MalformedHandshake: Header absent, entry not base64, or the decoded
            string does not split into exactly four non-empty fields, or a
            room component contains the room key separator or would run
            into it (a decisionId ending or verticalKey starting with "_").
    """
    if header is None:
        raise MalformedHandshake("Missing Sec-WebSocket-Protocol header.")
    entries = split_protocols(header)
    if not entries or not entries[0]:
        raise MalformedHandshake("Missing connection token in Sec-WebSocket-Protocol.")

    decoded = _b64decode(entries[0])
    fields = decoded.split(":")
    if len(fields) != 4 or not all(fields):
        raise MalformedHandshake(
            "Connection token must carry decisionId, verticalKey, identity and signature separated by colons."
        )
    decision_id, vertical_key, identity, signature = fields
    if _ambiguous_room_components(decision_id, vertical_key):
        raise MalformedHandshake(
            f"decisionId and verticalKey must not contain {ROOM_KEY_SEPARATOR!r} or touch it at the join."
        )
    return decision_id, vertical_key, identity, signature


def negotiate_subprotocol(header: str | None) -> str | None:
    """Return the literal to echo back, if the client offered it after the token."""
    entries = split_protocols(header)[1:]
    if WS_SUBPROTOCOL in entries:
        return WS_SUBPROTOCOL
    return None


def authenticate_handshake(header: str | None, secret: str) -> AuthToken:
    """Decode and verify a handshake header.

    Returns:
        The verified token; its ``room`` is derived only after verification.

    Raises:
        MalformedHandshake: The header cannot be decoded.
        Unauthorized: The signature does not verify.
    """
    decision_id, vertical_key, identity, signature = decode_handshake(header)
    if not verify(decision_id, vertical_key, identity, signature, secret):
        raise Unauthorized("Connection token signature is invalid.")
    return AuthToken(
        decision_id=decision_id,
        vertical_key=vertical_key,
        identity=identity,
        room=room_key(decision_id, vertical_key),
    )


__all__ = [
    "AuthToken",
    "authenticate_handshake",
    "decode_handshake",
    "negotiate_subprotocol",
    "split_protocols",
]
