"""HMAC token verification and room key derivation.

A token binds an identity to one room. The signed message is the UTF-8
encoding of ``"{decision_id}:{vertical_key}:{identity}"`` and the signature
travels as lowercase or uppercase hex.
"""

from __future__ import annotations

import re
import hmac
import base64
import hashlib

from ..config.rooms import ROOM_KEY_SEPARATOR

_HEX_RE = re.compile(r"(?:[0-9a-fA-F]{2})+")


def _signed_message(decision_id: str, vertical_key: str, identity: str) -> bytes:
    return f"{decision_id}:{vertical_key}:{identity}".encode("utf-8")


def sign_token(decision_id: str, vertical_key: str, identity: str, secret: str) -> str:
    """Return the hex HMAC-SHA256 a token-issuing endpoint hands to clients."""
    digest = hmac.new(
        secret.encode("utf-8"),
        _signed_message(decision_id, vertical_key, identity),
        hashlib.sha256,
    )
    return digest.hexdigest()


def verify(
    decision_id: str,
    vertical_key: str,
    identity: str,
    signature_hex: str,
    secret: str,
) -> bool:
    """Check a token signature in constant time.

    Args:
        decision_id: Decision identifier the token was issued for.
        vertical_key: Vertical key the token was issued for.
        identity: Principal the token was issued to.
        signature_hex: Hex-encoded HMAC-SHA256 (pairs of hex digits).
        secret: Process-wide signing secret.

    Returns:
        True when the signature matches; False otherwise, including when
        ``signature_hex`` is not well-formed hex.
    """
    if not isinstance(signature_hex, str) or not _HEX_RE.fullmatch(signature_hex):
        return False
    provided = bytes.fromhex(signature_hex)
    expected = hmac.new(
        secret.encode("utf-8"),
        _signed_message(decision_id, vertical_key, identity),
        hashlib.sha256,
    ).digest()
    return hmac.compare_digest(provided, expected)


def room_key(decision_id: str, vertical_key: str) -> str:
    """Derive the room key for a decision/vertical pair.

    The handshake decoder rejects components that contain the separator, a
    decision id ending in "_" and a vertical key starting with "_". The first
    "__" of a key is then always the join, so distinct pairs map to distinct
    keys.
    """
    return f"{decision_id}{ROOM_KEY_SEPARATOR}{vertical_key}"


def encode_handshake_protocol(
    decision_id: str,
    vertical_key: str,
    identity: str,
    signature_hex: str,
) -> str:
    """Build the sub-protocol entry a client sends (unpadded base64)."""
    raw = f"{decision_id}:{vertical_key}:{identity}:{signature_hex}".encode("utf-8")
    return base64.b64encode(raw).decode("ascii").rstrip("=")


__all__ = ["sign_token", "verify", "room_key", "encode_handshake_protocol"]
