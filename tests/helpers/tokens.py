"""Token minting for handshake tests."""

from __future__ import annotations

from roomrelay.auth.tokens import sign_token, encode_handshake_protocol

TEST_SECRET = "test-secret"


def protocol_entry(
    decision_id: str,
    vertical_key: str,
    identity: str,
    *,
    secret: str = TEST_SECRET,
) -> str:
    """Signed base64 sub-protocol entry, as a browser client would send it."""
    signature = sign_token(decision_id, vertical_key, identity, secret)
    return encode_handshake_protocol(decision_id, vertical_key, identity, signature)


def subprotocols(
    decision_id: str,
    vertical_key: str,
    identity: str,
    *,
    secret: str = TEST_SECRET,
    literal: str | None = "chat",
) -> list[str]:
    entries = [protocol_entry(decision_id, vertical_key, identity, secret=secret)]
    if literal is not None:
        entries.append(literal)
    return entries


__all__ = ["TEST_SECRET", "protocol_entry", "subprotocols"]
