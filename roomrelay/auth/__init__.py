"""Handshake authentication: token verification and header decoding."""

from .tokens import sign_token, verify, room_key, encode_handshake_protocol
from .handshake import AuthToken, authenticate_handshake, decode_handshake, negotiate_subprotocol

__all__ = [
    "AuthToken",
    "authenticate_handshake",
    "decode_handshake",
    "encode_handshake_protocol",
    "negotiate_subprotocol",
    "room_key",
    "sign_token",
    "verify",
]
