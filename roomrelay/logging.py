"""Logging context helpers for consistent structured fields."""

from __future__ import annotations

import logging
import contextlib
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import Token, ContextVar

_ROOM: ContextVar[str] = ContextVar("room", default="-")
_IDENTITY: ContextVar[str] = ContextVar("identity", default="-")
_CONNECTION_ID: ContextVar[str] = ContextVar("connection_id", default="-")


def set_log_context(
    *,
    room: str | None = None,
    identity: str | None = None,
    connection_id: str | None = None,
) -> list[tuple[ContextVar[str], Token[str]]]:
    """Set log context values and return tokens for reset."""
    tokens: list[tuple[ContextVar[str], Token[str]]] = []
    if room is not None:
        tokens.append((_ROOM, _ROOM.set(room)))
    if identity is not None:
        tokens.append((_IDENTITY, _IDENTITY.set(identity)))
    if connection_id is not None:
        tokens.append((_CONNECTION_ID, _CONNECTION_ID.set(connection_id)))
    return tokens


def reset_log_context(tokens: list[tuple[ContextVar[str], Token[str]]]) -> None:
    """Reset log context values using tokens returned by set_log_context."""
    for var, token in reversed(tokens):
        var.reset(token)


@contextmanager
def log_context(
    *,
    room: str | None = None,
    identity: str | None = None,
    connection_id: str | None = None,
) -> Iterator[None]:
    """Context manager for applying log fields within a block."""
    tokens = set_log_context(room=room, identity=identity, connection_id=connection_id)
    try:
        yield
    finally:
        reset_log_context(tokens)


def current_log_context() -> dict[str, str]:
    """Snapshot of the active context fields."""
    return {
        "room": _ROOM.get(),
        "identity": _IDENTITY.get(),
        "connection_id": _CONNECTION_ID.get(),
    }


def install_log_context() -> None:
    """Install a LogRecord factory that injects context fields."""
    if getattr(install_log_context, "_installed", False):
        return

    old_factory = logging.getLogRecordFactory()

    def record_factory(*args, **kwargs):
        record = old_factory(*args, **kwargs)
        record.room = _ROOM.get()
        record.identity = _IDENTITY.get()
        record.connection_id = _CONNECTION_ID.get()
        return record

    logging.setLogRecordFactory(record_factory)
    install_log_context._installed = True  # type: ignore[attr-defined]


def configure_logging() -> None:
    """Initialize root logging configuration once per process."""
    from roomrelay.config.logging import APP_LOG_LEVEL, APP_LOG_FORMAT, APP_LOG_DATEFMT  # noqa: PLC0415

    install_log_context()
    root_logger = logging.getLogger()
    if not root_logger.handlers:
        logging.basicConfig(level=APP_LOG_LEVEL, format=APP_LOG_FORMAT, datefmt=APP_LOG_DATEFMT)
    else:
        root_logger.setLevel(APP_LOG_LEVEL)
        for handler in root_logger.handlers:
            with contextlib.suppress(Exception):
                handler.setLevel(APP_LOG_LEVEL)
                handler.setFormatter(logging.Formatter(APP_LOG_FORMAT, datefmt=APP_LOG_DATEFMT))

    logging.getLogger("roomrelay").setLevel(APP_LOG_LEVEL)


__all__ = [
    "configure_logging",
    "current_log_context",
    "install_log_context",
    "log_context",
    "reset_log_context",
    "set_log_context",
]
