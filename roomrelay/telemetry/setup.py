"""Start and stop the optional export backends.

Each backend is switched on by one credential in ``config.telemetry``; with
none set the relay still runs, recording into no-op instruments.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from .otel import init_otel, shutdown_otel
from .sentry import init_sentry, shutdown_sentry
from ..config import telemetry as telemetry_config

logger = logging.getLogger(__name__)

# (name, credential setting, start, stop); stopped in reverse order
_BACKENDS: tuple[tuple[str, str, Callable[[], None], Callable[[], None]], ...] = (
    ("otel", "OTLP_API_TOKEN", init_otel, shutdown_otel),
    ("sentry", "SENTRY_DSN", init_sentry, shutdown_sentry),
)


def init_telemetry() -> list[str]:
    """Start every backend whose credential is set; return their names."""
    enabled: list[str] = []
    for name, setting, start, _ in _BACKENDS:
        if not getattr(telemetry_config, setting):
            logger.info("%s export disabled (%s not set)", name, setting)
            continue
        start()
        enabled.append(name)
    return enabled


def shutdown_telemetry() -> None:
    """Flush and stop all backends. Safe when none were started."""
    for _, _, _, stop in reversed(_BACKENDS):
        stop()


__all__ = ["init_telemetry", "shutdown_telemetry"]
