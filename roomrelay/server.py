"""Main FastAPI server for the room relay.

Provides:

- REST endpoints for health checks (/healthz, /)
- WebSocket endpoint for room chat (/ws)
- A background reaper evicting idle rooms
- Optional OpenTelemetry and Sentry export

Server Lifecycle:
    1. On startup: validate configuration, initialise telemetry, build the
       room store and start the reaper
    2. Accept WebSocket connections on /ws, each authenticated by the token
       carried in its Sec-WebSocket-Protocol header
    3. On shutdown: stop the reaper and flush telemetry

Example:
    Run directly with uvicorn:
        $ uvicorn roomrelay.server:app --host 0.0.0.0 --port 8000

    Or build an app around prepared dependencies (tests do this):
        app = create_app(RuntimeDeps(room_store=RoomStore(), secret="..."))
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, WebSocket
from fastapi.responses import ORJSONResponse

from .logging import configure_logging
from .runtime import RuntimeDeps, build_runtime_deps
from .telemetry import init_telemetry, shutdown_telemetry
from .helpers.validation import validate_env
from .handlers.websocket import handle_websocket_connection

logger = logging.getLogger(__name__)


def create_app(runtime_deps: RuntimeDeps | None = None) -> FastAPI:
    """Build the ASGI app.

    Args:
        runtime_deps: Prepared dependencies. When omitted they are built from
            the environment at startup, after validation and telemetry setup.
    """
    configure_logging()
    app = FastAPI(default_response_class=ORJSONResponse)
    app.state.runtime_deps = runtime_deps
    owns_telemetry = runtime_deps is None

    @app.on_event("startup")
    async def start_relay() -> None:
        """Assemble runtime services before accepting traffic."""
        if app.state.runtime_deps is None:
            validate_env()
            backends = init_telemetry()
            logger.info("telemetry backends: %s", ", ".join(backends) or "none")
            app.state.runtime_deps = build_runtime_deps()
        app.state.runtime_deps.start_daemons()
        logger.info("relay started")

    @app.on_event("shutdown")
    async def stop_relay() -> None:
        """Stop background tasks and flush telemetry."""
        deps: RuntimeDeps | None = app.state.runtime_deps
        if deps is not None:
            await deps.shutdown()
        if owns_telemetry:
            shutdown_telemetry()
        logger.info("relay stopped")

    @app.get("/")
    async def root():
        """Root endpoint for load balancer health checks."""
        return _health(app)

    @app.get("/healthz")
    async def healthz():
        """Health check endpoint (no authentication required)."""
        return _health(app)

    @app.get("/favicon.ico", status_code=204)
    async def favicon():
        """Suppress favicon requests from browsers/probes."""
        return None

    @app.websocket("/ws")
    async def websocket_endpoint(websocket: WebSocket):
        """Relay endpoint; the room comes from the handshake token."""
        await handle_websocket_connection(websocket, websocket.app.state.runtime_deps)

    return app


def _health(app: FastAPI) -> dict:
    deps: RuntimeDeps | None = app.state.runtime_deps
    rooms = deps.room_store.room_count() if deps is not None else 0
    return {"status": "ok", "rooms": rooms}


app = create_app()
