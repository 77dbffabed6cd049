"""Main FastAPI server for the real-time transcription relay."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from contextlib import asynccontextmanager
from typing import Any

import uvicorn
from fastapi import FastAPI, WebSocket
from fastapi.responses import ORJSONResponse

from relay.state import RuntimeDeps
from relay.config.websocket import WS_ENDPOINT_PATH
from relay.runtime.settings import load_settings
from relay.runtime.logging import configure_logging
from relay.runtime.dependencies import build_runtime_deps
from relay.handlers.websocket.manager import handle_websocket_connection

logger = logging.getLogger(__name__)

configure_logging()


@asynccontextmanager
async def _lifespan(app: FastAPI):
    runtime_deps = build_runtime_deps()
    app.state.runtime_deps = runtime_deps
    runtime_deps.sweeper.start()
    logger.info("runtime: ready (heartbeat every %ss)", runtime_deps.settings.websocket.heartbeat_interval_s)
    try:
        yield
    finally:
        deps = getattr(app.state, "runtime_deps", None)
        if deps is not None:
            await deps.shutdown()


app = FastAPI(default_response_class=ORJSONResponse, lifespan=_lifespan)


def _runtime_deps() -> RuntimeDeps:
    runtime_deps = getattr(app.state, "runtime_deps", None)
    if runtime_deps is None:
        raise RuntimeError("Runtime dependencies are not initialized")
    return runtime_deps


def _health_payload() -> dict[str, Any]:
    configured = _runtime_deps().upstream_bridge.configured
    return {
        "ok": True,
        "time": datetime.now(timezone.utc).isoformat(),
        "websocket": "available",
        "transcription_api": "configured" if configured else "missing",
    }


@app.get("/")
async def root() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/health")
async def health() -> dict[str, Any]:
    return _health_payload()


@app.get("/api/health")
async def api_health() -> dict[str, Any]:
    return _health_payload()


@app.get("/ws-test")
async def ws_test() -> dict[str, Any]:
    return {
        "message": "WebSocket server is running",
        "path": WS_ENDPOINT_PATH,
        "clients": _runtime_deps().registry.get_session_count(),
        "ready": True,
    }


@app.websocket(WS_ENDPOINT_PATH)
async def websocket_endpoint(websocket: WebSocket) -> None:
    await handle_websocket_connection(websocket, _runtime_deps())


def main() -> None:
    settings = load_settings()
    # Transport-level ping/pong; uvicorn drops a peer that stops answering.
    heartbeat_s = settings.websocket.heartbeat_interval_s
    uvicorn.run(
        app,
        host=settings.server.host,
        port=settings.server.port,
        ws_ping_interval=heartbeat_s,
        ws_ping_timeout=heartbeat_s,
    )


if __name__ == "__main__":
    main()
