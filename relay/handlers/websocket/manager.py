"""Primary WebSocket connection handler orchestration."""

from __future__ import annotations

import logging
import contextlib

from fastapi import WebSocket

from relay.state import RuntimeDeps
from relay.state.session import ClientSession

from .echo import run_echo_session
from .relay import RelayCoordinator
from .client import ClientConnection
from .parser import parse_session_params

logger = logging.getLogger(__name__)


async def handle_websocket_connection(ws: WebSocket, runtime_deps: RuntimeDeps) -> None:
    params = parse_session_params(str(ws.url))
    await ws.accept()

    session = ClientSession(connection=ClientConnection(ws), params=params)
    registry = runtime_deps.registry
    registry.add(session)
    logger.info(
        "WebSocket connection accepted session_id=%s mode=%s enc=%s sr=%s punct=%s. Active: %s",
        session.session_id,
        params.mode,
        params.encoding,
        params.sample_rate,
        params.punctuate,
        registry.get_session_count(),
    )
    queue_max = runtime_deps.settings.websocket.inbound_queue_max
    try:
        if params.is_stream:
            await RelayCoordinator(
                session,
                upstream_bridge=runtime_deps.upstream_bridge,
                queue_max=queue_max,
            ).run()
        else:
            await run_echo_session(session, queue_max=queue_max)
    finally:
        registry.remove(session)
        with contextlib.suppress(Exception):
            await session.connection.close()
        logger.info(
            "WebSocket connection closed session_id=%s. Active: %s",
            session.session_id,
            registry.get_session_count(),
        )


__all__ = ["handle_websocket_connection"]
