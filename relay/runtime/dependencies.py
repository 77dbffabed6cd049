"""Runtime dependency construction (session registry, sweeper, recognizer bridge)."""

from __future__ import annotations

import logging

from relay.state import RuntimeDeps
from relay.state.settings import AppSettings
from relay.upstream.bridge import UpstreamBridge
from relay.handlers.sweeper import LivenessSweeper
from relay.handlers.connections import SessionRegistry

from .settings import load_settings

logger = logging.getLogger(__name__)


def build_runtime_deps(settings: AppSettings | None = None) -> RuntimeDeps:
    settings = settings or load_settings()

    registry = SessionRegistry()
    sweeper = LivenessSweeper(registry, interval_s=settings.websocket.heartbeat_interval_s)
    upstream_bridge = UpstreamBridge(settings=settings.upstream)

    if not upstream_bridge.configured:
        logger.warning("runtime: transcription service API key missing; stream mode will be rejected")

    return RuntimeDeps(
        registry=registry,
        sweeper=sweeper,
        upstream_bridge=upstream_bridge,
        settings=settings,
    )


__all__ = ["RuntimeDeps", "build_runtime_deps"]
