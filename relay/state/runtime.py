"""Typed runtime state objects for dependency wiring."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from relay.state.settings import AppSettings
    from relay.upstream.bridge import UpstreamBridge
    from relay.handlers.sweeper import LivenessSweeper
    from relay.handlers.connections import SessionRegistry


@dataclass(slots=True)
class RuntimeDeps:
    registry: SessionRegistry
    sweeper: LivenessSweeper
    upstream_bridge: UpstreamBridge
    settings: AppSettings

    async def shutdown(self) -> None:
        try:
            await self.sweeper.stop()
            await self.registry.terminate_all()
        except Exception:
            logger.exception("runtime shutdown failed")


__all__ = ["RuntimeDeps"]
