"""Configuration module exports (env-resolved constants only)."""

from .websocket import WS_ENDPOINT_PATH
from .upstream import UPSTREAM_HANDSHAKE_TIMEOUT_S

__all__ = [
    "UPSTREAM_HANDSHAKE_TIMEOUT_S",
    "WS_ENDPOINT_PATH",
]
