"""Bind address for the HTTP + WebSocket server."""

from __future__ import annotations

ENV_HOST = "HOST"
ENV_PORT = "PORT"

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 3001

__all__ = ["DEFAULT_HOST", "DEFAULT_PORT", "ENV_HOST", "ENV_PORT"]
