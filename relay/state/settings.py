"""Runtime settings (dataclasses only)."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class UpstreamSettings:
    api_key: str
    listen_url: str
    model: str
    language: str
    handshake_timeout_s: float
    max_message_bytes: int
    debug: bool


@dataclass(frozen=True, slots=True)
class WebSocketSettings:
    heartbeat_interval_s: float
    inbound_queue_max: int


@dataclass(frozen=True, slots=True)
class ServerSettings:
    host: str
    port: int


@dataclass(frozen=True, slots=True)
class AppSettings:
    upstream: UpstreamSettings
    websocket: WebSocketSettings
    server: ServerSettings


__all__ = [
    "AppSettings",
    "ServerSettings",
    "UpstreamSettings",
    "WebSocketSettings",
]
