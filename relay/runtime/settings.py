"""Environment parsing for runtime settings.

Env names and defaults live in `relay/config/*`; this module resolves them into
the structured dataclasses used by the rest of the server.
"""

from __future__ import annotations

import os

from relay.config.server import ENV_HOST, ENV_PORT, DEFAULT_HOST, DEFAULT_PORT
from relay.config.secrets import ENV_TRANSCRIPTION_SERVICE_API_KEY
from relay.config.websocket import (
    ENV_WS_INBOUND_QUEUE_MAX,
    ENV_WS_HEARTBEAT_INTERVAL_S,
    DEFAULT_WS_INBOUND_QUEUE_MAX,
    DEFAULT_WS_HEARTBEAT_INTERVAL_S,
)
from relay.state.settings import (
    AppSettings,
    ServerSettings,
    UpstreamSettings,
    WebSocketSettings,
)
from relay.config.upstream import (
    ENV_UPSTREAM_DEBUG,
    ENV_UPSTREAM_MODEL,
    ENV_UPSTREAM_LANGUAGE,
    DEFAULT_UPSTREAM_MODEL,
    ENV_UPSTREAM_LISTEN_URL,
    DEFAULT_UPSTREAM_LANGUAGE,
    DEFAULT_UPSTREAM_LISTEN_URL,
    UPSTREAM_HANDSHAKE_TIMEOUT_S,
    ENV_UPSTREAM_MAX_MESSAGE_BYTES,
    ENV_UPSTREAM_HANDSHAKE_TIMEOUT_S,
    DEFAULT_UPSTREAM_MAX_MESSAGE_BYTES,
)


def _str_env(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None:
        return default
    v = raw.strip()
    return v if v else default


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _bool_env(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _load_upstream_settings() -> UpstreamSettings:
    timeout_s = _float_env(ENV_UPSTREAM_HANDSHAKE_TIMEOUT_S, UPSTREAM_HANDSHAKE_TIMEOUT_S)
    if timeout_s <= 0:
        timeout_s = UPSTREAM_HANDSHAKE_TIMEOUT_S
    max_message_bytes = _int_env(ENV_UPSTREAM_MAX_MESSAGE_BYTES, DEFAULT_UPSTREAM_MAX_MESSAGE_BYTES)
    if max_message_bytes <= 0:
        max_message_bytes = DEFAULT_UPSTREAM_MAX_MESSAGE_BYTES

    return UpstreamSettings(
        # A missing key is not a startup error; stream sessions report it to the client.
        api_key=(os.getenv(ENV_TRANSCRIPTION_SERVICE_API_KEY) or "").strip(),
        listen_url=_str_env(ENV_UPSTREAM_LISTEN_URL, DEFAULT_UPSTREAM_LISTEN_URL),
        model=_str_env(ENV_UPSTREAM_MODEL, DEFAULT_UPSTREAM_MODEL),
        language=_str_env(ENV_UPSTREAM_LANGUAGE, DEFAULT_UPSTREAM_LANGUAGE),
        handshake_timeout_s=timeout_s,
        max_message_bytes=max_message_bytes,
        debug=_bool_env(ENV_UPSTREAM_DEBUG, False),
    )


def _load_websocket_settings() -> WebSocketSettings:
    interval_s = _float_env(ENV_WS_HEARTBEAT_INTERVAL_S, DEFAULT_WS_HEARTBEAT_INTERVAL_S)
    if interval_s <= 0:
        interval_s = DEFAULT_WS_HEARTBEAT_INTERVAL_S
    inbound_queue_max = _int_env(ENV_WS_INBOUND_QUEUE_MAX, DEFAULT_WS_INBOUND_QUEUE_MAX)
    if inbound_queue_max <= 0:
        inbound_queue_max = DEFAULT_WS_INBOUND_QUEUE_MAX
    return WebSocketSettings(heartbeat_interval_s=interval_s, inbound_queue_max=inbound_queue_max)


def _load_server_settings() -> ServerSettings:
    return ServerSettings(
        host=_str_env(ENV_HOST, DEFAULT_HOST),
        port=_int_env(ENV_PORT, DEFAULT_PORT),
    )


def load_settings() -> AppSettings:
    return AppSettings(
        upstream=_load_upstream_settings(),
        websocket=_load_websocket_settings(),
        server=_load_server_settings(),
    )


__all__ = ["load_settings"]
