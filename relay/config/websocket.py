"""Client-facing WebSocket protocol configuration and constants."""

from __future__ import annotations

WS_ENDPOINT_PATH = "/ws"

# Handshake query parameters
WS_QUERY_MODE = "mode"
WS_QUERY_ENCODING = "enc"
WS_QUERY_SAMPLE_RATE = "sr"
WS_QUERY_PUNCTUATE = "punct"

WS_MODE_ECHO = "echo"
WS_MODE_STREAM = "stream"

WS_ENCODING_OPUS = "opus"
WS_ENCODING_PCM16 = "pcm16"

DEFAULT_WS_MODE = WS_MODE_ECHO
DEFAULT_WS_ENCODING = WS_ENCODING_OPUS
DEFAULT_WS_SAMPLE_RATE = 48000

# Server -> client message types (JSON text frames keyed by "type")
WS_KEY_TYPE = "type"
WS_MSG_WELCOME = "welcome"
WS_MSG_ECHO = "echo"
WS_MSG_READY = "ready"
WS_MSG_TRANSCRIPT = "transcript"
WS_MSG_ERROR = "error"
WS_MSG_DONE = "done"

WS_WELCOME_TEXT = "Hello from WS backend"

# Client -> server control text frames
WS_CONTROL_FINISH = "FINISH"

# Close codes
WS_CLOSE_NORMAL_CODE = 1000
WS_CLOSE_GOING_AWAY_CODE = 1001
WS_CLOSE_INTERNAL_ERROR_CODE = 1011

WS_CLOSE_GOING_AWAY_REASON = "transport unresponsive"
WS_CLOSE_SHUTDOWN_REASON = "server shutting down"

# Liveness sweeper
ENV_WS_HEARTBEAT_INTERVAL_S = "WS_HEARTBEAT_INTERVAL_S"
DEFAULT_WS_HEARTBEAT_INTERVAL_S = 30.0

# Audio frames waiting in a session mailbox; further frames are dropped
ENV_WS_INBOUND_QUEUE_MAX = "WS_INBOUND_QUEUE_MAX"
DEFAULT_WS_INBOUND_QUEUE_MAX = 256

__all__ = [
    "WS_ENDPOINT_PATH",
    "WS_QUERY_MODE",
    "WS_QUERY_ENCODING",
    "WS_QUERY_SAMPLE_RATE",
    "WS_QUERY_PUNCTUATE",
    "WS_MODE_ECHO",
    "WS_MODE_STREAM",
    "WS_ENCODING_OPUS",
    "WS_ENCODING_PCM16",
    "DEFAULT_WS_MODE",
    "DEFAULT_WS_ENCODING",
    "DEFAULT_WS_SAMPLE_RATE",
    "WS_KEY_TYPE",
    "WS_MSG_WELCOME",
    "WS_MSG_ECHO",
    "WS_MSG_READY",
    "WS_MSG_TRANSCRIPT",
    "WS_MSG_ERROR",
    "WS_MSG_DONE",
    "WS_WELCOME_TEXT",
    "WS_CONTROL_FINISH",
    "WS_CLOSE_NORMAL_CODE",
    "WS_CLOSE_GOING_AWAY_CODE",
    "WS_CLOSE_INTERNAL_ERROR_CODE",
    "WS_CLOSE_GOING_AWAY_REASON",
    "WS_CLOSE_SHUTDOWN_REASON",
    "ENV_WS_HEARTBEAT_INTERVAL_S",
    "DEFAULT_WS_HEARTBEAT_INTERVAL_S",
    "ENV_WS_INBOUND_QUEUE_MAX",
    "DEFAULT_WS_INBOUND_QUEUE_MAX",
]
