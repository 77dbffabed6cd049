"""Streaming recognizer connection settings (env names and defaults)."""

from __future__ import annotations

ENV_UPSTREAM_LISTEN_URL = "UPSTREAM_LISTEN_URL"
ENV_UPSTREAM_MODEL = "UPSTREAM_MODEL"
ENV_UPSTREAM_LANGUAGE = "UPSTREAM_LANGUAGE"
ENV_UPSTREAM_HANDSHAKE_TIMEOUT_S = "UPSTREAM_HANDSHAKE_TIMEOUT_S"
ENV_UPSTREAM_MAX_MESSAGE_BYTES = "UPSTREAM_MAX_MESSAGE_BYTES"
ENV_UPSTREAM_DEBUG = "UPSTREAM_DEBUG"

DEFAULT_UPSTREAM_LISTEN_URL = "wss://api.transcriptionservice.com/v1/listen"
DEFAULT_UPSTREAM_MODEL = "nova-2-medical"
DEFAULT_UPSTREAM_LANGUAGE = "en-US"
DEFAULT_UPSTREAM_MAX_MESSAGE_BYTES = 16 * 1024 * 1024

UPSTREAM_HANDSHAKE_TIMEOUT_S = 5.0

# Recognizer-side encodings
UPSTREAM_ENCODING_LINEAR16 = "linear16"
UPSTREAM_ENCODING_OPUS = "opus"
UPSTREAM_CHANNELS = 1

# Milliseconds of silence before the recognizer ends an utterance.
UPSTREAM_ENDPOINTING_MS = 300
UPSTREAM_VAD_TURNOFF_MS = 200

# Result frames carry this "type"; everything else (metadata, speech events) is ignored.
UPSTREAM_RESULTS_TYPE = "Results"

# Fixed query flags sent on every connection. Booleans are serialized as "true"/"false".
UPSTREAM_FIXED_QUERY: dict[str, str] = {
    "interim_results": "true",
    "smart_format": "false",
    "profanity_filter": "false",
    "redact": "false",
    "diarize": "false",
    "multichannel": "false",
    "alternatives": "1",
    "numerals": "true",
    "endpointing": str(UPSTREAM_ENDPOINTING_MS),
    "vad_turnoff": str(UPSTREAM_VAD_TURNOFF_MS),
    "utterances": "true",
}

UPSTREAM_AUTH_HEADER = "Authorization"
UPSTREAM_AUTH_SCHEME = "Token"

__all__ = [
    "ENV_UPSTREAM_LISTEN_URL",
    "ENV_UPSTREAM_MODEL",
    "ENV_UPSTREAM_LANGUAGE",
    "ENV_UPSTREAM_HANDSHAKE_TIMEOUT_S",
    "ENV_UPSTREAM_MAX_MESSAGE_BYTES",
    "ENV_UPSTREAM_DEBUG",
    "DEFAULT_UPSTREAM_LISTEN_URL",
    "DEFAULT_UPSTREAM_MODEL",
    "DEFAULT_UPSTREAM_LANGUAGE",
    "DEFAULT_UPSTREAM_MAX_MESSAGE_BYTES",
    "UPSTREAM_HANDSHAKE_TIMEOUT_S",
    "UPSTREAM_ENCODING_LINEAR16",
    "UPSTREAM_ENCODING_OPUS",
    "UPSTREAM_CHANNELS",
    "UPSTREAM_ENDPOINTING_MS",
    "UPSTREAM_VAD_TURNOFF_MS",
    "UPSTREAM_RESULTS_TYPE",
    "UPSTREAM_FIXED_QUERY",
    "UPSTREAM_AUTH_HEADER",
    "UPSTREAM_AUTH_SCHEME",
]
