"""Handshake query parsing for /ws connections."""

from __future__ import annotations

import logging
from urllib.parse import parse_qs, urlsplit

from relay.state.session import SessionParams
from relay.config.websocket import (
    WS_QUERY_MODE,
    WS_MODE_ECHO,
    WS_MODE_STREAM,
    WS_QUERY_ENCODING,
    WS_ENCODING_OPUS,
    WS_ENCODING_PCM16,
    WS_QUERY_PUNCTUATE,
    WS_QUERY_SAMPLE_RATE,
    DEFAULT_WS_SAMPLE_RATE,
)

logger = logging.getLogger(__name__)


def _first(query: dict[str, list[str]], key: str) -> str:
    values = query.get(key) or [""]
    return values[0].strip()


def _parse_sample_rate(raw: str) -> int:
    try:
        value = int(raw)
    except ValueError:
        return DEFAULT_WS_SAMPLE_RATE
    return value if value > 0 else DEFAULT_WS_SAMPLE_RATE


def parse_session_params(url: str) -> SessionParams:
    """Read mode/encoding/sample-rate/punctuation from a connection URL.

    Anything unparseable falls back to the defaults; a bad URL never rejects the connection.
    """
    try:
        query = parse_qs(urlsplit(url).query)
    except ValueError:
        logger.warning("ws: could not parse connection url %r; using defaults", url)
        return SessionParams()

    mode = WS_MODE_STREAM if _first(query, WS_QUERY_MODE) == WS_MODE_STREAM else WS_MODE_ECHO
    encoding = WS_ENCODING_PCM16 if _first(query, WS_QUERY_ENCODING) == WS_ENCODING_PCM16 else WS_ENCODING_OPUS
    return SessionParams(
        mode=mode,
        encoding=encoding,
        sample_rate=_parse_sample_rate(_first(query, WS_QUERY_SAMPLE_RATE)),
        punctuate=_first(query, WS_QUERY_PUNCTUATE) == "true",
    )


__all__ = ["parse_session_params"]
