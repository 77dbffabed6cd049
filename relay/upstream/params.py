"""Connection parameters for the streaming recognizer."""

from __future__ import annotations

from urllib.parse import urlencode

from relay.state.session import SessionParams
from relay.state.settings import UpstreamSettings
from relay.config.upstream import (
    UPSTREAM_CHANNELS,
    UPSTREAM_AUTH_HEADER,
    UPSTREAM_AUTH_SCHEME,
    UPSTREAM_FIXED_QUERY,
    UPSTREAM_ENCODING_OPUS,
    UPSTREAM_ENCODING_LINEAR16,
)


def _flag(value: bool) -> str:
    return "true" if value else "false"


def build_query_params(params: SessionParams, *, model: str, language: str) -> dict[str, str]:
    query: dict[str, str] = {
        "model": model,
        "language": language,
        # The relay applies its own spoken-punctuation pass unless the client opts in.
        "punctuate": _flag(params.punctuate),
    }
    query.update(UPSTREAM_FIXED_QUERY)
    query["encoding"] = UPSTREAM_ENCODING_LINEAR16 if params.is_pcm16 else UPSTREAM_ENCODING_OPUS
    query["sample_rate"] = str(params.sample_rate)
    query["channels"] = str(UPSTREAM_CHANNELS)
    return query


def build_listen_url(settings: UpstreamSettings, params: SessionParams) -> str:
    query = build_query_params(params, model=settings.model, language=settings.language)
    return f"{settings.listen_url}?{urlencode(query)}"


def build_auth_headers(api_key: str) -> list[tuple[str, str]]:
    return [(UPSTREAM_AUTH_HEADER, f"{UPSTREAM_AUTH_SCHEME} {api_key}")]


__all__ = ["build_auth_headers", "build_listen_url", "build_query_params"]
