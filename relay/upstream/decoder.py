"""Decode recognizer frames into transcript events."""

from __future__ import annotations

import logging
from typing import Any

import orjson

from relay.state.events import TranscriptEvent
from relay.config.upstream import UPSTREAM_RESULTS_TYPE

logger = logging.getLogger(__name__)


def _first_transcript(data: dict[str, Any]) -> str:
    channel = data.get("channel")
    if not isinstance(channel, dict):
        return ""
    alternatives = channel.get("alternatives")
    if not isinstance(alternatives, list) or not alternatives:
        return ""
    first = alternatives[0]
    if not isinstance(first, dict):
        return ""
    transcript = first.get("transcript")
    return transcript if isinstance(transcript, str) else ""


def decode_message(raw: str | bytes) -> TranscriptEvent | None:
    """Return the transcript carried by a results frame, or None for anything else.

    Malformed frames are logged and dropped; they never end the session.
    """
    try:
        data = orjson.loads(raw)
    except orjson.JSONDecodeError:
        logger.warning("upstream: dropping non-JSON frame (%d bytes)", len(raw))
        return None

    if not isinstance(data, dict):
        logger.warning("upstream: dropping non-object frame")
        return None

    if data.get("type") != UPSTREAM_RESULTS_TYPE:
        logger.debug("upstream: ignoring frame type=%s", data.get("type"))
        return None

    is_final = bool(data.get("is_final") or data.get("speech_final"))
    return TranscriptEvent(text=_first_transcript(data), is_final=is_final)


__all__ = ["decode_message"]
