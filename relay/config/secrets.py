"""Secrets configuration."""

from __future__ import annotations

ENV_TRANSCRIPTION_SERVICE_API_KEY = "TRANSCRIPTION_SERVICE_API_KEY"

__all__ = ["ENV_TRANSCRIPTION_SERVICE_API_KEY"]
