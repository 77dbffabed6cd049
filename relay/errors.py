"""Shared error types for the transcription relay."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class UpstreamConfigError(Exception):
    """Raised when a recognizer session is requested without an API key."""

    message: str = "transcription service API key not configured"

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True, slots=True)
class UpstreamTimeoutError(Exception):
    """Raised when the recognizer handshake does not complete in time."""

    timeout_s: float

    def __str__(self) -> str:
        return f"transcription service connection timeout after {self.timeout_s:g}s"


__all__ = ["UpstreamConfigError", "UpstreamTimeoutError"]
