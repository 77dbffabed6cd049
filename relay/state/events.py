"""Typed events flowing into a relay session from its two connections."""

from __future__ import annotations

from dataclasses import dataclass

from relay.text.punctuation import normalize


@dataclass(frozen=True, slots=True)
class TranscriptEvent:
    text: str
    is_final: bool

    @property
    def normalized_text(self) -> str:
        return normalize(self.text)

    @property
    def is_empty(self) -> bool:
        return not self.text.strip()


# Client leg


@dataclass(frozen=True, slots=True)
class ClientAudio:
    data: bytes


@dataclass(frozen=True, slots=True)
class ClientText:
    text: str


@dataclass(frozen=True, slots=True)
class ClientDisconnected:
    code: int


# Upstream leg


@dataclass(frozen=True, slots=True)
class UpstreamReady:
    pass


@dataclass(frozen=True, slots=True)
class UpstreamTranscript:
    event: TranscriptEvent


@dataclass(frozen=True, slots=True)
class UpstreamError:
    reason: str
    timed_out: bool = False


@dataclass(frozen=True, slots=True)
class UpstreamClosed:
    code: int | None
    reason: str


ClientFrame = ClientAudio | ClientText | ClientDisconnected
UpstreamEvent = UpstreamReady | UpstreamTranscript | UpstreamError | UpstreamClosed
RelayEvent = ClientFrame | UpstreamEvent

__all__ = [
    "ClientAudio",
    "ClientDisconnected",
    "ClientFrame",
    "ClientText",
    "RelayEvent",
    "TranscriptEvent",
    "UpstreamClosed",
    "UpstreamError",
    "UpstreamEvent",
    "UpstreamReady",
    "UpstreamTranscript",
]
