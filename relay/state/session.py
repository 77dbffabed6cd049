"""Per-connection client session state."""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING
from collections.abc import Callable, Awaitable
from dataclasses import field, dataclass

from relay.config.websocket import (
    WS_MODE_STREAM,
    DEFAULT_WS_MODE,
    WS_ENCODING_PCM16,
    WS_CLOSE_GOING_AWAY_CODE,
    WS_CLOSE_GOING_AWAY_REASON,
    DEFAULT_WS_ENCODING,
    DEFAULT_WS_SAMPLE_RATE,
)

if TYPE_CHECKING:
    from relay.handlers.websocket.client import ClientConnection


@dataclass(frozen=True, slots=True)
class SessionParams:
    """Handshake parameters, fixed for the lifetime of a session."""

    mode: str = DEFAULT_WS_MODE
    encoding: str = DEFAULT_WS_ENCODING
    sample_rate: int = DEFAULT_WS_SAMPLE_RATE
    punctuate: bool = False

    @property
    def is_stream(self) -> bool:
        return self.mode == WS_MODE_STREAM

    @property
    def is_pcm16(self) -> bool:
        return self.encoding == WS_ENCODING_PCM16


@dataclass(slots=True, eq=False)
class ClientSession:
    """One open client connection.

    ``terminator`` is set by whatever owns the session's other resources (the
    stream relay) so that forced termination tears those down before the
    client socket. Without one, termination just closes the socket.
    """

    connection: ClientConnection
    params: SessionParams
    session_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    alive: bool = True
    terminator: Callable[[int, str], Awaitable[None]] | None = None

    def mark_alive(self) -> None:
        self.alive = True

    async def terminate(
        self,
        *,
        code: int = WS_CLOSE_GOING_AWAY_CODE,
        reason: str = WS_CLOSE_GOING_AWAY_REASON,
    ) -> None:
        if self.terminator is not None:
            await self.terminator(code, reason)
            return
        await self.connection.close(code=code, reason=reason)


__all__ = ["ClientSession", "SessionParams"]
