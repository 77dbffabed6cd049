"""Process-wide registry of open client sessions."""

from __future__ import annotations

import logging
import contextlib

from relay.state.session import ClientSession
from relay.config.websocket import WS_CLOSE_GOING_AWAY_CODE, WS_CLOSE_SHUTDOWN_REASON

logger = logging.getLogger(__name__)


class SessionRegistry:
    """Sessions are added on connection open and removed on close.

    The registry never owns a session's connections; the only thing it does
    to them is the liveness sweep and shutdown termination.
    """

    def __init__(self) -> None:
        self._sessions: dict[str, ClientSession] = {}

    def add(self, session: ClientSession) -> None:
        self._sessions[session.session_id] = session

    def remove(self, session: ClientSession) -> None:
        self._sessions.pop(session.session_id, None)

    def snapshot(self) -> list[ClientSession]:
        return list(self._sessions.values())

    def get_session_count(self) -> int:
        return len(self._sessions)

    def __contains__(self, session: object) -> bool:
        return isinstance(session, ClientSession) and self._sessions.get(session.session_id) is session

    def __len__(self) -> int:
        return len(self._sessions)

    async def terminate_all(self) -> None:
        for session in self.snapshot():
            with contextlib.suppress(Exception):
                await session.terminate(code=WS_CLOSE_GOING_AWAY_CODE, reason=WS_CLOSE_SHUTDOWN_REASON)
        logger.info("registry: terminated remaining sessions")


__all__ = ["SessionRegistry"]
