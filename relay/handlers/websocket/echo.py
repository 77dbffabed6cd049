"""Echo mode: a connectivity self-test with no recognizer behind it."""

from __future__ import annotations

import asyncio
import logging

from relay.state.session import ClientSession
from relay.config.websocket import DEFAULT_WS_INBOUND_QUEUE_MAX
from relay.state.events import ClientText, ClientFrame, ClientDisconnected

from .messages import build_echo, build_welcome

logger = logging.getLogger(__name__)


async def run_echo_session(session: ClientSession, *, queue_max: int = DEFAULT_WS_INBOUND_QUEUE_MAX) -> None:
    conn = session.connection
    frames: asyncio.Queue[ClientFrame] = asyncio.Queue()
    pending = 0

    def post(frame: ClientFrame) -> None:
        nonlocal pending
        if isinstance(frame, ClientText):
            if pending >= queue_max:
                logger.debug("echo[%s]: backlog full, dropping text frame", session.session_id)
                return
            pending += 1
        frames.put_nowait(frame)

    await conn.send_message(build_welcome())
    conn.start(post, touch=session.mark_alive)

    while True:
        frame = await frames.get()
        if isinstance(frame, ClientDisconnected):
            logger.info("echo[%s]: closed code=%s", session.session_id, frame.code)
            return
        if isinstance(frame, ClientText):
            pending -= 1
            await conn.send_message(build_echo(frame.text))


__all__ = ["run_echo_session"]
