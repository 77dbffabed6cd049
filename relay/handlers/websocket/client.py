"""Client leg of a /ws session: framing, sends, transport health and close."""

from __future__ import annotations

import asyncio
import logging
import contextlib
from typing import Any
from collections.abc import Callable

import orjson
from fastapi import WebSocketDisconnect
from fastapi.websockets import WebSocketState

from relay.config.websocket import WS_CLOSE_NORMAL_CODE
from relay.state.events import ClientText, ClientAudio, ClientFrame, ClientDisconnected

logger = logging.getLogger(__name__)

EmitFn = Callable[[ClientFrame], None]


class ClientConnection:
    """Wraps one accepted client websocket.

    Binary and text frames are told apart at the transport level and reported
    through the ``emit`` callback given to :meth:`start`. A single
    ``ClientDisconnected`` is always emitted last, whether the peer went away
    or the server closed the socket.
    """

    def __init__(self, ws: Any) -> None:
        self._ws = ws
        self._emit: EmitFn | None = None
        self._touch: Callable[[], None] | None = None
        self._reader: asyncio.Task | None = None
        self._closed = False
        self._disconnect_reported = False

    @property
    def closed(self) -> bool:
        return self._closed

    def start(self, emit: EmitFn, *, touch: Callable[[], None] | None = None) -> asyncio.Task:
        self._emit = emit
        self._touch = touch
        if self._reader is None:
            self._reader = asyncio.create_task(self._read_loop())
        return self._reader

    def _report_disconnect(self, code: int) -> None:
        if self._disconnect_reported:
            return
        self._disconnect_reported = True
        if self._emit is not None:
            self._emit(ClientDisconnected(code=code))

    async def _read_loop(self) -> None:
        code = WS_CLOSE_NORMAL_CODE
        try:
            while True:
                message = await self._ws.receive()
                if message.get("type") == "websocket.disconnect":
                    code = int(message.get("code") or WS_CLOSE_NORMAL_CODE)
                    break

                if self._touch is not None:
                    self._touch()

                data = message.get("bytes")
                if data is not None:
                    self._emit(ClientAudio(data=data))
                    continue
                text = message.get("text")
                if text is not None:
                    self._emit(ClientText(text=text))
        except asyncio.CancelledError:
            raise
        except WebSocketDisconnect as exc:
            code = exc.code
        except Exception:
            logger.debug("client: receive failed", exc_info=True)

        # The peer is gone; there is nothing left to close on our side.
        self._closed = True
        self._report_disconnect(code)

    async def send_message(self, payload: dict[str, Any]) -> bool:
        if self._closed:
            return False
        try:
            await self._ws.send_text(orjson.dumps(payload).decode("utf-8"))
        except WebSocketDisconnect:
            return False
        except Exception:
            logger.debug("client: send failed", exc_info=True)
            return False
        return True

    async def probe(self) -> bool:
        """Report whether the transport is still connected.

        Protocol-level ping/pong is run by the ASGI server (uvicorn's
        ``ws_ping_interval``/``ws_ping_timeout``); a peer that stops answering
        is dropped there and shows up here as a disconnected socket.
        """
        if self._closed:
            return False
        return self._ws.client_state is WebSocketState.CONNECTED

    async def _stop_reader(self) -> None:
        task = self._reader
        if task is None or task.done() or task is asyncio.current_task():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            current = asyncio.current_task()
            if current is not None and current.cancelling():
                raise

    async def close(self, *, code: int = WS_CLOSE_NORMAL_CODE, reason: str = "") -> None:
        """Close the client socket. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        await self._stop_reader()
        self._report_disconnect(code)
        with contextlib.suppress(Exception):
            await self._ws.close(code=code, reason=reason)


__all__ = ["ClientConnection"]
