"""One connection to the streaming recognizer, owned by a single relay session."""

from __future__ import annotations

import asyncio
import logging
import contextlib
from typing import Any
from collections.abc import Callable

import websockets
from websockets.protocol import State
from websockets.exceptions import ConnectionClosedError

from relay.state.session import SessionParams
from relay.state.settings import UpstreamSettings
from relay.config.websocket import WS_CLOSE_NORMAL_CODE
from relay.errors import UpstreamConfigError, UpstreamTimeoutError
from relay.state.events import (
    UpstreamError,
    UpstreamReady,
    UpstreamEvent,
    UpstreamClosed,
    UpstreamTranscript,
)

from .decoder import decode_message
from .params import build_listen_url, build_auth_headers

logger = logging.getLogger(__name__)

EmitFn = Callable[[UpstreamEvent], None]
ConnectFn = Callable[..., Any]


class UpstreamSession:
    """Recognizer leg of a relay session.

    Events are reported through the ``emit`` callback passed to :meth:`start`:
    ``UpstreamReady`` once the handshake completes, ``UpstreamTranscript`` per
    results frame, then exactly one of ``UpstreamError`` or ``UpstreamClosed``.
    """

    def __init__(
        self,
        *,
        settings: UpstreamSettings,
        params: SessionParams,
        connect_fn: ConnectFn | None = None,
    ) -> None:
        if not settings.api_key:
            raise UpstreamConfigError()
        self._settings = settings
        self._params = params
        self._url = build_listen_url(settings, params)
        self._headers = build_auth_headers(settings.api_key)
        self._connect_fn = connect_fn or websockets.connect

        self._ws: Any = None
        self._task: asyncio.Task | None = None
        self._closing = False
        self.ready = False
        self.frames_sent = 0

    @property
    def url(self) -> str:
        return self._url

    def start(self, emit: EmitFn) -> asyncio.Task:
        if self._task is None:
            self._task = asyncio.create_task(self._run(emit))
        return self._task

    async def _open(self) -> Any:
        timeout_s = self._settings.handshake_timeout_s
        try:
            return await asyncio.wait_for(
                self._connect_fn(
                    self._url,
                    additional_headers=self._headers,
                    max_size=self._settings.max_message_bytes,
                    compression=None,
                ),
                timeout=timeout_s,
            )
        except TimeoutError as exc:
            raise UpstreamTimeoutError(timeout_s=timeout_s) from exc

    async def _run(self, emit: EmitFn) -> None:
        logger.info(
            "upstream: connecting model=%s encoding=%s sample_rate=%s",
            self._settings.model,
            self._params.encoding,
            self._params.sample_rate,
        )
        try:
            self._ws = await self._open()
        except asyncio.CancelledError:
            emit(UpstreamClosed(code=WS_CLOSE_NORMAL_CODE, reason="closed before handshake completed"))
            raise
        except UpstreamTimeoutError as exc:
            logger.error("upstream: %s", exc)
            emit(UpstreamError(reason=str(exc), timed_out=True))
            return
        except Exception as exc:
            logger.error("upstream: connection failed: %s", exc)
            emit(UpstreamError(reason=str(exc) or type(exc).__name__))
            return

        if self._closing:
            # close() ran while the handshake was finishing.
            await self._close_ws()
            emit(UpstreamClosed(code=WS_CLOSE_NORMAL_CODE, reason="closed before handshake completed"))
            return

        self.ready = True
        logger.info("upstream: connection open")
        emit(UpstreamReady())

        try:
            async for message in self._ws:
                event = decode_message(message)
                if event is None:
                    continue
                if self._settings.debug:
                    logger.debug(
                        "upstream: transcript (%s): %s", "final" if event.is_final else "interim", event.text
                    )
                emit(UpstreamTranscript(event))
        except ConnectionClosedError as exc:
            logger.error("upstream: connection lost: %s", exc)
            emit(UpstreamError(reason=str(exc)))
            return
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            logger.exception("upstream: receive loop failed")
            emit(UpstreamError(reason=str(exc) or type(exc).__name__))
            return
        finally:
            self.ready = False

        code = getattr(self._ws, "close_code", None)
        reason = getattr(self._ws, "close_reason", None) or ""
        logger.info("upstream: connection closed code=%s reason=%s", code, reason)
        emit(UpstreamClosed(code=code, reason=reason))

    def is_open(self) -> bool:
        return self._ws is not None and getattr(self._ws, "state", None) is State.OPEN

    async def send_audio(self, chunk: bytes) -> bool:
        """Forward one audio frame. Frames are dropped, never queued, unless the socket is open."""
        if not self.ready:
            if self._settings.debug:
                logger.debug("upstream: dropping %d bytes, not ready", len(chunk))
            return False
        if not self.is_open():
            logger.warning("upstream: socket not open (state=%s); dropping audio", getattr(self._ws, "state", None))
            return False
        try:
            await self._ws.send(chunk)
        except Exception:
            logger.warning("upstream: audio send failed", exc_info=True)
            return False
        self.frames_sent += 1
        if self._settings.debug:
            logger.debug("upstream: forwarded audio chunk size=%d", len(chunk))
        return True

    async def _close_ws(self) -> None:
        if self._ws is None:
            return
        with contextlib.suppress(Exception):
            await self._ws.close()

    async def close(self) -> None:
        """Close the recognizer connection. Safe to call more than once."""
        if self._closing:
            return
        self._closing = True
        if self._ws is None:
            if self._task is not None and not self._task.done():
                self._task.cancel()
                try:
                    await self._task
                except asyncio.CancelledError:
                    # Only the handshake task was cancelled; a cancel aimed at the caller propagates.
                    current = asyncio.current_task()
                    if current is not None and current.cancelling():
                        raise
            return
        logger.info("upstream: closing connection")
        await self._close_ws()


__all__ = ["UpstreamSession"]
