"""Stream-mode relay: pairs one client connection with one recognizer connection."""

from __future__ import annotations

import enum
import asyncio
import logging
import contextlib

from relay.state.session import ClientSession
from relay.errors import UpstreamConfigError
from relay.upstream.bridge import UpstreamBridge
from relay.upstream.session import UpstreamSession
from relay.config.websocket import (
    WS_CONTROL_FINISH,
    WS_CLOSE_NORMAL_CODE,
    DEFAULT_WS_INBOUND_QUEUE_MAX,
    WS_CLOSE_INTERNAL_ERROR_CODE,
)
from relay.state.events import (
    ClientText,
    RelayEvent,
    ClientFrame,
    ClientAudio,
    UpstreamError,
    UpstreamReady,
    UpstreamClosed,
    UpstreamTranscript,
    ClientDisconnected,
)

from .messages import build_done, build_error, build_ready, build_transcript

logger = logging.getLogger(__name__)

UPSTREAM_TIMEOUT_MESSAGE = "transcription service connection timeout"


class RelayState(enum.Enum):
    INIT = "init"
    AWAITING_UPSTREAM_READY = "awaiting_upstream_ready"
    RELAYING = "relaying"
    CLOSED = "closed"


class RelayCoordinator:
    """Drives one stream-mode session through INIT -> AWAITING_UPSTREAM_READY -> RELAYING -> CLOSED.

    Both legs report into a single mailbox, so client frames and recognizer
    events are handled one at a time and in arrival order. Closing either leg
    closes the other. At most ``queue_max`` audio frames wait in the mailbox;
    further frames are dropped until the backlog drains. Control and lifecycle
    events are never dropped.
    """

    def __init__(
        self,
        session: ClientSession,
        *,
        upstream_bridge: UpstreamBridge,
        queue_max: int = DEFAULT_WS_INBOUND_QUEUE_MAX,
    ) -> None:
        self._session = session
        self._client = session.connection
        self._bridge = upstream_bridge
        self._upstream: UpstreamSession | None = None
        self._mailbox: asyncio.Queue[RelayEvent] = asyncio.Queue()
        self._queue_max = queue_max
        self._audio_queued = 0
        self.state = RelayState.INIT
        self.frames_dropped = 0

    @property
    def upstream(self) -> UpstreamSession | None:
        return self._upstream

    async def run(self) -> None:
        try:
            self._upstream = self._bridge.new_session(self._session.params)
        except UpstreamConfigError as exc:
            logger.warning("relay[%s]: %s", self._session.session_id, exc)
            await self._client.send_message(build_error(str(exc)))
            await self._shutdown(code=WS_CLOSE_INTERNAL_ERROR_CODE, reason=str(exc))
            return

        self.state = RelayState.AWAITING_UPSTREAM_READY
        self._session.terminator = self.terminate
        self._upstream.start(self._mailbox.put_nowait)
        self._client.start(self._post_client_frame, touch=self._session.mark_alive)

        try:
            while self.state is not RelayState.CLOSED:
                event = await self._mailbox.get()
                await self._dispatch(event)
        finally:
            await self._shutdown(code=WS_CLOSE_NORMAL_CODE, reason="")

    def _post_client_frame(self, event: ClientFrame) -> None:
        if isinstance(event, ClientAudio):
            if self._audio_queued >= self._queue_max:
                self.frames_dropped += 1
                logger.debug("relay[%s]: mailbox full, dropping audio frame", self._session.session_id)
                return
            self._audio_queued += 1
        self._mailbox.put_nowait(event)

    async def terminate(self, code: int, reason: str) -> None:
        """Forced close from outside the session (liveness sweep, server shutdown)."""
        logger.info("relay[%s]: terminating (%s)", self._session.session_id, reason)
        await self._shutdown(code=code, reason=reason)

    async def _dispatch(self, event: RelayEvent) -> None:
        if isinstance(event, ClientAudio):
            self._audio_queued -= 1
            await self._on_client_audio(event)
        elif isinstance(event, ClientText):
            await self._on_client_text(event)
        elif isinstance(event, ClientDisconnected):
            logger.info("relay[%s]: client disconnected code=%s", self._session.session_id, event.code)
            await self._shutdown(code=event.code, reason="")
        elif isinstance(event, UpstreamReady):
            await self._on_upstream_ready()
        elif isinstance(event, UpstreamTranscript):
            await self._on_upstream_transcript(event)
        elif isinstance(event, UpstreamError):
            await self._on_upstream_error(event)
        elif isinstance(event, UpstreamClosed):
            await self._on_upstream_closed(event)

    async def _on_client_audio(self, event: ClientAudio) -> None:
        if self.state is RelayState.AWAITING_UPSTREAM_READY:
            self.frames_dropped += 1
            logger.debug("relay[%s]: dropping audio frame, upstream not ready", self._session.session_id)
            return
        if self.state is RelayState.RELAYING and self._upstream is not None:
            await self._upstream.send_audio(event.data)

    async def _on_client_text(self, event: ClientText) -> None:
        if event.text == WS_CONTROL_FINISH:
            logger.info("relay[%s]: finish requested; closing upstream", self._session.session_id)
            if self._upstream is not None:
                await self._upstream.close()
            return
        logger.info("relay[%s]: ignoring control text %r", self._session.session_id, event.text[:64])

    async def _on_upstream_ready(self) -> None:
        if self.state is not RelayState.AWAITING_UPSTREAM_READY:
            return
        self.state = RelayState.RELAYING
        await self._client.send_message(build_ready())
        logger.info("relay[%s]: relaying", self._session.session_id)

    async def _on_upstream_transcript(self, event: UpstreamTranscript) -> None:
        if self.state is not RelayState.RELAYING:
            return
        transcript = event.event
        if transcript.is_empty:
            return
        text = transcript.text if self._session.params.punctuate else transcript.normalized_text
        if not text or not text.strip():
            return
        await self._client.send_message(build_transcript(text, is_final=transcript.is_final))

    async def _on_upstream_error(self, event: UpstreamError) -> None:
        message = UPSTREAM_TIMEOUT_MESSAGE if event.timed_out else f"transcription service error: {event.reason}"
        await self._client.send_message(build_error(message))
        await self._shutdown(code=WS_CLOSE_INTERNAL_ERROR_CODE, reason="transcription service connection failed")

    async def _on_upstream_closed(self, event: UpstreamClosed) -> None:
        logger.info("relay[%s]: upstream closed code=%s", self._session.session_id, event.code)
        await self._client.send_message(build_done())
        await self._shutdown(code=WS_CLOSE_NORMAL_CODE, reason="")

    async def _shutdown(self, *, code: int, reason: str) -> None:
        """Tear down both legs: recognizer first, then the client. Idempotent."""
        if self.state is RelayState.CLOSED:
            return
        self.state = RelayState.CLOSED
        if self._upstream is not None:
            with contextlib.suppress(Exception):
                await self._upstream.close()
        await self._client.close(code=code, reason=reason)
        logger.info(
            "relay[%s]: closed (forwarded=%s dropped=%s)",
            self._session.session_id,
            self._upstream.frames_sent if self._upstream is not None else 0,
            self.frames_dropped,
        )


__all__ = ["RelayCoordinator", "RelayState"]
