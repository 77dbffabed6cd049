"""Periodic liveness sweep over all registered client sessions."""

from __future__ import annotations

import asyncio
import logging
import contextlib

from relay.config.websocket import DEFAULT_WS_HEARTBEAT_INTERVAL_S

from .connections import SessionRegistry

logger = logging.getLogger(__name__)


class LivenessSweeper:
    """Every tick: terminate sessions that failed the last probe, probe the rest.

    The probe asks the client connection whether its transport is still up;
    protocol ping/pong itself is run by the ASGI server. A session is
    terminated one tick after its transport is found dead. Termination goes
    through the session, so a stream relay closes its recognizer connection
    before the client socket.
    """

    def __init__(self, registry: SessionRegistry, *, interval_s: float | None = None) -> None:
        self._registry = registry
        self._interval_s = float(DEFAULT_WS_HEARTBEAT_INTERVAL_S if interval_s is None else interval_s)
        self._stop_event = asyncio.Event()
        self._task: asyncio.Task | None = None

    @property
    def interval_s(self) -> float:
        return self._interval_s

    def start(self) -> asyncio.Task:
        if self._task is None:
            self._stop_event.clear()
            self._task = asyncio.create_task(self._sweep_loop())
        return self._task

    async def stop(self) -> None:
        self._stop_event.set()
        if self._task is None:
            return
        task, self._task = self._task, None
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            current = asyncio.current_task()
            if current is not None and current.cancelling():
                raise

    async def sweep(self) -> int:
        """Run one pass. Returns the number of sessions terminated."""
        terminated = 0
        for session in self._registry.snapshot():
            if not session.alive:
                logger.info("sweeper: terminating unresponsive session %s", session.session_id)
                with contextlib.suppress(Exception):
                    await session.terminate()
                self._registry.remove(session)
                terminated += 1
                continue
            session.alive = False
            if await session.connection.probe():
                session.mark_alive()
            else:
                logger.info("sweeper: session %s transport is down", session.session_id)
        return terminated

    async def _sweep_loop(self) -> None:
        try:
            while not self._stop_event.is_set():
                await asyncio.sleep(self._interval_s)
                if self._stop_event.is_set():
                    break
                try:
                    await self.sweep()
                except Exception:
                    logger.exception("sweeper: sweep failed")
        except asyncio.CancelledError:
            return


__all__ = ["LivenessSweeper"]
