from __future__ import annotations

import json
import asyncio

import pytest
from websockets.protocol import State
from websockets.exceptions import ConnectionClosedError

from relay.errors import UpstreamConfigError
from relay.state.session import SessionParams
from relay.upstream.session import UpstreamSession
from relay.state.events import UpstreamError, UpstreamReady, UpstreamClosed, UpstreamTranscript

from tests.fakes import FakeConnector, wait_until, make_upstream_settings

STREAM = SessionParams(mode="stream", encoding="pcm16", sample_rate=16000)


def _results(transcript: str, *, is_final: bool = False) -> str:
    return json.dumps(
        {"type": "Results", "is_final": is_final, "channel": {"alternatives": [{"transcript": transcript}]}}
    )


def _session(connector: FakeConnector, **overrides) -> UpstreamSession:
    return UpstreamSession(settings=make_upstream_settings(**overrides), params=STREAM, connect_fn=connector)


def test_missing_api_key_never_connects() -> None:
    connector = FakeConnector()
    with pytest.raises(UpstreamConfigError):
        _session(connector, api_key="")
    assert connector.calls == []


@pytest.mark.asyncio
async def test_connect_passes_url_and_auth_header() -> None:
    connector = FakeConnector()
    events: list = []
    session = _session(connector, api_key="k1")
    session.start(events.append)
    await wait_until(lambda: session.ready)

    url, kwargs = connector.calls[0]
    assert url == session.url
    assert "encoding=linear16" in url
    assert kwargs["additional_headers"] == [("Authorization", "Token k1")]
    assert events == [UpstreamReady()]
    await session.close()


@pytest.mark.asyncio
async def test_handshake_timeout_reports_single_error() -> None:
    connector = FakeConnector(hang=True)
    events: list = []
    session = _session(connector, handshake_timeout_s=0.05)
    task = session.start(events.append)

    await asyncio.wait_for(task, timeout=1.0)

    assert len(events) == 1
    assert isinstance(events[0], UpstreamError)
    assert events[0].timed_out is True
    assert connector.cancelled is True
    assert session.ready is False


@pytest.mark.asyncio
async def test_connect_failure_reports_error() -> None:
    events: list = []

    async def refuse(url: str, **kwargs) -> None:
        raise OSError("connection refused")

    session = UpstreamSession(settings=make_upstream_settings(), params=STREAM, connect_fn=refuse)
    await asyncio.wait_for(session.start(events.append), timeout=1.0)

    assert events == [UpstreamError(reason="connection refused")]


@pytest.mark.asyncio
async def test_transcripts_are_emitted_in_order_and_bad_frames_dropped() -> None:
    connector = FakeConnector()
    events: list = []
    session = _session(connector)
    task = session.start(events.append)
    await wait_until(lambda: session.ready)

    connector.socket.feed(_results("first"))
    connector.socket.feed("{not json")
    connector.socket.feed(json.dumps({"type": "Metadata"}))
    connector.socket.feed(_results("second", is_final=True))
    connector.socket.remote_close(1000, "done")
    await asyncio.wait_for(task, timeout=1.0)

    transcripts = [e.event for e in events if isinstance(e, UpstreamTranscript)]
    assert [(t.text, t.is_final) for t in transcripts] == [("first", False), ("second", True)]
    assert events[-1] == UpstreamClosed(code=1000, reason="done")


@pytest.mark.asyncio
async def test_abnormal_close_is_reported_as_error() -> None:
    connector = FakeConnector()
    events: list = []
    session = _session(connector)
    task = session.start(events.append)
    await wait_until(lambda: session.ready)

    connector.socket.fail(ConnectionClosedError(None, None))
    await asyncio.wait_for(task, timeout=1.0)

    assert isinstance(events[-1], UpstreamError)
    assert not any(isinstance(e, UpstreamClosed) for e in events)


@pytest.mark.asyncio
async def test_send_audio_is_dropped_until_ready() -> None:
    connector = FakeConnector(hang=True)
    session = _session(connector)
    session.start(lambda _event: None)

    assert await session.send_audio(b"\x00\x01") is False
    assert connector.socket.sent == []
    await session.close()


@pytest.mark.asyncio
async def test_send_audio_forwards_bytes_while_open() -> None:
    connector = FakeConnector()
    session = _session(connector)
    session.start(lambda _event: None)
    await wait_until(lambda: session.ready)

    assert await session.send_audio(b"a") is True
    assert await session.send_audio(b"b") is True
    assert connector.socket.sent == [b"a", b"b"]
    assert session.frames_sent == 2

    connector.socket.state = State.CLOSING
    assert await session.send_audio(b"c") is False
    assert connector.socket.sent == [b"a", b"b"]
    await session.close()


@pytest.mark.asyncio
async def test_close_is_idempotent() -> None:
    connector = FakeConnector()
    events: list = []
    session = _session(connector)
    task = session.start(events.append)
    await wait_until(lambda: session.ready)

    await session.close()
    await session.close()
    await asyncio.wait_for(task, timeout=1.0)

    assert connector.socket.close_calls == 1
    assert sum(isinstance(e, UpstreamClosed) for e in events) == 1


@pytest.mark.asyncio
async def test_close_before_handshake_cancels_connect() -> None:
    connector = FakeConnector(hang=True)
    events: list = []
    session = _session(connector)
    session.start(events.append)
    await wait_until(lambda: bool(connector.calls))

    await session.close()

    assert connector.cancelled is True
    assert len(events) == 1
    assert isinstance(events[0], UpstreamClosed)


@pytest.mark.asyncio
async def test_close_does_not_swallow_cancellation_of_caller() -> None:
    connector = FakeConnector(hang=True)
    session = _session(connector)
    session.start(lambda _event: None)
    await wait_until(lambda: bool(connector.calls))

    closer = asyncio.create_task(session.close())
    await asyncio.sleep(0)
    closer.cancel()

    with pytest.raises(asyncio.CancelledError):
        await closer
    assert connector.cancelled is True
