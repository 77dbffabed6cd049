from __future__ import annotations

import asyncio

import pytest

from relay.handlers.sweeper import LivenessSweeper
from relay.state.session import ClientSession, SessionParams
from relay.handlers.connections import SessionRegistry
from relay.handlers.websocket.echo import run_echo_session
from relay.handlers.websocket.client import ClientConnection
from relay.handlers.websocket.relay import RelayState, RelayCoordinator

from tests.fakes import FakeBridge, FakeUpstream, FakeClientWebSocket, wait_until


def _register(registry: SessionRegistry, params: SessionParams | None = None) -> tuple[FakeClientWebSocket, ClientSession]:
    ws = FakeClientWebSocket()
    session = ClientSession(connection=ClientConnection(ws), params=params or SessionParams())
    registry.add(session)
    return ws, session


async def _relaying_session(
    registry: SessionRegistry,
) -> tuple[FakeClientWebSocket, FakeUpstream, RelayCoordinator, asyncio.Task]:
    ws, session = _register(registry, SessionParams(mode="stream"))
    upstream = FakeUpstream()
    coordinator = RelayCoordinator(session, upstream_bridge=FakeBridge(upstream))
    task = asyncio.create_task(coordinator.run())
    await wait_until(lambda: upstream.emit is not None)
    upstream.become_ready()
    await wait_until(lambda: coordinator.state is RelayState.RELAYING)
    return ws, upstream, coordinator, task


def test_registry_add_remove() -> None:
    registry = SessionRegistry()
    _ws, session = _register(registry)

    assert session in registry
    assert registry.get_session_count() == 1
    registry.remove(session)
    registry.remove(session)
    assert len(registry) == 0
    assert session not in registry


@pytest.mark.asyncio
async def test_registry_terminate_all() -> None:
    registry = SessionRegistry()
    ws1, _ = _register(registry)
    ws2, _ = _register(registry)

    await registry.terminate_all()

    assert ws1.close_code == 1001
    assert ws2.close_code == 1001
    assert ws1.close_reason == "server shutting down"


@pytest.mark.asyncio
async def test_silent_client_with_live_transport_is_kept() -> None:
    registry = SessionRegistry()
    sweeper = LivenessSweeper(registry, interval_s=30.0)
    ws, session = _register(registry)
    echo = asyncio.create_task(run_echo_session(session))
    await wait_until(lambda: ws.sent_types() == ["welcome"])

    for _ in range(3):
        assert await sweeper.sweep() == 0

    assert session in registry
    assert session.alive is True
    assert ws.close_calls == 0
    assert ws.sent_types() == ["welcome"]

    ws.push_disconnect()
    await asyncio.wait_for(echo, timeout=1.0)


@pytest.mark.asyncio
async def test_dead_transport_is_terminated_on_next_sweep() -> None:
    registry = SessionRegistry()
    sweeper = LivenessSweeper(registry, interval_s=30.0)
    ws, session = _register(registry)

    ws.drop_transport()
    assert await sweeper.sweep() == 0
    assert session.alive is False
    assert ws.close_calls == 0

    assert await sweeper.sweep() == 1
    assert ws.close_code == 1001
    assert session not in registry
    assert ws.sent == []


@pytest.mark.asyncio
async def test_termination_closes_upstream_before_client() -> None:
    registry = SessionRegistry()
    sweeper = LivenessSweeper(registry, interval_s=30.0)
    ws, upstream, coordinator, task = await _relaying_session(registry)
    order: list[str] = []
    upstream_close = upstream.close
    client_close = ws.close

    async def record_upstream_close() -> None:
        order.append("upstream")
        await upstream_close()

    async def record_client_close(code: int = 1000, reason: str | None = None) -> None:
        order.append("client")
        await client_close(code=code, reason=reason)

    upstream.close = record_upstream_close
    ws.close = record_client_close

    ws.drop_transport()
    await sweeper.sweep()
    await sweeper.sweep()
    await asyncio.wait_for(task, timeout=1.0)

    assert order == ["upstream", "client"]
    assert coordinator.state is RelayState.CLOSED
    assert upstream.close_calls == 1
    assert ws.close_code == 1001


@pytest.mark.asyncio
async def test_shutdown_terminates_relay_upstream_first() -> None:
    registry = SessionRegistry()
    ws, upstream, coordinator, task = await _relaying_session(registry)
    client_closed_with_upstream_open: list[bool] = []
    client_close = ws.close

    async def record_client_close(code: int = 1000, reason: str | None = None) -> None:
        client_closed_with_upstream_open.append(upstream.close_calls == 0)
        await client_close(code=code, reason=reason)

    ws.close = record_client_close

    await registry.terminate_all()
    await asyncio.wait_for(task, timeout=1.0)

    assert client_closed_with_upstream_open == [False]
    assert ws.close_code == 1001
    assert ws.close_reason == "server shutting down"


@pytest.mark.asyncio
async def test_sweeper_loop_runs_until_stopped() -> None:
    registry = SessionRegistry()
    sweeper = LivenessSweeper(registry, interval_s=0.01)
    ws, _session = _register(registry)
    ws.drop_transport()

    sweeper.start()
    await asyncio.wait_for(ws.closed.wait(), timeout=1.0)
    await sweeper.stop()

    assert ws.close_code == 1001
    assert len(registry) == 0
