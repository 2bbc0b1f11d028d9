"""Tests for the scheduler loop."""

import asyncio
from unittest.mock import AsyncMock, patch

import pytest

from src.core.errors import CoordinationError
from src.core.event_loop import start_main_loop
from src.core.stop_signal import StopSignal
from src.ports.dispatch import DispatchOutcome
from src.ports.http import HttpPort
from src.ports.settings import SettingsPort

__all__ = []


def make_settings(interval_ms: int = 50) -> SettingsPort:
    return SettingsPort(
        caller_name="caller",
        cmd_id_regex=".+",
        cmd="echo hi",
        dst_url="http://test/cmd",
        interval_ms=interval_ms,
    )


def make_dispatch() -> AsyncMock:
    return AsyncMock(return_value=DispatchOutcome.success("ok"))


async def run_for(seconds: float, settings: SettingsPort, dispatch_fn) -> int:
    """Run the loop for ``seconds`` then stop it and return its tick count."""
    stop_signal = StopSignal()
    loop_task = asyncio.create_task(start_main_loop(settings, stop_signal, dispatch_fn))
    await asyncio.sleep(seconds)
    await stop_signal.signal_stop()
    return await asyncio.wait_for(loop_task, timeout=1.0)


@pytest.mark.asyncio
async def test_event_loop_dispatches_once_per_interval() -> None:
    """Running 220ms at a 50ms interval should dispatch about four times."""
    dispatch = make_dispatch()

    ticks = await run_for(0.22, make_settings(interval_ms=50), dispatch)

    assert 3 <= ticks <= 5
    assert dispatch.call_count == ticks


@pytest.mark.asyncio
async def test_event_loop_sends_exec_request_payload() -> None:
    """Each dispatch should carry the command payload for the destination."""
    dispatch = make_dispatch()

    await run_for(0.08, make_settings(interval_ms=50), dispatch)

    req = dispatch.call_args[0][0]
    assert isinstance(req, HttpPort)
    assert req.tick == 1
    assert req.url == "http://test/cmd"
    assert req.payload == {"id": "caller", "cmdIdRe": ".+", "cmd": "echo hi"}


@pytest.mark.asyncio
async def test_event_loop_no_dispatch_when_stopped_before_first_tick() -> None:
    """Stopping before the first interval elapses should dispatch nothing."""
    dispatch = make_dispatch()
    loop = asyncio.get_running_loop()
    started = loop.time()

    ticks = await run_for(0.02, make_settings(interval_ms=5_000), dispatch)

    assert ticks == 0
    dispatch.assert_not_called()
    assert loop.time() - started < 1.0


@pytest.mark.asyncio
async def test_event_loop_no_dispatch_after_stop() -> None:
    """No tick may be dispatched once the loop has observed stop."""
    dispatch = make_dispatch()

    ticks = await run_for(0.12, make_settings(interval_ms=20), dispatch)
    calls_at_stop = dispatch.call_count
    await asyncio.sleep(0.1)

    assert dispatch.call_count == calls_at_stop == ticks


@pytest.mark.asyncio
async def test_event_loop_stop_wins_over_due_tick() -> None:
    """A tick that is due when stop is observed must not be dispatched."""
    dispatch = make_dispatch()
    stop_signal = StopSignal()

    async def stop_exactly_when_due(timeout_sec: float) -> bool:
        # The timeout has expired and stop was set in the same instant
        await StopSignal.signal_stop(stop_signal)
        return await StopSignal.wait(stop_signal, 0)

    with patch.object(stop_signal, "wait", stop_exactly_when_due):
        ticks = await start_main_loop(make_settings(interval_ms=1), stop_signal, dispatch)

    assert ticks == 0
    dispatch.assert_not_called()


@pytest.mark.asyncio
async def test_event_loop_tick_not_delayed_by_hung_dispatch() -> None:
    """A dispatch that never returns should not hold back the next tick."""
    never = asyncio.Event()

    async def hung_dispatch(req: HttpPort) -> DispatchOutcome:
        await never.wait()
        return DispatchOutcome.success("")

    dispatch = AsyncMock(side_effect=hung_dispatch)

    ticks = await run_for(0.22, make_settings(interval_ms=50), dispatch)

    assert 3 <= ticks <= 5
    assert dispatch.call_count == ticks


@pytest.mark.asyncio
async def test_event_loop_cancels_in_flight_dispatches_on_stop() -> None:
    """Dispatch tasks still running at shutdown should be cancelled."""
    cancelled = []

    async def hung_dispatch(req: HttpPort) -> DispatchOutcome:
        try:
            await asyncio.sleep(60)
        except asyncio.CancelledError:
            cancelled.append(req.tick)
            raise
        return DispatchOutcome.success("")

    ticks = await run_for(0.12, make_settings(interval_ms=50), hung_dispatch)

    assert sorted(cancelled) == list(range(1, ticks + 1))


@pytest.mark.asyncio
async def test_event_loop_handles_dispatch_errors_gracefully() -> None:
    """A dispatch that raises should not stop the loop."""
    dispatch = AsyncMock(side_effect=RuntimeError("Connection failed"))

    ticks = await run_for(0.12, make_settings(interval_ms=20), dispatch)

    assert ticks >= 3
    assert dispatch.call_count == ticks


@pytest.mark.asyncio
async def test_event_loop_stops_on_coordination_failure() -> None:
    """A broken stop signal should end the loop instead of spinning."""
    dispatch = make_dispatch()
    stop_signal = StopSignal()

    with patch.object(
        stop_signal, "wait", AsyncMock(side_effect=CoordinationError("lock is broken"))
    ):
        with pytest.raises(CoordinationError):
            await start_main_loop(make_settings(), stop_signal, dispatch)

    dispatch.assert_not_called()
