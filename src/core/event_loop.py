"""Scheduler loop that periodically dispatches the command request."""

import asyncio
import logging
from collections.abc import Awaitable, Callable

from src.core.errors import CoordinationError
from src.core.stop_signal import StopSignal
from src.ports.dispatch import DispatchOutcome
from src.ports.http import ExecRequest, HttpPort
from src.ports.settings import SettingsPort

__all__ = ["start_main_loop", "get_now_time"]

logger = logging.getLogger(__name__)


def get_now_time() -> float:
    """Get current monotonic time in seconds.

    Uses event loop's monotonic clock for accurate scheduling
    without wall-clock drift.

    Returns:
        Current time in seconds (monotonic).
    """
    return asyncio.get_running_loop().time()


async def start_main_loop(
    settings: SettingsPort,
    stop_signal: StopSignal,
    dispatch_fn: Callable[[HttpPort], Awaitable[DispatchOutcome]],
) -> int:
    """Run the scheduling loop until ``stop_signal`` is set.

    Every interval:
    1. Wait on the stop signal until the next tick is due.
    2. If stop was requested, exit without dispatching.
    3. Otherwise schedule the request as a background task (fire-and-forget).

    Args:
        settings: Runtime configuration (interval, endpoint, command).
        stop_signal: Shared signal the controller uses to end the loop.
        dispatch_fn: Async function used to send one request.

    Returns:
        Number of ticks dispatched.

    Raises:
        CoordinationError: If the stop signal becomes unusable. The loop
            stops instead of running unthrottled.

    Notes:
        - The loop never awaits individual requests: each send runs in its own
          asyncio.Task so that scheduling stays periodic even if the endpoint
          is slow or unresponsive.
        - On exit, dispatch tasks still in flight are cancelled and awaited.
    """
    loop = asyncio.get_running_loop()
    interval = settings.interval_sec
    pending: set[asyncio.Task[None]] = set()
    payload = ExecRequest.from_settings(settings).to_payload()
    next_tick: float = get_now_time() + interval
    tick = 0

    async def _run_once(req: HttpPort) -> None:
        """Run one request and log its outcome."""
        try:
            outcome = await dispatch_fn(req)
            if outcome.is_success:
                logger.info(f"Tick {req.tick}: {outcome}")
            else:
                logger.warning(f"Tick {req.tick}: {outcome}")
        except asyncio.CancelledError:
            logger.info(f"Tick {req.tick}: dispatch cancelled by shutdown.")
        except Exception as e:  # noqa: BLE001
            logger.error(f"Tick {req.tick}: unexpected error in send task: {e}", exc_info=True)
        finally:
            task = asyncio.current_task()
            if task is not None:
                pending.discard(task)

    try:
        while True:
            try:
                stopped = await stop_signal.wait(max(0.0, next_tick - get_now_time()))
            except CoordinationError as e:
                logger.error(f"Scheduler loop cannot observe stop requests, exiting: {e}")
                raise
            if stopped:
                break

            tick += 1
            request_args = HttpPort(
                tick=tick,
                ideal_time_sec=next_tick,
                url=settings.dst_url,
                payload=dict(payload),
            )

            # Fire and forget
            task: asyncio.Task[None] = loop.create_task(
                _run_once(request_args), name=f"dispatch-{tick}"
            )
            pending.add(task)

            # Realign rather than burst when more than one interval behind
            next_tick = max(next_tick + interval, get_now_time())
    finally:
        logger.info(f"Scheduler loop stopped after {tick} tick(s).")
        if pending:
            logger.debug(f"Cancelling {len(pending)} in-flight dispatch(es)")
            for pending_task in pending:
                pending_task.cancel()
            await asyncio.gather(*pending, return_exceptions=True)

    return tick
