"""Controller: runs the scheduler loop until a stop trigger fires."""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable

from src.core.errors import CoordinationError, StopTriggerError
from src.core.event_loop import start_main_loop
from src.core.stop_signal import StopSignal
from src.ports.dispatch import DispatchOutcome
from src.ports.http import HttpPort
from src.ports.settings import SettingsPort

__all__ = ["run_controller"]

logger = logging.getLogger(__name__)


async def run_controller(
    settings: SettingsPort,
    stop_signal: StopSignal,
    dispatch_fn: Callable[[HttpPort], Awaitable[DispatchOutcome]],
    stop_triggers: Iterable[asyncio.Future[str]],
) -> bool:
    """Start the scheduler loop and stop it when any trigger fires.

    Whatever ends the wait (a trigger, a failing trigger, the loop dying
    on its own, or this coroutine being cancelled), stop is signalled and
    the loop is joined before returning.

    Args:
        settings: Runtime settings shared with the loop.
        stop_signal: Signal shared with the loop.
        dispatch_fn: Async function used by the loop to send each request.
        stop_triggers: Futures resolving with a short reason when stop is
            requested, or failing with StopTriggerError.

    Returns:
        True if the loop terminated cleanly, False if it failed or had to
        be cancelled.

    Raises:
        StopTriggerError: If a trigger failed. Raised after the loop has
            been stopped and joined.
    """
    worker = asyncio.create_task(
        start_main_loop(settings, stop_signal, dispatch_fn), name="scheduler-loop"
    )
    triggers = set(stop_triggers)
    trigger_error: StopTriggerError | None = None

    try:
        done, _ = await asyncio.wait({worker, *triggers}, return_when=asyncio.FIRST_COMPLETED)
        for trigger in done & triggers:
            try:
                logger.info(f"Stop requested: {trigger.result()}")
            except StopTriggerError as e:
                trigger_error = e
        if worker in done:
            logger.warning("Scheduler loop ended before any stop request.")
    finally:
        for trigger in triggers:
            if not trigger.done():
                trigger.cancel()
        clean = await _stop_and_join(worker, stop_signal)

    if trigger_error is not None:
        raise trigger_error
    return clean


async def _stop_and_join(worker: asyncio.Task[int], stop_signal: StopSignal) -> bool:
    logger.info("Terminating...")
    try:
        await stop_signal.signal_stop()
    except CoordinationError as e:
        logger.error(f"Unable to signal the scheduler loop, cancelling it: {e}")
        worker.cancel()

    logger.info("Waiting for scheduler loop to terminate...")
    await asyncio.wait({worker})

    if worker.cancelled():
        logger.error("Scheduler loop was cancelled.")
        return False
    exc = worker.exception()
    if exc is not None:
        logger.error(f"Error joining scheduler loop: {exc}")
        return False

    logger.info(f"Scheduler loop terminated after {worker.result()} tick(s).")
    return True
