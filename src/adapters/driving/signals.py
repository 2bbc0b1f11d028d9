"""Signal handling for graceful shutdown."""

import asyncio
import logging
import signal

__all__ = ["STOP_SIGNALS", "make_stop_on_sigterm"]

logger = logging.getLogger(__name__)

STOP_SIGNALS = (signal.SIGTERM, signal.SIGINT)


def make_stop_on_sigterm() -> asyncio.Future[str]:
    """Create a SIGTERM/SIGINT-based stop trigger.

    Registers handlers that resolve a future with the signal name, so
    the controller can await it next to the other stop triggers. The
    handlers are removed as soon as the future is done or cancelled, so a
    second Ctrl+C during shutdown interrupts as usual.

    On Docker/Kubernetes, SIGTERM is sent 30s before SIGKILL,
    allowing graceful shutdown.

    Returns:
        Future resolved with e.g. "SIGTERM" when a signal arrives.
    """
    loop = asyncio.get_running_loop()
    stop: asyncio.Future[str] = loop.create_future()

    def handle_signal(sig: signal.Signals) -> None:
        """Resolve the stop future on the first signal."""
        logger.info(f"{sig.name} received, initiating graceful shutdown...")
        if not stop.done():
            stop.set_result(sig.name)

    def restore_handlers(_: asyncio.Future[str]) -> None:
        """Give the signals back to their default behaviour once resolved or cancelled."""
        for sig in STOP_SIGNALS:
            loop.remove_signal_handler(sig)

    for sig in STOP_SIGNALS:
        loop.add_signal_handler(sig, handle_signal, sig)
    stop.add_done_callback(restore_handlers)

    return stop
