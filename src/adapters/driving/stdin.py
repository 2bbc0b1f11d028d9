"""Stop trigger fed by one line of standard input."""

import asyncio
import logging
import sys
import threading
from typing import TextIO

from src.core.errors import StopTriggerError

__all__ = ["read_stop_line"]

logger = logging.getLogger(__name__)


def read_stop_line(stream: TextIO | None = None) -> asyncio.Future[str]:
    """Read one line on a daemon thread and resolve a future with it.

    The blocking read never runs on the event loop, and a daemon thread
    does not keep the process alive if nobody ever presses [ENTER].

    Args:
        stream: Text stream to read from; defaults to ``sys.stdin``.

    Returns:
        Future resolved with "input received" or "end of input", or failed
        with StopTriggerError if the stream cannot be read.
    """
    loop = asyncio.get_running_loop()
    future: asyncio.Future[str] = loop.create_future()
    source = sys.stdin if stream is None else stream

    if source is None:
        future.set_exception(StopTriggerError("Unable to read stop trigger: no standard input"))
        return future

    def _settle(reason: str | None, error: StopTriggerError | None) -> None:
        if future.done():
            return
        if error is not None:
            future.set_exception(error)
        else:
            future.set_result(reason or "")

    def _reader() -> None:
        try:
            line = source.readline()
        except (OSError, ValueError) as e:
            reason, error = None, StopTriggerError(f"Unable to read into buffer: {e}")
        else:
            reason, error = ("input received" if line else "end of input"), None
        try:
            loop.call_soon_threadsafe(_settle, reason, error)
        except RuntimeError:
            logger.debug("Event loop closed before the stop line was read")

    threading.Thread(target=_reader, name="stop-trigger-reader", daemon=True).start()
    return future
