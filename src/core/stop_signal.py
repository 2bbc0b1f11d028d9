"""Interruptible wait shared by the controller and the scheduler loop."""

import asyncio
import logging

from src.core.errors import CoordinationError

__all__ = ["StopSignal"]

logger = logging.getLogger(__name__)


class StopSignal:
    """One-shot stop flag guarded by its own condition.

    ``stopped`` only ever goes from False to True. Waiters re-check the
    flag under the lock after every wakeup, so a stop request is seen
    either by the current ``wait`` or by the next one.
    """

    def __init__(self) -> None:
        self._stopped = False
        self._cond = asyncio.Condition()

    @property
    def is_stopped(self) -> bool:
        """Return the last value of the flag (unsynchronized snapshot)."""
        return self._stopped

    async def wait(self, timeout_sec: float) -> bool:
        """Wait up to ``timeout_sec`` for a stop request.

        Args:
            timeout_sec: Maximum time to wait, in seconds. Values <= 0 only
                check the flag.

        Returns:
            True if stop was requested, False if the timeout elapsed first.
            When both happen together the flag wins.

        Raises:
            CoordinationError: If the condition cannot be used.
        """
        try:
            async with self._cond:
                if not self._stopped and timeout_sec > 0:
                    try:
                        await asyncio.wait_for(
                            self._cond.wait_for(lambda: self._stopped), timeout_sec
                        )
                    except asyncio.TimeoutError:
                        pass
                return self._stopped
        except RuntimeError as e:
            raise CoordinationError(f"Unable to wait on stop signal: {e}") from e

    async def signal_stop(self) -> None:
        """Set the flag and wake one waiter. Repeated calls are no-ops.

        Raises:
            CoordinationError: If the condition cannot be used.
        """
        try:
            async with self._cond:
                if self._stopped:
                    logger.debug("Stop already requested")
                    return
                self._stopped = True
                self._cond.notify()
        except RuntimeError as e:
            raise CoordinationError(f"Unable to signal stop: {e}") from e
