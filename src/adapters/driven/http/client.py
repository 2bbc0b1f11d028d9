"""HTTP client adapter that dispatches command requests."""

import asyncio
import logging
from types import TracebackType

import aiohttp
from aiohttp import ClientTimeout

from src.ports.dispatch import DispatchOutcome, DispatchPort
from src.ports.http import HttpPort

__all__ = ["HttpClient"]

logger = logging.getLogger(__name__)

DEFAULT_REQUEST_TIMEOUT = 10.0


class HttpClient(DispatchPort):
    """HTTP client posting one request per tick.

    Features:
    - Bounded per-request timeout so a hung endpoint cannot pile up forever.
    - Every failure is reported as a DispatchOutcome instead of raised.
    - Context manager for proper resource cleanup.
    """

    def __init__(self, timeout_sec: float = DEFAULT_REQUEST_TIMEOUT) -> None:
        """Initialize HTTP client.

        Args:
            timeout_sec: Total timeout for a single request, in seconds.
        """
        self.timeout = ClientTimeout(total=timeout_sec)
        self.session: aiohttp.ClientSession | None = None

    async def __aenter__(self) -> "HttpClient":
        """Enter async context manager (start session).

        Returns:
            Self for use in async with statement.
        """
        self.session = aiohttp.ClientSession(timeout=self.timeout)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if self.session:
            await self.session.close()

    async def dispatch(self, req: HttpPort) -> DispatchOutcome:
        """POST the tick's payload as JSON and classify the response.

        Args:
            req: Request for this tick.

        Returns:
            SUCCESS with the body for 2xx, BAD_STATUS with the code otherwise,
            TRANSPORT_FAILURE when no response arrived in time.

        Raises:
            RuntimeError: If session not initialized.
        """
        if self.session is None:
            raise RuntimeError("Session not initialized; use 'async with' context manager")

        fired = asyncio.get_running_loop().time()
        logger.debug(
            f"Tick {req.tick}: sending to {req.url}, "
            f"{(fired - req.ideal_time_sec) * 1_000.0:.1f} ms after schedule"
        )

        try:
            async with self.session.post(req.url, json=req.payload, timeout=self.timeout) as resp:
                if not 200 <= resp.status < 300:
                    return DispatchOutcome.bad_status(resp.status)
                try:
                    body = await resp.text()
                except (aiohttp.ClientError, asyncio.TimeoutError, UnicodeDecodeError) as e:
                    logger.debug(f"Tick {req.tick}: unable to read response body: {e}")
                    body = ""
                return DispatchOutcome.success(body)
        except asyncio.TimeoutError:
            return DispatchOutcome.transport_failure(
                f"request timed out after {self.timeout.total} s"
            )
        except aiohttp.ClientError as e:
            return DispatchOutcome.transport_failure(str(e) or type(e).__name__)
