"""Dispatch port definition (interface and DTO)."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Protocol

from src.ports.http import HttpPort

__all__ = ["DispatchOutcome", "DispatchPort", "OutcomeKind"]


class OutcomeKind(enum.Enum):
    SUCCESS = "success"
    BAD_STATUS = "bad_status"
    TRANSPORT_FAILURE = "transport_failure"


@dataclass(slots=True, frozen=True)
class DispatchOutcome:
    """Result of one send attempt. Only logged, never kept.

    Attributes:
        kind: How the attempt ended.
        body: Response body for ``SUCCESS`` (empty if it could not be read).
        status_code: HTTP status for ``BAD_STATUS``.
        error: Cause of a ``TRANSPORT_FAILURE``.
    """

    kind: OutcomeKind
    body: str = ""
    status_code: int | None = None
    error: str | None = None

    @classmethod
    def success(cls, body: str) -> DispatchOutcome:
        return cls(OutcomeKind.SUCCESS, body=body)

    @classmethod
    def bad_status(cls, status_code: int) -> DispatchOutcome:
        return cls(OutcomeKind.BAD_STATUS, status_code=status_code)

    @classmethod
    def transport_failure(cls, error: str) -> DispatchOutcome:
        return cls(OutcomeKind.TRANSPORT_FAILURE, error=error)

    @property
    def is_success(self) -> bool:
        return self.kind is OutcomeKind.SUCCESS

    def __str__(self) -> str:
        if self.kind is OutcomeKind.SUCCESS:
            return f"Success in sending command, body: {self.body}"
        if self.kind is OutcomeKind.BAD_STATUS:
            return f"Success in sending command, but returned status code: {self.status_code}"
        return f"Failed to send command: {self.error}"


class DispatchPort(Protocol):
    """Interface for sending one tick's request.

    Implementations must report every per-request failure through the
    returned outcome instead of raising.
    """

    async def dispatch(self, req: HttpPort, /) -> DispatchOutcome:
        """Send the request and classify the result.

        Args:
            req: Request for this tick.

        Returns:
            Outcome of the attempt.
        """
        ...
