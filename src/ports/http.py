"""HTTP port definitions (DTOs)."""

from dataclasses import dataclass
from typing import Any

from src.ports.settings import SettingsPort

__all__ = ["ExecRequest", "HttpPort"]


@dataclass(frozen=True)
class ExecRequest:
    """Command request sent to the remote endpoint on every tick.

    Attributes:
        id: Name of the caller.
        cmd_id_re: Pattern selecting the communication services that should
            run the command. Forwarded as-is, never evaluated here.
        cmd: Command text to run.
    """

    id: str
    cmd_id_re: str
    cmd: str

    @classmethod
    def from_settings(cls, settings: SettingsPort) -> "ExecRequest":
        return cls(id=settings.caller_name, cmd_id_re=settings.cmd_id_regex, cmd=settings.cmd)

    def to_payload(self) -> dict[str, str]:
        """Return the JSON body, with the wire field names."""
        return {"id": self.id, "cmdIdRe": self.cmd_id_re, "cmd": self.cmd}


@dataclass
class HttpPort:
    """HTTP request to be sent for one tick.

    Decouples core scheduling logic from HTTP implementation details.

    Attributes:
        tick: 1-based tick number.
        ideal_time_sec: Monotonic time when request should have been sent.
        url: Target HTTP endpoint URL.
        payload: JSON-serializable dictionary to send as request body.
    """

    tick: int
    ideal_time_sec: float
    url: str
    payload: dict[str, Any]
