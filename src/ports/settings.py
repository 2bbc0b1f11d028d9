"""Settings port definition (DTO)."""

from dataclasses import dataclass

__all__ = ["SettingsPort"]


@dataclass(frozen=True)
class SettingsPort:
    """Runtime settings for the core loop.

    Decouples core from concrete configuration sources, enabling
    easy testing and implementation swapping. Immutable once built.

    Attributes:
        caller_name: Sent as ``id`` in every request.
        cmd_id_regex: Sent as ``cmdIdRe`` in every request.
        cmd: Command text sent as ``cmd``.
        dst_url: URL where commands are posted.
        interval_ms: Milliseconds between ticks.
        request_timeout_sec: Total timeout for a single request.
    """

    caller_name: str
    cmd_id_regex: str
    cmd: str
    dst_url: str
    interval_ms: int
    request_timeout_sec: float = 10.0

    @property
    def interval_sec(self) -> float:
        return self.interval_ms / 1_000.0
