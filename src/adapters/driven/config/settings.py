"""Configuration loading from environment variables and CLI overrides."""

import logging
import os
import re
from collections.abc import Mapping
from typing import Any

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, HttpUrl, TypeAdapter, field_validator

__all__ = ["ENV_VARS", "Settings", "load_settings"]

load_dotenv()

logger = logging.getLogger(__name__)
_http_url_adapter = TypeAdapter(HttpUrl)

# Settings field -> environment variable
ENV_VARS: dict[str, str] = {
    "caller_name": "CALLER_NAME",
    "cmd_id_regex": "CMD_ID_REGEX",
    "cmd": "CMD",
    "dst_url": "DST_URL",
    "interval_ms": "INTERVAL_MS",
    "request_timeout_sec": "REQUEST_TIMEOUT_SECONDS",
}
REQUIRED_FIELDS = ("cmd", "dst_url")


class Settings(BaseModel):
    """Runtime configuration for the command repeater.

    Attributes:
        caller_name: Name of the caller, sent as ``id``.
        cmd_id_regex: Pattern matching the communication service names,
            sent as ``cmdIdRe``. Only checked for syntax here.
        cmd: Command to run.
        dst_url: Server to send the command to.
        interval_ms: Interval between sends in milliseconds (must be positive).
        request_timeout_sec: Total timeout for one send in seconds.
    """

    model_config = ConfigDict(frozen=True)

    caller_name: str = Field(default="caller", description="Name of the caller.")
    cmd_id_regex: str = Field(
        default=".+", description="Regex pattern to match the communication service names."
    )
    cmd: str = Field(..., description="Command to run.")
    dst_url: str = Field(..., description="Server to send command to.")
    interval_ms: int = Field(default=1000, gt=0, description="Send interval in milliseconds.")
    request_timeout_sec: float = Field(
        default=10.0, gt=0, description="Timeout for a single send in seconds."
    )

    @field_validator("cmd_id_regex")
    @classmethod
    def validate_cmd_id_regex(cls, v: str) -> str:
        """Validate that the pattern compiles.

        Args:
            v: Pattern to validate.

        Returns:
            The pattern, unchanged.

        Raises:
            ValueError: If the pattern is not a valid regular expression.
        """
        try:
            re.compile(v)
        except re.error as e:
            raise ValueError(f"Invalid regex pattern {v!r}: {e}") from e
        return v

    @field_validator("dst_url")
    @classmethod
    def validate_dst_url(cls, v: str) -> str:
        """Validate that the destination is a valid HTTP(S) URL.

        Args:
            v: Destination URL to validate.

        Returns:
            The validated URL.

        Raises:
            ValueError: If URL is invalid or not http/https.
        """
        try:
            url = _http_url_adapter.validate_python(v)
            if url.scheme not in ("http", "https"):
                raise ValueError("Only http:// and https:// destinations allowed")
        except Exception as e:
            raise ValueError(f"Invalid destination URL: {e}") from e
        return v


def load_settings(overrides: Mapping[str, Any] | None = None) -> Settings:
    """Load and validate settings from environment and CLI overrides.

    Environment variables (a ``.env`` file is honoured):
    - CMD: Command to run (required).
    - DST_URL: Valid HTTP(S) URL to send to (required).
    - CALLER_NAME: Caller name (default: caller).
    - CMD_ID_REGEX: Service name pattern (default: .+).
    - INTERVAL_MS: Positive integer interval (default: 1000).
    - REQUEST_TIMEOUT_SECONDS: Positive per-send timeout (default: 10).

    Args:
        overrides: Values that take precedence over the environment, keyed by
            Settings field name (typically parsed CLI flags).

    Returns:
        Validated Settings object.

    Raises:
        RuntimeError: If a required value is missing.
        ValueError: If configuration is invalid.
    """
    values: dict[str, Any] = {
        field: os.environ[env] for field, env in ENV_VARS.items() if env in os.environ
    }
    values.update({k: v for k, v in (overrides or {}).items() if v is not None})

    for field in REQUIRED_FIELDS:
        if field not in values:
            raise RuntimeError(f"Missing required setting: {field} (set {ENV_VARS[field]})")

    settings = Settings(**values)

    logger.info(
        f"Repeater configured: name={settings.caller_name}, "
        f"regex={settings.cmd_id_regex}, cmd={settings.cmd}, "
        f"dst_url={settings.dst_url}, interval={settings.interval_ms}ms, "
        f"timeout={settings.request_timeout_sec}s"
    )

    return settings
