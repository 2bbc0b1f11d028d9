"""Configuration check for container orchestration."""

import logging

from src.adapters.driven.config.settings import load_settings
from src.adapters.driven.logging.logging_config import configure_logs

__all__ = ["main"]

logger = logging.getLogger(__name__)


def main() -> int:
    """Check that the repeater could start with the current environment.

    Validates:
    - Required environment variables are set.
    - The regex pattern compiles and the destination is an HTTP(S) URL.
    - Interval and timeout are positive.

    Returns:
        0 if healthy, 1 if unhealthy.
    """
    configure_logs()

    try:
        _ = load_settings()
    except (RuntimeError, ValueError) as exc:
        logger.error(f"Repeater config check FAILED: {exc}")
        return 1

    logger.info("Repeater config check OK")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
