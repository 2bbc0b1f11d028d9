"""Console logging setup for the repeater."""

import logging
import os

__all__ = ["configure_logs"]

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d - %(message)s"
DATE_FORMAT = "%d/%m/%y %H:%M:%S"


def configure_logs() -> None:
    """Configure console logging.

    Sets up:
    - Root logger at INFO level with a console handler (unless one exists).
    - Framework loggers (aiohttp, asyncio) at WARNING level.
    - Application loggers (src) at LOG_LEVEL, DEBUG if unset.
    """
    root = logging.getLogger()
    root.setLevel(logging.INFO)
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
        root.addHandler(handler)

    # Suppress verbose framework loggers
    logging.getLogger("aiohttp").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)

    level_name = os.getenv("LOG_LEVEL", "DEBUG").upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        root.warning(f"Unknown LOG_LEVEL {level_name!r}, using DEBUG")
        level = logging.DEBUG
    logging.getLogger("src").setLevel(level)
