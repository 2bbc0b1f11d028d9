"""Application entrypoint."""

import asyncio
import logging
from collections.abc import Sequence

from src.adapters.driven.config.settings import load_settings
from src.adapters.driven.http.client import HttpClient
from src.adapters.driven.logging.logging_config import configure_logs
from src.adapters.driving.cli import parse_args
from src.adapters.driving.signals import make_stop_on_sigterm
from src.adapters.driving.stdin import read_stop_line
from src.core.controller import run_controller
from src.core.errors import StopTriggerError
from src.core.stop_signal import StopSignal
from src.ports.settings import SettingsPort

__all__ = ["main", "run", "EXIT_OK", "EXIT_FAILURE", "EXIT_CONFIG_ERROR"]

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CONFIG_ERROR = 2


async def main(argv: Sequence[str] | None = None) -> int:
    """Start the command repeater.

    Startup sequence:
    1. Configure logging.
    2. Load and validate configuration (environment, then CLI flags).
    3. Run the scheduler loop under the controller.
    4. Stop on [ENTER], end of input, SIGTERM or SIGINT.

    Args:
        argv: Command-line arguments; defaults to ``sys.argv[1:]``.

    Returns:
        Process exit code.
    """
    configure_logs()
    logger.info("Starting command repeater...")

    try:
        config = load_settings(parse_args(argv))
    except (RuntimeError, ValueError) as exc:
        logger.error(
            "Configuration error: %s\n"
            "Hint: check CMD, DST_URL, CALLER_NAME, CMD_ID_REGEX, INTERVAL_MS "
            "and REQUEST_TIMEOUT_SECONDS, or the matching command-line flags.",
            exc,
        )
        return EXIT_CONFIG_ERROR

    # Wrap config into port so core depends on interface (hexagonal)
    settings_port = SettingsPort(
        caller_name=config.caller_name,
        cmd_id_regex=config.cmd_id_regex,
        cmd=config.cmd,
        dst_url=config.dst_url,
        interval_ms=config.interval_ms,
        request_timeout_sec=config.request_timeout_sec,
    )

    async with HttpClient(timeout_sec=settings_port.request_timeout_sec) as http:
        logger.info("Press [ENTER] to terminate...")
        try:
            clean = await run_controller(
                settings=settings_port,
                stop_signal=StopSignal(),
                dispatch_fn=http.dispatch,
                stop_triggers=[read_stop_line(), make_stop_on_sigterm()],
            )
        except StopTriggerError as exc:
            logger.error(f"Error: {exc}")
            return EXIT_FAILURE

    if not clean:
        logger.error("Command repeater stopped after a coordination failure.")
        return EXIT_FAILURE

    logger.info("Program completed!")
    return EXIT_OK


def run() -> None:
    """Console-script entrypoint."""
    try:
        code = asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Shutdown requested by user (Ctrl+C).")
        code = EXIT_FAILURE
    raise SystemExit(code)


if __name__ == "__main__":
    run()
