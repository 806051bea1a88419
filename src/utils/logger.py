import os
import sys

from loguru import logger


def setup_logger(
    *, json_logs: bool = False, level: str = "INFO", log_file: str | None = None
) -> None:
    """Configure loguru for the application.

    Console level controlled by LOG_LEVEL env (default: INFO).
    File sink (DEBUG) is on by default for the service; pass ``log_file=""``
    to disable it, e.g. from one-shot scripts.
    """
    console_level = os.getenv("LOG_LEVEL", level).upper()
    logger.remove()

    if json_logs:
        logger.add(sys.stderr, serialize=True, level=console_level)
    else:
        logger.add(
            sys.stderr,
            format=(
                "<green>{time:HH:mm:ss}</green> | "
                "<level>{level: <8}</level> | "
                "<cyan>{name}</cyan>:<cyan>{function}</cyan> - "
                "<level>{message}</level>"
            ),
            level=console_level,
            colorize=True,
        )

    if log_file is None:
        log_file = "logs/holders_{time:YYYY-MM-DD}.log"
    if log_file:
        logger.add(
            log_file,
            rotation="50 MB",
            retention="3 days",
            compression="gz",
            level="DEBUG",
            serialize=json_logs,
        )
