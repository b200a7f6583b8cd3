"""Logger configuration for Hundreds.

Engine, store and import code attach context with `logger.bind(day=...,
exercise=...)`. Both sinks print that context after the message when present.
"""

import sys
from pathlib import Path

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"


def _with_context(base: str):
    def formatter(record) -> str:
        if record["extra"]:
            return base + " | <dim>{extra}</dim>\n{exception}"
        return base + "\n{exception}"

    return formatter


def _plain_with_context(record) -> str:
    if record["extra"]:
        return FILE_FORMAT + " | {extra}\n{exception}"
    return FILE_FORMAT + "\n{exception}"


def setup_logger(
    level: str = "INFO",
    log_file: str | None = None,
    rotation: str = "10 MB",
    retention: str = "7 days",
) -> None:
    """Configure loguru with a console sink and an optional rotating file.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path to log file. If None, only console logging.
        rotation: Log rotation size (e.g., "10 MB", "1 day")
        retention: Log retention period (e.g., "7 days", "1 month")
    """
    logger.remove()

    logger.add(sys.stderr, format=_with_context(CONSOLE_FORMAT), level=level, colorize=True)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        # Bound values can include record dates and import keys; keep locals out of tracebacks
        logger.add(
            log_path,
            format=_plain_with_context,
            level=level,
            rotation=rotation,
            retention=retention,
            compression="zip",
            backtrace=True,
            diagnose=False,
        )

    logger.bind(level=level, log_file=log_file).info("Logger initialized")
