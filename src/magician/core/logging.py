"""
Logging configuration.

Every router decision (selected provider, first-attempt failure, fallback
hop, terminal failure) is logged under the ``magician`` namespace. Console
output goes to stderr so CLI commands can print JSON on stdout.
"""

import logging
import sys
from pathlib import Path

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Vendor SDK loggers that echo every HTTP request at INFO
VENDOR_LOGGERS = ("httpx", "httpcore", "anthropic")


def _resolve_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level}")
    return resolved


def setup_logging(
    level: int | str = logging.INFO,
    log_file: Path | None = None,
) -> logging.Logger:
    """Configure the package logger.

    Safe to call repeatedly: handlers from an earlier call are closed and
    replaced, so a long-lived process or a test run never doubles output.
    Vendor SDK loggers are held at WARNING unless ``level`` is DEBUG.
    """
    level = _resolve_level(level)
    logger = logging.getLogger("magician")
    logger.setLevel(level)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(formatter)
    logger.addHandler(console)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    vendor_level = logging.DEBUG if level <= logging.DEBUG else logging.WARNING
    for name in VENDOR_LOGGERS:
        logging.getLogger(name).setLevel(vendor_level)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a child logger, e.g. ``get_logger("llm.router")``."""
    return logging.getLogger(f"magician.{name}")
