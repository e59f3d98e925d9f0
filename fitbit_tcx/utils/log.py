# fitbit_tcx/utils/log.py
"""
Logging setup for the exporter.

Loggers are created at import time without handlers so that library use
stays silent. The command-line entry point attaches a console handler
through setup_console_logger().
"""

import logging
from typing import Iterable

# Component loggers created through setup_logger()
_known_loggers = set()


def setup_logger(name: str, level: int = logging.DEBUG) -> logging.Logger:
    """
    Create or retrieve a logger without handlers.

    Args:
        name: Logger name (e.g., "fitbit.auth")
        level: Logging level (default: DEBUG)

    Returns:
        Logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.propagate = False  # Prevent duplicate logs to root logger
    _known_loggers.add(name)

    return logger


def setup_console_logger(name: str, level: int = logging.INFO) -> logging.Logger:
    """
    Create a logger WITH console output.

    Args:
        name: Logger name
        level: Console output level (default: INFO)

    Returns:
        Logger with console handler attached
    """
    logger = setup_logger(name, level)

    has_console = any(
        isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler)
        for h in logger.handlers
    )

    if not has_console:
        console = logging.StreamHandler()
        console.setLevel(level)
        formatter = logging.Formatter(
            "[%(levelname)s] %(name)s: %(message)s"
        )
        console.setFormatter(formatter)
        logger.addHandler(console)

    return logger


def enable_console_logging(level: int = logging.INFO, names: Iterable[str] = ()) -> None:
    """
    Attach console handlers to every component logger.

    Called once by the command-line entry point after the log level is known.
    """
    for name in sorted(set(names) | _known_loggers):
        logger = setup_console_logger(name, level)
        logger.setLevel(level)
        for handler in logger.handlers:
            handler.setLevel(level)


def mask_token(token: str) -> str:
    """Return a printable form of a bearer token."""
    if not token:
        return "<none>"
    return f"{token[:6]}..."
