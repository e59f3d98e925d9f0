# fitbit_tcx/utils/__init__.py
"""
Utilities package for the exporter.
Exports commonly used functions for external access.
"""

from .log import setup_logger, setup_console_logger, enable_console_logging

__all__ = [
    "setup_logger",
    "setup_console_logger",
    "enable_console_logging",
]
