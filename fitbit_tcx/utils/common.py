# fitbit_tcx/utils/common.py
"""
Common helpers used across the codebase: the browser and file-write
collaborators, and number formatting for TCX fields.
"""

from __future__ import annotations
import webbrowser
from pathlib import Path
from typing import Union

from ..errors import BrowserLaunchError, PersistenceError
from .log import setup_logger

log = setup_logger("utils.common")


def open_browser(url: str) -> None:
    """
    Open a URL in the platform default browser.

    Raises:
        BrowserLaunchError: no browser could be launched
    """
    try:
        opened = webbrowser.open(url, new=1, autoraise=True)
    except webbrowser.Error as e:
        raise BrowserLaunchError(f"Error opening browser: {e}") from e
    if not opened:
        raise BrowserLaunchError("Error opening browser: no runnable browser found")


def save_to_file(path: Union[str, Path], text: str) -> Path:
    """
    Write text to a file, creating parent directories as needed.

    Raises:
        PersistenceError: directory creation or write failed
    """
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    except OSError as e:
        raise PersistenceError(f"Failed to save data to '{path}': {e}") from e

    log.info(f"[common] Data saved to {path}")
    return path


def format_number(value: float) -> str:
    """
    Shortest decimal text for a number.

    Examples:
        >>> format_number(60.0)
        '60'
        >>> format_number(1.5)
        '1.5'
    """
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)
