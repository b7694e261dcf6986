"""
Browser Utilities Module

Handles opening rendered HTML maps in the default browser.
"""

import webbrowser
from pathlib import Path

from livability_map.utils.logging import get_logger

logger = get_logger(__name__)


def open_html_in_browser(file_path: Path) -> bool:
    """
    Open HTML file in default browser.

    Parameters
    ----------
    file_path : Path
        Path to HTML file

    Returns
    -------
    bool
        True if a browser accepted the file, False otherwise
    """
    file_path = Path(file_path)
    if not file_path.exists():
        logger.warning("HTML file not found: %s", file_path)
        return False

    file_url = file_path.resolve().as_uri()
    try:
        opened = webbrowser.open(file_url)
    except webbrowser.Error as e:
        logger.warning("Could not open HTML file in browser: %s (open manually: %s)", e, file_path)
        return False

    if not opened:
        logger.warning("No browser available; open manually: %s", file_path)
    return bool(opened)
