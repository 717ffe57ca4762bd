"""Side effects requested by views: clipboard copies and opening URLs."""

import logging
import os
import shutil
import subprocess
import sys
import webbrowser
from typing import List, Optional

logger = logging.getLogger(__name__)


def clipboard_command() -> Optional[List[str]]:
    """Command line of the first available clipboard tool, or None."""
    if sys.platform == "darwin":
        candidates = [["pbcopy"]]
    elif sys.platform.startswith("win"):
        candidates = [["clip"]]
    else:
        candidates = []
        if os.environ.get("WAYLAND_DISPLAY"):
            candidates.append(["wl-copy"])
        candidates.extend(
            [
                ["xclip", "-selection", "clipboard"],
                ["xsel", "--clipboard", "--input"],
            ]
        )
    for command in candidates:
        if shutil.which(command[0]):
            return command
    return None


def copy_to_clipboard(text: str) -> Optional[str]:
    """Copy *text* to the system clipboard.

    Returns:
        None on success, otherwise a short error description.
    """
    command = clipboard_command()
    if command is None:
        return "no clipboard tool found"
    try:
        subprocess.run(command, input=text.encode("utf-8"), check=True, timeout=5)
    except (OSError, subprocess.SubprocessError) as e:
        logger.warning("Clipboard copy with %s failed: %s", command[0], e)
        return f"{command[0]} failed"
    return None


def open_url(url: str) -> Optional[str]:
    """Open *url* in the default browser. Returns an error description on failure."""
    try:
        opened = webbrowser.open(url)
    except webbrowser.Error as e:
        logger.warning("Opening %s failed: %s", url, e)
        return str(e)
    if not opened:
        return "no browser available"
    return None
