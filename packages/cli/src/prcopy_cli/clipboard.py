"""System clipboard writes via the platform's copy utility.

Resolution order (stops at the first command found on PATH):
  1. pbcopy                        (macOS)
  2. wl-copy                       (Wayland)
  3. xclip -selection clipboard    (X11)
  4. xsel --clipboard --input      (X11)
  5. clip.exe                      (Windows / WSL)
"""

from __future__ import annotations

import asyncio
import logging
import shutil
import subprocess

from prcopy_core.errors import ClipboardError

logger = logging.getLogger(__name__)

_COMMANDS = (
    ["pbcopy"],
    ["wl-copy"],
    ["xclip", "-selection", "clipboard"],
    ["xsel", "--clipboard", "--input"],
    ["clip.exe"],
)


def clipboard_command() -> list[str] | None:
    for command in _COMMANDS:
        if shutil.which(command[0]):
            return command
    return None


def _write(text: str) -> None:
    command = clipboard_command()
    if command is None:
        raise ClipboardError("No clipboard utility found (install xclip, xsel or wl-clipboard).")
    try:
        result = subprocess.run(command, input=text, text=True, capture_output=True, timeout=5)
    except (FileNotFoundError, subprocess.TimeoutExpired) as e:
        raise ClipboardError(f"{command[0]} failed: {e}") from e
    if result.returncode != 0:
        raise ClipboardError(f"{command[0]} exited with {result.returncode}: {result.stderr.strip()}")
    logger.debug("Copied %d characters with %s", len(text), command[0])


async def write_to_clipboard(text: str) -> None:
    """Write *text* to the clipboard without blocking the event loop."""
    await asyncio.to_thread(_write, text)
