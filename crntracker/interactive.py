"""
Interactive dashboard loop.

RawTerminal owns the keyboard: it switches stdin to cbreak mode on enter and
restores it on exit, and turns key presses into short names ("up", "esc",
"q", ...). run_dashboard() draws with rich.live.Live on the alternate screen
and blocks for one key between redraws until the dashboard is quit.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any, Optional, Protocol

from rich.console import Console
from rich.live import Live

from crntracker.dashboard import Dashboard
from crntracker.render import Renderer


logger = logging.getLogger(__name__)


# Seconds to wait for the rest of an escape sequence after ESC
ESCAPE_TIMEOUT = 0.05

# Raw byte sequences -> key names
KEY_SEQUENCES = {
    "\x1b": "esc",
    "\x1b[A": "up",
    "\x1b[B": "down",
    "\x1bOA": "up",
    "\x1bOB": "down",
    # Windows console (msvcrt) prefixes
    "\xe0H": "up",
    "\xe0P": "down",
    "\x00H": "up",
    "\x00P": "down",
    "\r": "enter",
    "\n": "enter",
}


def decode_key(seq: str) -> str:
    """
    Map a raw key sequence to a key name. Printable keys map to themselves
    (lower-cased), unknown escape sequences to "unknown".
    """
    if seq in KEY_SEQUENCES:
        return KEY_SEQUENCES[seq]
    if len(seq) == 1:
        return seq.lower()
    return "unknown"


class Terminal(Protocol):
    def __enter__(self) -> "Terminal": ...

    def __exit__(self, *exc_info: Any) -> None: ...

    def read_key(self) -> str: ...


class RawTerminal:
    """
    Exclusive keyboard access for the duration of a `with` block.
    """

    def __init__(self, stream: Any = None) -> None:
        self.stream = stream or sys.stdin
        self._saved: Optional[list] = None

    def __enter__(self) -> "RawTerminal":
        if sys.platform != "win32":
            import termios
            import tty

            fd = self.stream.fileno()
            self._saved = termios.tcgetattr(fd)
            tty.setcbreak(fd)
        return self

    def __exit__(self, *exc_info: Any) -> None:
        if self._saved is not None:
            import termios

            termios.tcsetattr(self.stream.fileno(), termios.TCSADRAIN, self._saved)
            self._saved = None

    def read_key(self) -> str:
        if sys.platform == "win32":
            return decode_key(self._read_windows())
        return decode_key(self._read_posix())

    def _read_windows(self) -> str:
        import msvcrt

        ch = msvcrt.getwch()
        if ch in ("\x00", "\xe0"):
            ch += msvcrt.getwch()
        return ch

    def _read_char(self, fd: int, timeout: Optional[float] = None) -> str:
        import select

        if timeout is not None:
            ready, _, _ = select.select([fd], [], [], timeout)
            if not ready:
                return ""
        return os.read(fd, 1).decode("utf-8", errors="replace")

    def _read_posix(self) -> str:
        fd = self.stream.fileno()
        seq = self._read_char(fd)
        if seq != "\x1b":
            return seq

        # A lone ESC is the Esc key; escape sequences follow within a few ms
        ch = self._read_char(fd, ESCAPE_TIMEOUT)
        seq += ch
        if ch == "O":
            # SS3: exactly one more character (ESC O A)
            return seq + self._read_char(fd, ESCAPE_TIMEOUT)
        if ch != "[":
            return seq

        # CSI: parameters until a final character in '@'..'~' (ESC [ 1 ; 5 A)
        while True:
            ch = self._read_char(fd, ESCAPE_TIMEOUT)
            seq += ch
            if not ch or "@" <= ch <= "~":
                return seq


def run_dashboard(dashboard: Dashboard, terminal: Terminal, console: Optional[Console] = None) -> None:
    """
    Draw, wait for one key, apply it, redraw, until the user quits.
    """
    console = console or Console()
    renderer = Renderer(height=console.size.height)

    with Live(renderer.render(dashboard), console=console, screen=True, auto_refresh=False) as live:
        while dashboard.running:
            key = terminal.read_key()
            if not dashboard.handle_key(key):
                logger.debug("Unbound key %r", key)
                continue
            renderer.height = console.size.height
            live.update(renderer.render(dashboard), refresh=True)
