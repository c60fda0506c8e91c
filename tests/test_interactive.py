"""
Tests for the interactive loop and the raw key reader.

- run_dashboard draws, reads one key, applies it, and redraws until quit
- unbound keys are ignored without a redraw
- escape sequences are read completely, so no tail bytes leak into the
  next key press
"""

import io
import os
import sys
import types
import unittest
from unittest import mock

from rich.console import Console

from crntracker.dashboard import Dashboard
from crntracker.interactive import RawTerminal, run_dashboard
from crntracker.model import CourseRecord, Enrollment, Season
from crntracker.render import Renderer


REAL_RENDER = Renderer.render


def _record(crn: str) -> CourseRecord:
    return CourseRecord(
        crn=crn,
        season=Season.FALL,
        term="202508",
        name=f"Course {crn}",
        class_enrollment=Enrollment(30, 25, 5),
        waitlist_enrollment=Enrollment(0, 0, 0),
    )


class ScriptedTerminal:
    """Plays back a fixed list of key names."""

    def __init__(self, keys) -> None:
        self.keys = list(keys)

    def __enter__(self) -> "ScriptedTerminal":
        return self

    def __exit__(self, *exc_info) -> None:
        pass

    def read_key(self) -> str:
        return self.keys.pop(0)


class TestRunDashboard(unittest.TestCase):
    def setUp(self) -> None:
        self.dash = Dashboard([_record("111111"), _record("222222"), _record("333333")])
        self.console = Console(file=io.StringIO(), width=100, height=40)

    def _run(self, keys) -> ScriptedTerminal:
        terminal = ScriptedTerminal(keys)
        run_dashboard(self.dash, terminal, self.console)
        return terminal

    def test_quit_with_q(self) -> None:
        terminal = self._run(["q"])
        self.assertFalse(self.dash.running)
        self.assertEqual(terminal.keys, [])

    def test_quit_with_escape(self) -> None:
        self._run(["esc"])
        self.assertFalse(self.dash.running)
        self.assertEqual(self.dash.selected, 0)

    def test_navigation_before_quit(self) -> None:
        self._run(["x", "j", "j", "k", "down", "q"])
        self.assertEqual(self.dash.selected, 2)
        self.assertFalse(self.dash.running)

    def test_keys_after_quit_are_not_read(self) -> None:
        terminal = self._run(["j", "q", "j"])
        self.assertEqual(self.dash.selected, 1)
        self.assertEqual(terminal.keys, ["j"])

    def test_unbound_key_skips_redraw(self) -> None:
        with mock.patch.object(Renderer, "render", autospec=True, side_effect=REAL_RENDER) as render:
            self._run(["x", "z", "j", "q"])

        # initial draw, then one per bound key (j, q)
        self.assertEqual(render.call_count, 3)
        self.assertEqual(self.dash.selected, 1)


@unittest.skipIf(sys.platform == "win32", "POSIX key reader")
class TestReadPosix(unittest.TestCase):
    def setUp(self) -> None:
        self.read_fd, self.write_fd = os.pipe()
        stream = types.SimpleNamespace(fileno=lambda: self.read_fd)
        self.terminal = RawTerminal(stream=stream)

    def tearDown(self) -> None:
        os.close(self.read_fd)
        os.close(self.write_fd)

    def _keys(self, data: bytes, count: int) -> list:
        os.write(self.write_fd, data)
        return [self.terminal.read_key() for _ in range(count)]

    def test_plain_key(self) -> None:
        self.assertEqual(self._keys(b"j", 1), ["j"])

    def test_lone_escape(self) -> None:
        self.assertEqual(self._keys(b"\x1b", 1), ["esc"])

    def test_arrow_keys(self) -> None:
        self.assertEqual(self._keys(b"\x1b[A\x1b[B\x1bOA", 3), ["up", "down", "up"])

    def test_long_sequences_are_consumed(self) -> None:
        # Page Up and Ctrl+Up must not leave "5~" or ";5A" behind
        self.assertEqual(self._keys(b"\x1b[5~j\x1b[1;5Aq", 4), ["unknown", "j", "unknown", "q"])


if __name__ == "__main__":
    unittest.main()
