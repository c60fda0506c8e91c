"""
Tests for CLI entry points.

These tests focus on:
- Basic argument validation (season must be known)
- Building the TrackerConfig from parsed arguments
- End-to-end runs with a fake fetcher (no network, no raw terminal)
"""

import io
import unittest
from contextlib import redirect_stderr
from unittest import mock

from rich.console import Console

import crntracker.cli as cli
from crntracker.errors import NetworkError
from crntracker.model import Season


PAGE = (
    '<table><tr><th class="ddlabel">CS 1301 Intro to Computing</th></tr>'
    '<tr><td class="dddefault"><table>'
    "<tr><th></th><th>Capacity</th><th>Actual</th><th>Remaining</th></tr>"
    "<tr><th>Seats</th><td>30</td><td>25</td><td>5</td></tr>"
    "<tr><th>Waitlist Seats</th><td>5</td><td>2</td><td>3</td></tr>"
    "</table></td></tr></table>"
)


class TestParser(unittest.TestCase):
    def test_unknown_season_exits_2(self) -> None:
        with redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit) as ctx:
                cli.main(["winter", "123456"])
        self.assertEqual(ctx.exception.code, 2)

    def test_crns_required(self) -> None:
        with redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit) as ctx:
                cli.main(["fall"])
        self.assertNotEqual(ctx.exception.code, 0)

    def test_build_config(self) -> None:
        args = cli.build_parser().parse_args(["SPRING", "123456", "654321", "--strict", "--retries", "0"])
        config = cli.build_config(args)

        self.assertIs(config.season, Season.SPRING)
        self.assertEqual(config.crns, ("123456", "654321"))
        self.assertTrue(config.strict)
        self.assertEqual(config.retries, 0)
        self.assertEqual(config.timeout, 30.0)


class TestRun(unittest.TestCase):
    def setUp(self) -> None:
        self.out = Console(file=io.StringIO(), width=120, record=True)
        self.err = Console(file=io.StringIO(), width=120, record=True)
        patches = [
            mock.patch.object(cli, "console", self.out),
            mock.patch.object(cli, "err_console", self.err),
            mock.patch.object(cli, "DocumentFetcher"),
        ]
        for p in patches:
            p.start()
            self.addCleanup(p.stop)
        self.fetcher = cli.DocumentFetcher.return_value.__enter__.return_value
        self.fetcher.fetch.return_value = PAGE

    def test_invalid_crn_never_fetches(self) -> None:
        with self.assertRaises(SystemExit) as ctx:
            cli.main(["fall", "12", "--print", "--delay", "0"])

        self.assertEqual(ctx.exception.code, 1)
        self.fetcher.fetch.assert_not_called()
        self.assertIn("No courses could be loaded", self.err.export_text())

    def test_print_table(self) -> None:
        with self.assertRaises(SystemExit) as ctx:
            cli.main(["fall", "123456", "12", "--print", "--delay", "0"])

        self.assertEqual(ctx.exception.code, 0)
        self.fetcher.fetch.assert_called_once()
        self.assertIn("CS 1301 Intro to Computing", self.out.export_text())
        self.assertIn("Skipped", self.err.export_text())

    def test_strict_malformed_crn_exits_2(self) -> None:
        with self.assertRaises(SystemExit) as ctx:
            cli.main(["fall", "12", "123456", "--strict", "--print", "--delay", "0"])

        self.assertEqual(ctx.exception.code, 2)
        self.fetcher.fetch.assert_not_called()
        self.assertIn("Error:", self.err.export_text())

    def test_strict_network_error_exits_1(self) -> None:
        self.fetcher.fetch.side_effect = NetworkError("connection reset", crn="123456", stage="fetch")

        with self.assertRaises(SystemExit) as ctx:
            cli.main(["fall", "123456", "--strict", "--print", "--delay", "0"])

        self.assertEqual(ctx.exception.code, 1)
        self.assertIn("connection reset", self.err.export_text())


if __name__ == "__main__":
    unittest.main()
