"""
CLI (Command Line Interface).

    crntracker SEASON CRN [CRN ...]

Fetches the current enrollment for every CRN, then opens the interactive
dashboard:

    crntracker fall 87695 87696        (CRNs must be 6 characters)
    crntracker spring 123456 654321 --strict
    crntracker summer 123456 --print   (print the table once and exit)

Exit codes: 0 ok, 1 nothing could be loaded / aborted, 2 bad arguments
(including a malformed CRN with --strict).
"""

from __future__ import annotations

import argparse
import logging
import sys

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.progress import BarColumn, Progress, TextColumn, TimeRemainingColumn

from crntracker.course import CollectionResult, collect_courses
from crntracker.dashboard import Dashboard
from crntracker.errors import TrackerError, ValidationError
from crntracker.interactive import RawTerminal, run_dashboard
from crntracker.model import Season, TrackerConfig
from crntracker.render import Renderer
from crntracker.scrape import DocumentFetcher


console = Console()
err_console = Console(stderr=True)

logger = logging.getLogger("crntracker")


def _configure_logging(verbose: bool) -> None:
    handler = RichHandler(console=err_console, show_path=False, rich_tracebacks=True)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[handler],
        force=True,
    )
    # requests/urllib3 are noisy at DEBUG
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def _season(token: str) -> Season:
    try:
        return Season.from_token(token)
    except ValidationError as e:
        raise argparse.ArgumentTypeError(e.message) from e


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argparse CLI parser.
    """
    parser = argparse.ArgumentParser(prog="crntracker", description="Live seat availability for course sections")
    parser.add_argument("season", type=_season, help="Term to look up (Fall, Spring, Summer)")
    parser.add_argument("crns", nargs="+", help="Course reference numbers (6 characters each)")
    parser.add_argument("--timeout", type=float, default=30.0, help="HTTP timeout in seconds (default: 30)")
    parser.add_argument("--retries", type=int, default=2, help="Retries per CRN on network errors (default: 2)")
    parser.add_argument("--delay", type=float, default=0.2, help="Sleep seconds between requests (default: 0.2)")
    parser.add_argument("--strict", action="store_true", help="Abort on the first CRN that fails")
    parser.add_argument("--print", dest="print_only", action="store_true", help="Print the table once, no dashboard")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def build_config(args: argparse.Namespace) -> TrackerConfig:
    return TrackerConfig(
        season=args.season,
        crns=tuple(args.crns),
        timeout=args.timeout,
        retries=args.retries,
        delay=args.delay,
        strict=args.strict,
    )


def _collect_with_progress(config: TrackerConfig, fetcher: DocumentFetcher) -> CollectionResult:
    progress = Progress(
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TextColumn("{task.completed}/{task.total}"),
        TimeRemainingColumn(),
        console=err_console,
        transient=True,
    )
    task = progress.add_task("Fetching...", total=len({c.strip() for c in config.crns}))

    def on_progress(crn: str, ok: bool) -> None:
        progress.update(task, advance=1, description=f"Fetched {escape(crn)}" if ok else f"Failed {escape(crn)}")

    with progress:
        result = collect_courses(config, fetcher, on_progress=on_progress)
    return result


def run(config: TrackerConfig, print_only: bool = False) -> int:
    """
    Fetch everything, then show it. Returns the process exit code.
    """
    with DocumentFetcher(timeout=config.timeout, retries=config.retries, backoff=config.backoff) as fetcher:
        try:
            result = _collect_with_progress(config, fetcher)
        except ValidationError as e:
            err_console.print(f"[bold red]Error:[/] {escape(str(e))}")
            return 2
        except TrackerError as e:
            err_console.print(f"[bold red]Error:[/] {escape(str(e))}")
            return 1

    for failure in result.failures:
        err_console.print(f"[yellow]Skipped[/] {escape(failure.crn)}: {failure.stage}: {escape(failure.message)}")

    if not result.records:
        err_console.print("[bold red]No courses could be loaded.[/]")
        return 1

    dashboard = Dashboard(result.records, result.failures)

    if print_only or not sys.stdin.isatty():
        console.print(Renderer().table(dashboard))
        return 0

    with RawTerminal() as terminal:
        run_dashboard(dashboard, terminal, console)
    return 0


def main(argv: list[str] | None = None) -> None:
    """
    CLI entry point. Parses args, runs, and exits via SystemExit with a return code.
    """
    args = build_parser().parse_args(argv)
    _configure_logging(args.verbose)

    config = build_config(args)
    logger.debug("Config: %s", config)

    try:
        code = run(config, print_only=args.print_only)
    except KeyboardInterrupt:
        err_console.print("\nStopped by user")
        code = 0

    raise SystemExit(code)
