"""
Rendering (Dashboard state -> rich renderables).

Layout:

    ┏━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━┓ █
    ┃    Name          CRN     Capacity ...       ┃ │
    ┃ ║  Intro to ...  123456  30       ...       ┃ │
    ┗━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━┛ │
    Skipped: ...
    ┏━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━┓
    ┃  (Esc/q) quit | (k/↑) move up | (j/↓) ... ┃
    ┗━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━┛

Full sections (no class seats remaining) are red, everything else green.
"""

from __future__ import annotations

from typing import Optional, Sequence, Tuple

from rich import box
from rich.cells import cell_len
from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from crntracker.course import Failure
from crntracker.dashboard import ROW_HEIGHT, Dashboard
from crntracker.model import CRN_LENGTH, CourseRecord


HEADERS = ("Name", "CRN", "Capacity", "Actual", "Remaining")
FOOTER = "(Esc/q) quit | (k/↑) move up | (j/↓) move down"

ALERT_COLOR = "red"
NORMAL_COLOR = "green"
HIGHLIGHT_MARK = "║"

# Lines used by everything except the table body:
# title, top border, header (+padding), header rule, bottom border,
# skipped line, footer panel
CHROME_HEIGHT = 11


def row_color(record: CourseRecord) -> str:
    return ALERT_COLOR if record.class_enrollment.is_full else NORMAL_COLOR


def column_widths(records: Sequence[CourseRecord]) -> Tuple[int, int, int, int, int]:
    """
    Widest rendered value per column. Renderer calls this once per record list.
    """
    rows = [r.row() for r in records]

    def widest(i: int) -> int:
        return max((cell_len(row[i]) for row in rows), default=0)

    return (widest(0), CRN_LENGTH, widest(2), widest(3), widest(4))


def visible_window(selected: Optional[int], total: int, capacity: int) -> Tuple[int, int]:
    """
    Return [start, end) of the rows to draw so that the selected row is visible.
    """
    capacity = max(capacity, 1)
    if total <= capacity or selected is None:
        return 0, min(total, capacity)
    start = max(0, selected - capacity + 1)
    return start, start + capacity


def scroll_indicator(content_length: int, position: int, height: int) -> Text:
    """
    Vertical scrollbar of `height` lines. The thumb shrinks as the content
    grows and moves with `position` (0..content_length).
    """
    height = max(height, 1)
    if content_length <= 0:
        return Text("\n".join(["█"] * height), style="dim")

    thumb = max(1, height * height // (height + content_length))
    travel = height - thumb
    start = round(min(position, content_length) / content_length * travel)

    lines = ["█" if start <= i < start + thumb else "│" for i in range(height)]
    return Text("\n".join(lines), style="dim")


def _failures_line(failures: Sequence[Failure]) -> Text:
    if not failures:
        return Text("")
    bits = [f"{f.crn} ({f.kind})" for f in failures]
    return Text("Skipped: " + ", ".join(bits), style="dim")


def _footer() -> Panel:
    return Panel(
        Text(FOOTER, justify="center", style="yellow"),
        box=box.HEAVY,
    )


class Renderer:
    """
    Turns a Dashboard into something rich can draw. Holds no dashboard state,
    only the column widths of the last record list it saw.
    """

    def __init__(self, height: Optional[int] = None) -> None:
        # None draws every row (no scrolling window)
        self.height = height
        self._records: Optional[Tuple[CourseRecord, ...]] = None
        self._widths: Tuple[int, int, int, int, int] = column_widths(())

    def widths(self, dashboard: Dashboard) -> Tuple[int, int, int, int, int]:
        # The record tuple is fixed per session: an identity check is enough
        if dashboard.records is not self._records:
            self._records = dashboard.records
            self._widths = column_widths(dashboard.records)
        return self._widths

    def rows_per_page(self, dashboard: Dashboard) -> int:
        if self.height is None:
            return max(len(dashboard.records), 1)
        return max((self.height - CHROME_HEIGHT) // ROW_HEIGHT, 1)

    def table(self, dashboard: Dashboard) -> Table:
        records = dashboard.records
        widths = self.widths(dashboard)

        title = f"Term {records[0].term}" if records else None
        table = Table(
            title=title,
            box=box.HEAVY,
            padding=(0, 1, 1, 1),
            show_edge=True,
            expand=True,
        )
        table.add_column("", width=1, no_wrap=True)
        table.add_column(HEADERS[0], min_width=widths[0] + 1)
        for header, width in zip(HEADERS[1:], widths[1:]):
            table.add_column(header, min_width=width, no_wrap=True)

        if not records:
            table.caption = "No courses to show"
            return table

        start, end = visible_window(dashboard.selected, len(records), self.rows_per_page(dashboard))
        for i in range(start, end):
            record = records[i]
            selected = i == dashboard.selected
            style = f"{row_color(record)} reverse" if selected else row_color(record)
            mark = f"\n{HIGHLIGHT_MARK}\n{HIGHLIGHT_MARK}" if selected else ""
            cells = [Text(f"\n{content}\n") for content in record.row()]
            table.add_row(mark, *cells, style=style)

        return table

    def render(self, dashboard: Dashboard) -> RenderableType:
        body = Table.grid(expand=True)
        body.add_column(ratio=1)
        body.add_column(width=1)
        scrollbar = scroll_indicator(
            dashboard.content_length,
            dashboard.scroll_offset,
            self.rows_per_page(dashboard) * ROW_HEIGHT,
        )
        body.add_row(self.table(dashboard), scrollbar)

        return Group(body, _failures_line(dashboard.failures), _footer())
