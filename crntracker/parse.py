"""
Parsing (HTML -> course name + enrollment).

The OSCAR detail page looks roughly like this:

    <th class="ddlabel">Intro to Computing - 12345 - CS 1301 - A</th>
    ...
    <td class="dddefault">
      <table summary="... seating numbers.">
        <tr><th></th><th>Capacity</th><th>Actual</th><th>Remaining</th></tr>
        <tr><th>Seats</th><td>30</td><td>25</td><td>5</td></tr>
        <tr><th>Waitlist Seats</th><td>5</td><td>2</td><td>3</td></tr>
      </table>
    </td>

Important rules:
- Numbers are taken verbatim, nothing is recomputed
- Any missing element or odd row shape raises ParseError (never IndexError,
  AttributeError, ...)
"""

from __future__ import annotations

from typing import List, Tuple

from bs4 import BeautifulSoup, Tag

from crntracker.errors import ParseError
from crntracker.model import Enrollment


# ---------------------------------------------------------------------------
# Selectors
# ---------------------------------------------------------------------------

COURSE_NAME_SELECTOR = "th.ddlabel"
ENROLLMENT_BLOCK_SELECTOR = "td.dddefault"

ENROLLMENT_COLUMNS = ("capacity", "actual", "remaining")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _course_name(soup: BeautifulSoup) -> str:
    header = soup.select_one(COURSE_NAME_SELECTOR)
    if header is None:
        raise ParseError(f"no element matches {COURSE_NAME_SELECTOR!r}", stage="course-name-selector")

    name = header.get_text().strip()
    if not name:
        raise ParseError(f"{COURSE_NAME_SELECTOR!r} is empty", stage="course-name-selector")
    return name


def _enrollment_rows(soup: BeautifulSoup) -> List[Tag]:
    """
    Return the direct child rows of the seating table.
    """
    block = soup.select_one(ENROLLMENT_BLOCK_SELECTOR)
    if block is None:
        raise ParseError(f"no element matches {ENROLLMENT_BLOCK_SELECTOR!r}", stage="enrollment-block-selector")

    table = block.find("table")
    if table is None:
        raise ParseError("enrollment block contains no table", stage="enrollment-table-selector")

    # html.parser keeps an explicit <tbody> if the page has one
    container = table.find("tbody", recursive=False) or table
    return container.find_all("tr", recursive=False)


def _parse_enrollment_row(row: Tag, label: str) -> Enrollment:
    """
    Turn one <tr> into an Enrollment. Exactly three numeric <td> cells.
    """
    stage = f"{label}-row"
    cells = [td.get_text().strip() for td in row.find_all("td")]

    if len(cells) != len(ENROLLMENT_COLUMNS):
        raise ParseError(
            f"expected {len(ENROLLMENT_COLUMNS)} columns, found {len(cells)}: {cells}",
            stage=stage,
        )

    numbers: List[int] = []
    for column, value in zip(ENROLLMENT_COLUMNS, cells):
        # isascii() keeps out things like superscript digits that int() rejects
        if not (value.isascii() and value.isdigit()):
            raise ParseError(f"column {column!r} is not a non-negative integer: {value!r}", stage=stage)
        numbers.append(int(value))

    return Enrollment(*numbers)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def parse_course_html(html: str) -> Tuple[str, Enrollment, Enrollment]:
    """
    Parse one course detail page and return:
    - the course display name
    - class enrollment
    - waitlist enrollment
    """
    soup = BeautifulSoup(html, "html.parser")

    name = _course_name(soup)

    rows = _enrollment_rows(soup)
    # First row is the column header
    body = rows[1:]
    if len(body) < 2:
        raise ParseError(
            f"missing enrollment row (expected class and waitlist rows, found {len(body)})",
            stage="enrollment-rows",
        )

    class_enrollment = _parse_enrollment_row(body[0], "class")
    waitlist_enrollment = _parse_enrollment_row(body[1], "waitlist")

    return name, class_enrollment, waitlist_enrollment
