"""
Central data model definitions used across the project.

This module defines:
- Season and the term code derived from it
- Enrollment triples and the immutable CourseRecord
- TrackerConfig, the single value the CLI hands to the core
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional, Tuple

from crntracker.errors import ValidationError


CRN_LENGTH = 6


class Season(Enum):
    FALL = "Fall"
    SPRING = "Spring"
    SUMMER = "Summer"

    @property
    def term_id(self) -> int:
        return _TERM_IDS[self]

    @classmethod
    def from_token(cls, token: str) -> "Season":
        """
        Parse a CLI token like 'fall' or 'Spring' (case-insensitive).
        """
        value = (token or "").strip().lower()
        for season in cls:
            if season.value.lower() == value:
                return season
        choices = ", ".join(s.value for s in cls)
        raise ValidationError(f"unknown season {token!r} (expected one of: {choices})", stage="season")

    def __str__(self) -> str:
        return self.value


_TERM_IDS = {
    Season.FALL: 8,
    Season.SPRING: 2,
    Season.SUMMER: 5,
}


def resolve_term(season: Season, today: Optional[date] = None) -> str:
    """
    Return the term code for a season, e.g. Fall 2025 -> "202508".

    Registration for spring opens during the previous fall, so after April
    a Spring lookup points at next year's term.
    """
    today = today or date.today()
    year = today.year
    if season is Season.SPRING and today.month > 4:
        year += 1
    return f"{year}{season.term_id:02d}"


@dataclass(frozen=True)
class Enrollment:
    """
    Seat counts exactly as reported by the registration page.

    remaining is NOT recomputed from capacity - actual; the source is
    sometimes inconsistent and we show what it says.
    """

    capacity: int
    actual: int
    remaining: int

    @property
    def is_full(self) -> bool:
        return self.remaining == 0


@dataclass(frozen=True)
class CourseRecord:
    """
    Represents one course section (CRN) with its current enrollment.
    """

    crn: str
    season: Season
    term: str
    name: str
    class_enrollment: Enrollment
    waitlist_enrollment: Enrollment

    def row(self) -> Tuple[str, str, str, str, str]:
        """Cells in display order: name, crn, capacity, actual, remaining."""
        seats = self.class_enrollment
        return (self.name, self.crn, str(seats.capacity), str(seats.actual), str(seats.remaining))


@dataclass(frozen=True)
class TrackerConfig:
    """
    Everything one run needs, built once by the CLI and passed by value.
    """

    season: Season
    crns: Tuple[str, ...]
    timeout: float = 30.0
    retries: int = 2
    backoff: float = 1.0
    delay: float = 0.2
    strict: bool = False
