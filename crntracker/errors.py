"""
Error taxonomy.

Every failure while turning one CRN into a course record is reported as a
TrackerError that knows which CRN failed and at which stage:

    ValidationError  - malformed input, raised before any network use
    NetworkError     - transport / HTTP failure while fetching a page
    ParseError       - the page did not have the expected structure
"""

from __future__ import annotations

from typing import Optional


class TrackerError(Exception):
    """Base class for all per-course failures."""

    kind = "error"

    def __init__(self, message: str, crn: Optional[str] = None, stage: str = "") -> None:
        super().__init__(message)
        self.message = message
        self.crn = crn
        self.stage = stage

    def with_crn(self, crn: str) -> "TrackerError":
        """Attach the CRN after the fact (the parser does not know it)."""
        self.crn = crn
        return self

    def __str__(self) -> str:
        bits = [b for b in (self.crn, self.stage) if b]
        bits.append(self.message)
        return ": ".join(bits)


class ValidationError(TrackerError):
    kind = "validation"


class NetworkError(TrackerError):
    kind = "network"


class ParseError(TrackerError):
    kind = "parse"
