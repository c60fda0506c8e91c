"""
Course record assembly.

build_course() turns one CRN into one CourseRecord:

    validate -> resolve term -> fetch page -> parse page

collect_courses() runs that for every CRN of a TrackerConfig, one after the
other, and reports progress through a callback.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from datetime import date
from typing import Callable, List, Optional, Protocol, Tuple

from crntracker.errors import TrackerError, ValidationError
from crntracker.model import CRN_LENGTH, CourseRecord, Season, TrackerConfig, resolve_term
from crntracker.parse import parse_course_html


logger = logging.getLogger(__name__)


class Fetcher(Protocol):
    def fetch(self, term: str, crn: str) -> str: ...


ProgressCallback = Callable[[str, bool], None]


@dataclass(frozen=True)
class Failure:
    """A CRN that could not be turned into a record."""

    crn: str
    kind: str
    stage: str
    message: str


@dataclass
class CollectionResult:
    records: Tuple[CourseRecord, ...] = ()
    failures: List[Failure] = field(default_factory=list)


def validate_crn(crn: str) -> str:
    """
    Return the stripped CRN or raise ValidationError. Never touches the network.
    """
    value = (crn or "").strip()
    if len(value) != CRN_LENGTH:
        raise ValidationError(
            f"CRN must be exactly {CRN_LENGTH} characters, got {len(value)}",
            crn=value or repr(crn),
            stage="validate",
        )
    return value


def build_course(
    crn: str,
    season: Season,
    fetcher: Fetcher,
    today: Optional[date] = None,
) -> CourseRecord:
    crn = validate_crn(crn)
    term = resolve_term(season, today)
    logger.debug("Fetching CRN %s for term %s", crn, term)

    html = fetcher.fetch(term, crn)
    try:
        name, class_enrollment, waitlist_enrollment = parse_course_html(html)
    except TrackerError as e:
        e.with_crn(crn)
        raise

    return CourseRecord(
        crn=crn,
        season=season,
        term=term,
        name=name,
        class_enrollment=class_enrollment,
        waitlist_enrollment=waitlist_enrollment,
    )


def _unique(crns: Tuple[str, ...]) -> List[str]:
    seen: set[str] = set()
    out: List[str] = []
    for crn in crns:
        key = crn.strip()
        if key in seen:
            logger.info("Ignoring duplicate CRN %s", key)
            continue
        seen.add(key)
        out.append(crn)
    return out


def collect_courses(
    config: TrackerConfig,
    fetcher: Fetcher,
    on_progress: Optional[ProgressCallback] = None,
    today: Optional[date] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> CollectionResult:
    """
    Build records for all CRNs of the config, sequentially.

    strict=True: the first failure is re-raised and nothing is returned.
    strict=False: failures are logged, recorded and skipped.
    """
    records: List[CourseRecord] = []
    failures: List[Failure] = []

    crns = _unique(config.crns)
    for i, crn in enumerate(crns):
        # Pace requests to the registration server
        if i > 0 and config.delay > 0:
            sleep(config.delay)

        try:
            record = build_course(crn, config.season, fetcher, today=today)
        except TrackerError as e:
            if config.strict:
                raise
            logger.warning("Skipping %s", e)
            failures.append(Failure(crn=e.crn or crn, kind=e.kind, stage=e.stage, message=e.message))
            if on_progress:
                on_progress(crn, False)
            continue

        records.append(record)
        if on_progress:
            on_progress(crn, True)

    return CollectionResult(records=tuple(records), failures=failures)
