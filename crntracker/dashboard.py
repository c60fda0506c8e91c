"""
Dashboard state: which course is selected and where the view is scrolled.

The record list is fixed for the whole session; only the view over it
changes. Rendering reads this state and never mutates it.
"""

from __future__ import annotations

from typing import Callable, Dict, Iterable, Optional, Sequence, Tuple

from crntracker.course import Failure
from crntracker.model import CourseRecord


# Every table row is drawn ROW_HEIGHT lines tall
ROW_HEIGHT = 4


class Dashboard:
    def __init__(self, records: Sequence[CourseRecord], failures: Iterable[Failure] = ()) -> None:
        self.records: Tuple[CourseRecord, ...] = tuple(records)
        self.failures: Tuple[Failure, ...] = tuple(failures)
        self.selected: Optional[int] = 0 if self.records else None
        self.running = True

    @property
    def scroll_offset(self) -> int:
        return (self.selected or 0) * ROW_HEIGHT

    @property
    def content_length(self) -> int:
        """Scrollable length, in lines, used to size the scroll indicator."""
        return max(len(self.records) - 1, 0) * ROW_HEIGHT

    def selected_record(self) -> Optional[CourseRecord]:
        if self.selected is None:
            return None
        return self.records[self.selected]

    def next(self) -> None:
        if not self.records:
            return
        self.selected = ((self.selected or 0) + 1) % len(self.records)

    def previous(self) -> None:
        if not self.records:
            return
        self.selected = ((self.selected or 0) - 1 + len(self.records)) % len(self.records)

    def quit(self) -> None:
        self.running = False

    def handle_key(self, key: str) -> bool:
        """
        Apply one key press. Returns True if the key was bound to an action.
        """
        action = KEY_BINDINGS.get(key)
        if action is None:
            return False
        action(self)
        return True


KEY_BINDINGS: Dict[str, Callable[[Dashboard], None]] = {
    "q": Dashboard.quit,
    "esc": Dashboard.quit,
    "j": Dashboard.next,
    "down": Dashboard.next,
    "k": Dashboard.previous,
    "up": Dashboard.previous,
}
