"""Calendar event types shared by the consolidator and day-type resolution."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum


class EventSource(str, Enum):
    """Where a calendar event came from."""

    HOLIDAY = "holiday"  # Scraped government holiday
    COMPANY = "company"  # Company-declared holiday
    LEAVE = "leave"  # Personal leave


ALL_STATES = "ALL"
MULTIPLE_STATES = "MULTI"


@dataclass(frozen=True)
class CalendarEventItem:
    """One holiday or leave day shown on a calendar."""

    id: str
    holiday_date: date
    description: str
    state_code: str | None = None
    event_source: str | None = None
    calendar_id: str | None = None
    is_personal_leave: bool = False
    is_replacement: bool = False
    holiday_type: str | None = None
    leave_type: str | None = None
    leave_status: str | None = None
    is_hr_modified: bool = False

    # Populated by consolidation
    state_codes: tuple[str, ...] = field(default=())
    source_ids: tuple[str, ...] = field(default=())

    @property
    def source(self) -> str:
        """Event source, defaulting to government holiday."""
        return self.event_source or EventSource.HOLIDAY.value

    @property
    def is_leave(self) -> bool:
        return self.source == EventSource.LEAVE.value or self.is_personal_leave

    def applies_to_state(self, state_code: str | None) -> bool:
        """Whether this event covers the given state.

        Company holidays apply everywhere; government holidays apply when
        scoped to ALL or to the given state. A holiday carrying no state
        scope at all is treated as nationwide.
        """
        if self.source == EventSource.COMPANY.value:
            return True
        scope = set(self.state_codes)
        if self.state_code:
            scope.add(self.state_code)
        if not scope or ALL_STATES in scope:
            return True
        return state_code is not None and state_code in scope
