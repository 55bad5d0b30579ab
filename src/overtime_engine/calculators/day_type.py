"""Day type resolution from the work date and the holiday calendar."""

from __future__ import annotations

from datetime import date
from typing import Iterable

from overtime_engine.calculators.types import DayType
from overtime_engine.calendars.types import CalendarEventItem

SATURDAY = 5
SUNDAY = 6


def is_public_holiday(
    work_date: date,
    holidays: Iterable[CalendarEventItem],
    location_state: str | None = None,
) -> bool:
    """Whether any non-leave calendar event on the date covers the location."""
    return any(
        event.holiday_date == work_date
        and not event.is_leave
        and event.applies_to_state(location_state)
        for event in holidays
    )


def determine_day_type(
    work_date: date,
    holidays: Iterable[CalendarEventItem] = (),
    location_state: str | None = None,
) -> DayType:
    """Classify a work date for OT pricing.

    Holidays take precedence over the weekday; the location state is where
    the overtime was worked, which selects state-scoped holidays.
    """
    if is_public_holiday(work_date, holidays, location_state):
        return DayType.PUBLIC_HOLIDAY

    weekday = work_date.weekday()
    if weekday == SUNDAY:
        return DayType.SUNDAY
    if weekday == SATURDAY:
        return DayType.SATURDAY
    return DayType.WEEKDAY
