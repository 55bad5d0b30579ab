"""Holiday and leave calendar handling."""

from overtime_engine.calendars.consolidation import (
    ConsolidationKeyCollision,
    consolidate_holidays,
    hash_key,
    primary_state_code,
)
from overtime_engine.calendars.types import (
    ALL_STATES,
    MULTIPLE_STATES,
    CalendarEventItem,
    EventSource,
)

__all__ = [
    "ALL_STATES",
    "MULTIPLE_STATES",
    "CalendarEventItem",
    "ConsolidationKeyCollision",
    "EventSource",
    "consolidate_holidays",
    "hash_key",
    "primary_state_code",
]
