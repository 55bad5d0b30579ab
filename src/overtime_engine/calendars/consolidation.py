"""Holiday calendar consolidation.

Government holidays are scraped per state, so a single national event
(e.g. "Hari Raya Aidilfitri") arrives as one record per state. For display,
records sharing (source, date, description) collapse into one canonical
record whose scope is the union of the contributors' state codes.

Personal leave is never merged.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable

from overtime_engine.calendars.types import ALL_STATES, MULTIPLE_STATES, CalendarEventItem

SYNTHETIC_ID_PREFIX = "c:"


class ConsolidationKeyCollision(Exception):
    """Raised when two different group keys produce the same synthetic id."""

    def __init__(self, synthetic_id: str, first_key: str, second_key: str):
        self.synthetic_id = synthetic_id
        self.first_key = first_key
        self.second_key = second_key
        super().__init__(
            f"Synthetic id '{synthetic_id}' generated for both "
            f"'{first_key}' and '{second_key}'"
        )


def hash_key(value: str) -> str:
    """djb2-style string hash, as unsigned 32-bit hex.

    Only used to derive stable synthetic ids; not a security primitive.
    """
    h = 5381
    for char in value:
        h = ((h * 33) ^ ord(char)) & 0xFFFFFFFF
    return format(h, "x")


def group_key(item: CalendarEventItem) -> str:
    """Composite key identifying one logical holiday."""
    return f"{item.source}|{item.holiday_date.isoformat()}|{item.description}"


def primary_state_code(state_codes: Iterable[str]) -> str | None:
    """Canonical state code for a merged record: ALL, the single code, or MULTI."""
    codes = list(state_codes)
    if ALL_STATES in codes:
        return ALL_STATES
    if len(codes) == 1:
        return codes[0]
    if len(codes) > 1:
        return MULTIPLE_STATES
    return None


def _pass_through(item: CalendarEventItem) -> CalendarEventItem:
    # Already-consolidated records keep their scope so a second pass is a no-op
    state_codes = item.state_codes or ((item.state_code,) if item.state_code else ())
    source_ids = item.source_ids or (item.id,)
    return replace(item, state_codes=tuple(state_codes), source_ids=tuple(source_ids))


def _merge(key: str, group: list[CalendarEventItem]) -> CalendarEventItem:
    first = group[0]
    state_codes = tuple(sorted({g.state_code for g in group if g.state_code}))
    holiday_type = next(
        (g.holiday_type for g in group if g.holiday_type is not None),
        first.holiday_type,
    )

    return replace(
        first,
        id=f"{SYNTHETIC_ID_PREFIX}{hash_key(key)}",
        state_code=primary_state_code(state_codes),
        state_codes=state_codes,
        source_ids=tuple(g.id for g in group),
        is_replacement=any(g.is_replacement for g in group),
        is_hr_modified=any(g.is_hr_modified for g in group),
        holiday_type=holiday_type,
    )


def consolidate_holidays(items: Iterable[CalendarEventItem]) -> list[CalendarEventItem]:
    """Merge per-state holiday records into one record per logical holiday.

    Args:
        items: Raw calendar events (holidays, company holidays, leave)

    Returns:
        Pass-through and merged records sorted by (date, description)

    Raises:
        ConsolidationKeyCollision: if two distinct groups hash to the same id
    """
    passthrough: list[CalendarEventItem] = []
    grouped: dict[str, list[CalendarEventItem]] = {}

    for item in items:
        if item.is_leave:
            passthrough.append(_pass_through(item))
            continue
        grouped.setdefault(group_key(item), []).append(item)

    consolidated: list[CalendarEventItem] = []
    synthetic_keys: dict[str, str] = {}

    for key, group in grouped.items():
        if len(group) == 1:
            consolidated.append(_pass_through(group[0]))
            continue

        merged = _merge(key, group)
        existing = synthetic_keys.get(merged.id)
        if existing is not None and existing != key:
            raise ConsolidationKeyCollision(merged.id, existing, key)
        synthetic_keys[merged.id] = key
        consolidated.append(merged)

    result = passthrough + consolidated
    # Stable sort: ties keep leave first, then groups in first-seen order
    result.sort(key=lambda e: (e.holiday_date, e.description or ""))
    return result
