"""Type definitions for overtime pay calculation."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from uuid import UUID

from overtime_engine.models.enums import DayType

__all__ = ["DayType", "RateBreakdown", "OTSession", "SessionShare", "DayTypeCorrection"]


@dataclass(frozen=True)
class RateBreakdown:
    """Result of pricing one block of overtime."""

    day_type: DayType
    hours: Decimal
    orp: Decimal  # Unrounded ordinary rate of pay (per day)
    hrp: Decimal  # Unrounded hourly rate of pay
    ot_amount: Decimal  # Rounded to cents

    def to_canonical_dict(self) -> dict[str, str]:
        """Return canonical dict (string amounts, deterministic keys)."""
        return {
            "day_type": self.day_type.value,
            "hours": str(self.hours),
            "orp": str(self.orp),
            "hrp": str(self.hrp),
            "ot_amount": str(self.ot_amount),
        }


@dataclass(frozen=True)
class OTSession:
    """One non-rejected OT session worked on a given date."""

    request_id: UUID
    hours: Decimal


@dataclass(frozen=True)
class SessionShare:
    """A session's proportional share of the daily OT amount."""

    request_id: UUID
    session_hours: Decimal
    daily_hours: Decimal
    daily_amount: Decimal
    session_amount: Decimal


@dataclass(frozen=True)
class DayTypeCorrection:
    """Comparison between a recorded amount and the amount for the correct day type."""

    old_day_type: DayType
    new_day_type: DayType
    old_amount: Decimal
    new_amount: Decimal

    @property
    def difference(self) -> Decimal:
        """Positive when the recorded amount underpaid the employee."""
        return self.new_amount - self.old_amount

    @property
    def is_underpaid(self) -> bool:
        return self.difference > 0
