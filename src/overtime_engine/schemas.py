"""Pydantic schemas for employee OT payloads."""

from datetime import date, datetime, time
from decimal import ROUND_HALF_UP, Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from overtime_engine.models.enums import DayType

MAX_REASON_LENGTH = 1000
MINUTES_PER_DAY = 24 * 60


def compute_total_hours(start_time: time, end_time: time) -> Decimal:
    """Hours between two clock times; an end at or before the start crosses midnight."""
    start_minutes = start_time.hour * 60 + start_time.minute
    end_minutes = end_time.hour * 60 + end_time.minute
    minutes = end_minutes - start_minutes
    if minutes <= 0:
        minutes += MINUTES_PER_DAY
    return (Decimal(minutes) / Decimal(60)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


# ============================================================================
# Submission schemas
# ============================================================================


class OTSubmission(BaseModel):
    """Schema for a new OT claim."""

    model_config = ConfigDict(str_strip_whitespace=True)

    ot_date: date
    start_time: time
    end_time: time
    reason: str = Field(min_length=1, max_length=MAX_REASON_LENGTH)
    day_type: DayType | None = None  # Derived from the holiday calendar when omitted
    ot_location_state: str | None = Field(default=None, max_length=8)
    attachment_urls: list[str] = Field(default_factory=list)
    respective_supervisor_id: UUID | None = None
    eligibility_rule_id: UUID | None = None
    threshold_id: UUID | None = None

    @field_validator("ot_date", mode="before")
    @classmethod
    def _strip_time_of_day(cls, value: object) -> object:
        if isinstance(value, datetime):
            return value.date()
        return value

    @model_validator(mode="after")
    def _check_session_length(self) -> "OTSubmission":
        if self.start_time == self.end_time:
            raise ValueError("start_time and end_time must differ")
        return self

    @property
    def total_hours(self) -> Decimal:
        return compute_total_hours(self.start_time, self.end_time)


class OTResubmission(OTSubmission):
    """Schema for resubmitting a rejected claim as a new request."""

    parent_request_id: UUID


class OTAmendment(BaseModel):
    """Schema for an employee editing a request that no approver has acted on.

    The respective supervisor is not amendable: the route is fixed at creation.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    ot_date: date | None = None
    start_time: time | None = None
    end_time: time | None = None
    reason: str | None = Field(default=None, min_length=1, max_length=MAX_REASON_LENGTH)
    day_type: DayType | None = None
    ot_location_state: str | None = Field(default=None, max_length=8)
    attachment_urls: list[str] | None = None
