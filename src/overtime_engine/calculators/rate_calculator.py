"""Statutory overtime pay calculation.

Rates derive from the monthly basic salary:

    ORP = salary / 26   (ordinary rate of pay, per day)
    HRP = ORP / 8       (hourly rate of pay)

Formula table:

    weekday         1.5 x HRP x hours
    saturday        2 x HRP x hours
    sunday          <= 4h: 0.5 x ORP
                    <= 8h: 1 x ORP
                    >  8h: 1 x ORP + 2 x HRP x (hours - 8)
    public_holiday  <= 8h: 2 x ORP
                    >  8h: 2 x ORP + 3 x HRP x (hours - 8)

All arithmetic is Decimal; only the final amount is rounded (half-up, cents).
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Sequence, Union

from overtime_engine.calculators.types import (
    DayType,
    DayTypeCorrection,
    OTSession,
    RateBreakdown,
    SessionShare,
)

Number = Union[Decimal, int, str, float]

WORKING_DAYS_PER_MONTH = Decimal("26")
HOURS_PER_DAY = Decimal("8")
SUNDAY_HALF_DAY_HOURS = Decimal("4")
CENTS = Decimal("0.01")


class InvalidRateInput(Exception):
    """Base class for rejected calculator inputs."""


class NonPositiveHoursError(InvalidRateInput):
    """Raised when hours worked is zero or negative."""

    def __init__(self, hours: Decimal):
        self.hours = hours
        super().__init__(f"Hours worked must be greater than zero (got {hours})")


class NonPositiveSalaryError(InvalidRateInput):
    """Raised when the salary used for OT is zero or negative."""

    def __init__(self, salary: Decimal):
        self.salary = salary
        super().__init__(f"Basic salary must be greater than zero (got {salary})")


class UnknownDayTypeError(InvalidRateInput):
    """Raised when the day type is not one of the known classifications."""

    def __init__(self, day_type: object):
        self.day_type = day_type
        valid = ", ".join(d.value for d in DayType)
        super().__init__(f"Unknown day type {day_type!r} (expected one of: {valid})")


def _to_decimal(value: Number, field: str) -> Decimal:
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            # str() keeps floats at their shortest repr
            result = Decimal(str(value))
        except (InvalidOperation, ValueError) as e:
            raise InvalidRateInput(f"{field} is not a number: {value!r}") from e
    if not result.is_finite():
        raise InvalidRateInput(f"{field} must be finite (got {value!r})")
    return result


def coerce_day_type(day_type: DayType | str) -> DayType:
    """Return the DayType for a member or its string value."""
    if isinstance(day_type, DayType):
        return day_type
    try:
        return DayType(day_type)
    except ValueError:
        raise UnknownDayTypeError(day_type) from None


def round_currency(amount: Decimal) -> Decimal:
    """Round to cents using half-up rounding."""
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


def resolve_ot_base(basic_salary: Number, ot_base: Number | None = None) -> Decimal:
    """Salary used for OT: the OT base override when set, else basic salary."""
    if ot_base is not None:
        return _to_decimal(ot_base, "ot_base")
    return _to_decimal(basic_salary, "basic_salary")


def compute_orp(basic_salary: Number) -> Decimal:
    """Ordinary rate of pay (daily) for a monthly salary."""
    salary = _to_decimal(basic_salary, "basic_salary")
    if salary <= 0:
        raise NonPositiveSalaryError(salary)
    return salary / WORKING_DAYS_PER_MONTH


def compute_hrp(basic_salary: Number) -> Decimal:
    """Hourly rate of pay for a monthly salary."""
    return compute_orp(basic_salary) / HOURS_PER_DAY


def _raw_amount(day_type: DayType, hours: Decimal, orp: Decimal, hrp: Decimal) -> Decimal:
    if day_type == DayType.WEEKDAY:
        return Decimal("1.5") * hrp * hours

    if day_type == DayType.SATURDAY:
        return Decimal("2") * hrp * hours

    if day_type == DayType.SUNDAY:
        if hours <= SUNDAY_HALF_DAY_HOURS:
            return Decimal("0.5") * orp
        if hours <= HOURS_PER_DAY:
            return orp
        return orp + Decimal("2") * hrp * (hours - HOURS_PER_DAY)

    # Public holiday
    if hours <= HOURS_PER_DAY:
        return Decimal("2") * orp
    return Decimal("2") * orp + Decimal("3") * hrp * (hours - HOURS_PER_DAY)


def calculate_ot_amount(
    basic_salary: Number,
    day_type: DayType | str,
    hours_worked: Number,
) -> RateBreakdown:
    """Price a block of overtime.

    Args:
        basic_salary: Monthly salary (or OT base override)
        day_type: Classification of the work date
        hours_worked: Total hours, must be > 0

    Returns:
        RateBreakdown with unrounded ORP/HRP and the amount rounded to cents

    Raises:
        NonPositiveSalaryError, UnknownDayTypeError, NonPositiveHoursError
    """
    resolved_day_type = coerce_day_type(day_type)
    hours = _to_decimal(hours_worked, "hours_worked")
    if hours <= 0:
        raise NonPositiveHoursError(hours)

    orp = compute_orp(basic_salary)
    hrp = orp / HOURS_PER_DAY

    amount = _raw_amount(resolved_day_type, hours, orp, hrp)

    return RateBreakdown(
        day_type=resolved_day_type,
        hours=hours,
        orp=orp,
        hrp=hrp,
        ot_amount=round_currency(amount),
    )


def distribute_daily_amount(
    sessions: Sequence[OTSession],
    basic_salary: Number,
    day_type: DayType | str,
) -> list[SessionShare]:
    """Split a day's OT amount across the sessions worked that day.

    The formula is applied once to the total hours of the day (so Sunday and
    public-holiday bands see the whole day), then each session receives a
    share proportional to its hours. The last session absorbs the rounding
    residue so that the shares always sum to the daily amount.
    """
    if not sessions:
        return []

    daily_hours = sum((_to_decimal(s.hours, "hours") for s in sessions), Decimal("0"))
    daily = calculate_ot_amount(basic_salary, day_type, daily_hours)

    shares: list[SessionShare] = []
    allocated = Decimal("0")
    for index, session in enumerate(sessions):
        session_hours = _to_decimal(session.hours, "hours")
        if session_hours <= 0:
            raise NonPositiveHoursError(session_hours)

        if index == len(sessions) - 1:
            session_amount = daily.ot_amount - allocated
        else:
            session_amount = round_currency(session_hours / daily_hours * daily.ot_amount)
            allocated += session_amount

        shares.append(
            SessionShare(
                request_id=session.request_id,
                session_hours=session_hours,
                daily_hours=daily_hours,
                daily_amount=daily.ot_amount,
                session_amount=session_amount,
            )
        )

    return shares


def recalculate_for_day_type(
    basic_salary: Number,
    hours_worked: Number,
    recorded_day_type: DayType | str,
    correct_day_type: DayType | str,
    recorded_amount: Number | None = None,
) -> DayTypeCorrection:
    """Compare a recorded OT amount with the amount for the correct day type.

    When ``recorded_amount`` is omitted it is recomputed from the recorded
    day type, which is what a miscoded request would have been paid.
    """
    old_day_type = coerce_day_type(recorded_day_type)
    new_day_type = coerce_day_type(correct_day_type)

    if recorded_amount is None:
        old_amount = calculate_ot_amount(basic_salary, old_day_type, hours_worked).ot_amount
    else:
        old_amount = round_currency(_to_decimal(recorded_amount, "recorded_amount"))

    new_amount = calculate_ot_amount(basic_salary, new_day_type, hours_worked).ot_amount

    return DayTypeCorrection(
        old_day_type=old_day_type,
        new_day_type=new_day_type,
        old_amount=old_amount,
        new_amount=new_amount,
    )
