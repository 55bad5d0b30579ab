"""Overtime pay calculation."""

from overtime_engine.calculators.day_type import determine_day_type, is_public_holiday
from overtime_engine.calculators.rate_calculator import (
    InvalidRateInput,
    NonPositiveHoursError,
    NonPositiveSalaryError,
    UnknownDayTypeError,
    calculate_ot_amount,
    compute_hrp,
    compute_orp,
    distribute_daily_amount,
    recalculate_for_day_type,
    resolve_ot_base,
)
from overtime_engine.calculators.types import (
    DayType,
    DayTypeCorrection,
    OTSession,
    RateBreakdown,
    SessionShare,
)

__all__ = [
    "DayType",
    "DayTypeCorrection",
    "InvalidRateInput",
    "NonPositiveHoursError",
    "NonPositiveSalaryError",
    "OTSession",
    "RateBreakdown",
    "SessionShare",
    "UnknownDayTypeError",
    "calculate_ot_amount",
    "compute_hrp",
    "compute_orp",
    "determine_day_type",
    "distribute_daily_amount",
    "is_public_holiday",
    "recalculate_for_day_type",
    "resolve_ot_base",
]
