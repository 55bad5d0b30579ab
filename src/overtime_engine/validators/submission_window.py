"""Submission window validation for OT work dates."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta

DEFAULT_CUTOFF_WINDOW_DAYS = 8

FUTURE_DATE = "future date"


@dataclass(frozen=True)
class SubmissionPolicy:
    """Submission rules in force (persisted in ot_settings)."""

    cutoff_window_days: int = DEFAULT_CUTOFF_WINDOW_DAYS
    grace_period_enabled: bool = False

    @property
    def outside_window_reason(self) -> str:
        return f"outside {self.cutoff_window_days}-day window"


@dataclass(frozen=True)
class SubmissionDecision:
    """Outcome of a submission window check."""

    allowed: bool
    reason: str | None = None

    @classmethod
    def allow(cls) -> SubmissionDecision:
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: str) -> SubmissionDecision:
        return cls(allowed=False, reason=reason)


class SubmissionWindowViolation(Exception):
    """Raised when a work date falls outside the allowed submission window."""

    def __init__(self, work_date: date, today: date, reason: str):
        self.work_date = work_date
        self.today = today
        self.reason = reason
        super().__init__(f"Cannot submit OT for {work_date.isoformat()}: {reason}")


def _as_date(value: date | datetime) -> date:
    # datetime is a date subclass; drop the time of day
    if isinstance(value, datetime):
        return value.date()
    return value


def can_submit(
    work_date: date | datetime,
    today: date | datetime,
    policy: SubmissionPolicy | None = None,
) -> SubmissionDecision:
    """Check whether OT worked on ``work_date`` may be claimed on ``today``.

    Rules, in order:
    1. Future dates are always denied (grace period included)
    2. With the grace period enabled any past date is allowed
    3. Otherwise the date must be no older than ``cutoff_window_days``
       (the boundary day itself is allowed)
    """
    policy = policy or SubmissionPolicy()
    work_day = _as_date(work_date)
    current_day = _as_date(today)

    if work_day > current_day:
        return SubmissionDecision.deny(FUTURE_DATE)

    if policy.grace_period_enabled:
        return SubmissionDecision.allow()

    cutoff = current_day - timedelta(days=policy.cutoff_window_days)
    if work_day < cutoff:
        return SubmissionDecision.deny(policy.outside_window_reason)

    return SubmissionDecision.allow()


def can_submit_range(
    start_date: date | datetime,
    end_date: date | datetime,
    today: date | datetime,
    policy: SubmissionPolicy | None = None,
) -> SubmissionDecision:
    """Check both ends of a date range, returning the first failure (start first)."""
    start_decision = can_submit(start_date, today, policy)
    if not start_decision.allowed:
        return start_decision

    return can_submit(end_date, today, policy)


def ensure_can_submit(
    work_date: date | datetime,
    today: date | datetime,
    policy: SubmissionPolicy | None = None,
) -> None:
    """Raise SubmissionWindowViolation unless the date may be claimed."""
    decision = can_submit(work_date, today, policy)
    if not decision.allowed:
        raise SubmissionWindowViolation(
            _as_date(work_date), _as_date(today), decision.reason or "not allowed"
        )


def submission_rule_message(policy: SubmissionPolicy | None = None) -> str:
    """Human-readable summary of the active submission rule."""
    policy = policy or SubmissionPolicy()
    if policy.grace_period_enabled:
        return (
            "OT submissions follow these rules:\n"
            "- Grace period is active: any past date may be submitted\n"
            "- Future dates cannot be submitted"
        )
    return (
        "OT submissions follow these rules:\n"
        f"- OT can be submitted within {policy.cutoff_window_days} days of the date worked\n"
        "- Future dates cannot be submitted"
    )
