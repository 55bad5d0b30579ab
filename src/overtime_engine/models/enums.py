"""Enumerations persisted on overtime records."""

from __future__ import annotations

from enum import Enum


class OTStatus(str, Enum):
    """OT request status values."""

    PENDING_VERIFICATION = "pending_verification"
    SUPERVISOR_CONFIRMED = "supervisor_confirmed"
    PENDING_RESPECTIVE_SUPERVISOR_CONFIRMATION = "pending_respective_supervisor_confirmation"
    RESPECTIVE_SUPERVISOR_CONFIRMED = "respective_supervisor_confirmed"
    PENDING_SUPERVISOR_VERIFICATION = "pending_supervisor_verification"
    SUPERVISOR_VERIFIED = "supervisor_verified"
    HR_CERTIFIED = "hr_certified"
    MANAGEMENT_APPROVED = "management_approved"
    REJECTED = "rejected"


class ApproverRole(str, Enum):
    """Roles that act on an OT request."""

    EMPLOYEE = "employee"
    SUPERVISOR = "supervisor"
    RESPECTIVE_SUPERVISOR = "respective_supervisor"
    HR = "hr"
    MANAGEMENT = "management"
    SYSTEM = "system"


class DayType(str, Enum):
    """Classification of the work date driving the rate formula."""

    WEEKDAY = "weekday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"
    PUBLIC_HOLIDAY = "public_holiday"


class ApprovalRoute(str, Enum):
    """Approval path, fixed when the request is created.

    Route A goes straight to the direct supervisor; Route B asks the
    respective (instructing) supervisor to confirm first.
    """

    A = "route_a"
    B = "route_b"
