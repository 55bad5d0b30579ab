"""ORM models for the overtime engine."""

from overtime_engine.models.base import Base, TimestampMixin, UpdatedAtMixin
from overtime_engine.models.enums import ApprovalRoute, ApproverRole, DayType, OTStatus
from overtime_engine.models.ot_request import (
    OTRequest,
    OTSettings,
    RequestAuditEvent,
    ResubmissionHistory,
)

__all__ = [
    "Base",
    "TimestampMixin",
    "UpdatedAtMixin",
    "ApprovalRoute",
    "ApproverRole",
    "DayType",
    "OTStatus",
    "OTRequest",
    "OTSettings",
    "RequestAuditEvent",
    "ResubmissionHistory",
]
