"""OT request, resubmission history, audit and settings models."""

from __future__ import annotations

from datetime import date, datetime, time
from decimal import Decimal
from uuid import UUID, uuid4

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Date,
    Enum as SAEnum,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    Time,
)
from sqlalchemy.orm import Mapped, mapped_column

from overtime_engine.models.base import Base, TimestampMixin, UpdatedAtMixin
from overtime_engine.models.enums import ApprovalRoute, ApproverRole, DayType, OTStatus


def _enum_column(enum_cls: type) -> SAEnum:
    """Store enum values (not member names) in a portable VARCHAR column."""
    return SAEnum(
        enum_cls,
        native_enum=False,
        length=64,
        values_callable=lambda members: [m.value for m in members],
        validate_strings=True,
    )


class OTRequest(Base, TimestampMixin, UpdatedAtMixin):
    """One claimed overtime session."""

    __tablename__ = "ot_request"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    ticket_number: Mapped[str] = mapped_column(String(32), nullable=False, unique=True)

    # Ownership
    employee_id: Mapped[UUID] = mapped_column(nullable=False, index=True)
    supervisor_id: Mapped[UUID | None] = mapped_column(nullable=True)
    respective_supervisor_id: Mapped[UUID | None] = mapped_column(nullable=True)
    hr_id: Mapped[UUID | None] = mapped_column(nullable=True)
    management_id: Mapped[UUID | None] = mapped_column(nullable=True)

    # Work facts
    ot_date: Mapped[date] = mapped_column(Date, nullable=False)
    ot_location_state: Mapped[str | None] = mapped_column(String(8), nullable=True)
    start_time: Mapped[time] = mapped_column(Time, nullable=False)
    end_time: Mapped[time] = mapped_column(Time, nullable=False)
    total_hours: Mapped[Decimal] = mapped_column(Numeric(6, 2), nullable=False)
    day_type: Mapped[DayType] = mapped_column(_enum_column(DayType), nullable=False)
    reason: Mapped[str] = mapped_column(Text, nullable=False)
    attachment_urls: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)

    # Monetary facts (derived)
    orp: Mapped[Decimal | None] = mapped_column(Numeric(14, 6), nullable=True)
    hrp: Mapped[Decimal | None] = mapped_column(Numeric(14, 6), nullable=True)
    ot_amount: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)

    # Workflow
    status: Mapped[OTStatus] = mapped_column(_enum_column(OTStatus), nullable=False)

    supervisor_confirmed_at: Mapped[datetime | None] = mapped_column(nullable=True)
    supervisor_verified_at: Mapped[datetime | None] = mapped_column(nullable=True)
    supervisor_remarks: Mapped[str | None] = mapped_column(Text, nullable=True)

    respective_supervisor_confirmed_at: Mapped[datetime | None] = mapped_column(nullable=True)
    respective_supervisor_remarks: Mapped[str | None] = mapped_column(Text, nullable=True)
    respective_supervisor_denied_at: Mapped[datetime | None] = mapped_column(nullable=True)
    respective_supervisor_denial_remarks: Mapped[str | None] = mapped_column(Text, nullable=True)

    hr_certified_at: Mapped[datetime | None] = mapped_column(nullable=True)
    hr_remarks: Mapped[str | None] = mapped_column(Text, nullable=True)

    management_reviewed_at: Mapped[datetime | None] = mapped_column(nullable=True)
    management_remarks: Mapped[str | None] = mapped_column(Text, nullable=True)

    rejection_stage: Mapped[ApproverRole | None] = mapped_column(
        _enum_column(ApproverRole), nullable=True
    )

    # Resubmission chain
    parent_request_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("ot_request.id", ondelete="RESTRICT"),
        nullable=True,
    )
    resubmission_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_resubmission: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # Configuration references (owned elsewhere)
    eligibility_rule_id: Mapped[UUID | None] = mapped_column(nullable=True)
    threshold_id: Mapped[UUID | None] = mapped_column(nullable=True)

    __table_args__ = (
        CheckConstraint("total_hours > 0", name="total_hours_positive"),
        CheckConstraint("resubmission_count >= 0", name="resubmission_count_non_negative"),
    )

    @property
    def route(self) -> ApprovalRoute:
        """Route implied by the respective supervisor selection."""
        return ApprovalRoute.B if self.respective_supervisor_id is not None else ApprovalRoute.A


class ResubmissionHistory(Base, TimestampMixin):
    """Link between a rejected request and the request that replaced it."""

    __tablename__ = "ot_resubmission_history"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    original_request_id: Mapped[UUID] = mapped_column(
        ForeignKey("ot_request.id", ondelete="CASCADE"),
        nullable=False,
    )
    resubmitted_request_id: Mapped[UUID] = mapped_column(
        ForeignKey("ot_request.id", ondelete="CASCADE"),
        nullable=False,
    )
    rejected_by_role: Mapped[ApproverRole] = mapped_column(
        _enum_column(ApproverRole), nullable=False
    )
    rejection_reason: Mapped[str] = mapped_column(Text, nullable=False)


class RequestAuditEvent(Base, TimestampMixin):
    """Append-only record of a status change."""

    __tablename__ = "ot_request_audit"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    request_id: Mapped[UUID] = mapped_column(
        ForeignKey("ot_request.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    action: Mapped[str] = mapped_column(String(64), nullable=False)
    from_status: Mapped[OTStatus | None] = mapped_column(_enum_column(OTStatus), nullable=True)
    to_status: Mapped[OTStatus] = mapped_column(_enum_column(OTStatus), nullable=False)
    actor_id: Mapped[UUID | None] = mapped_column(nullable=True)
    actor_role: Mapped[ApproverRole] = mapped_column(_enum_column(ApproverRole), nullable=False)
    remarks: Mapped[str | None] = mapped_column(Text, nullable=True)


class OTSettings(Base, UpdatedAtMixin):
    """Persisted submission policy (a single row)."""

    __tablename__ = "ot_settings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    cutoff_window_days: Mapped[int] = mapped_column(Integer, nullable=False, default=8)
    grace_period_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    __table_args__ = (
        CheckConstraint("cutoff_window_days >= 0", name="cutoff_window_non_negative"),
    )
