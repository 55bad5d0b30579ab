"""Request lifecycle service - orchestrates OT requests through approval."""

from __future__ import annotations

import logging
import secrets
import string
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Callable, Iterable, Sequence
from uuid import UUID
from zoneinfo import ZoneInfo

from overtime_engine.calculators.day_type import determine_day_type
from overtime_engine.calculators.rate_calculator import (
    Number,
    calculate_ot_amount,
    resolve_ot_base,
)
from overtime_engine.calculators.types import RateBreakdown
from overtime_engine.calendars.types import CalendarEventItem
from overtime_engine.config import get_settings
from overtime_engine.models import (
    ApproverRole,
    OTRequest,
    OTStatus,
    RequestAuditEvent,
    ResubmissionHistory,
)
from overtime_engine.schemas import OTAmendment, OTResubmission, OTSubmission, compute_total_hours
from overtime_engine.services.notifications import (
    Notification,
    NotificationDispatcher,
    NotificationType,
)
from overtime_engine.services.repository import RequestNotFoundError, RequestRepository
from overtime_engine.services.state_machine import (
    ApprovalAction,
    InvalidTransitionError,
    OTRequestStateMachine,
)
from overtime_engine.validators.remarks import validate_denial_remarks, validate_remarks
from overtime_engine.validators.submission_window import ensure_can_submit

logger = logging.getLogger(__name__)

NO_REMARKS_PROVIDED = "No remarks provided"
TICKET_ALPHABET = string.ascii_uppercase + string.digits
RATE_PLACES = Decimal("0.000001")
TICKET_ATTEMPTS = 5

# Actions whose remarks are mandatory
REMARKS_REQUIRED = {
    ApprovalAction.REJECT,
    ApprovalAction.HR_RETURN,
    ApprovalAction.MANAGEMENT_REJECT,
}


class UnauthorizedActorError(Exception):
    """Raised when the actor is not the one assigned to the request's stage."""

    def __init__(self, request_id: UUID, actor_id: UUID | None, role: str, reason: str):
        self.request_id = request_id
        self.actor_id = actor_id
        self.role = role
        self.reason = reason
        super().__init__(f"Actor {actor_id} cannot act on OT request {request_id}: {reason}")


class TicketNumberUnavailableError(Exception):
    """Raised when no unused ticket number was found for a work date."""

    def __init__(self, ot_date: date, attempts: int):
        self.ot_date = ot_date
        self.attempts = attempts
        super().__init__(f"No free ticket number for {ot_date} after {attempts} attempts")


def generate_ticket_number(ot_date: date) -> str:
    """Human-readable ticket number, e.g. OT-20260128-7QX2."""
    suffix = "".join(secrets.choice(TICKET_ALPHABET) for _ in range(4))
    return f"OT-{ot_date:%Y%m%d}-{suffix}"


def select_rejection_reason(request: OTRequest) -> str:
    """Most relevant remark explaining why a request was rejected.

    Precedence: respective supervisor denial, supervisor, HR, management.
    """
    for remarks in (
        request.respective_supervisor_denial_remarks,
        request.supervisor_remarks,
        request.hr_remarks,
        request.management_remarks,
    ):
        if remarks:
            return remarks
    return NO_REMARKS_PROVIDED


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RequestLifecycleService:
    """Service for managing the OT request lifecycle.

    Operations:
    - submit_request: validate the date, price the claim, create it on its route
    - resubmit_request: create a new request from a rejected one
    - amend_request: employee edits before any approver has acted
    - transition: apply an approver action (with named wrappers per action)
    - bulk_management_approve: approve many HR-certified requests at once

    Every single-request write is a compare-and-swap on status; a lost race
    surfaces as ConcurrentModificationError from the repository.
    """

    def __init__(
        self,
        repository: RequestRepository,
        dispatcher: NotificationDispatcher | None = None,
        clock: Callable[[], datetime] = _utcnow,
        timezone_name: str | None = None,
    ):
        self.repository = repository
        self.dispatcher = dispatcher or NotificationDispatcher()
        self.clock = clock
        # Work dates are local calendar dates
        self.tz = ZoneInfo(timezone_name or get_settings().timezone)

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------

    async def submit_request(
        self,
        employee_id: UUID,
        supervisor_id: UUID | None,
        submission: OTSubmission,
        basic_salary: Number,
        ot_base: Number | None = None,
        holidays: Iterable[CalendarEventItem] = (),
        today: date | None = None,
    ) -> OTRequest:
        """Create a new OT request in the initial state of its route."""
        await self._check_window(submission.ot_date, today)
        breakdown = self._price(submission, basic_salary, ot_base, holidays)

        ticket_number = await self._allocate_ticket_number(submission.ot_date)
        request = self._build_request(
            ticket_number, employee_id, supervisor_id, submission, breakdown
        )
        request = await self.repository.add_request(request)
        await self._audit(request, "submit", None, employee_id, ApproverRole.EMPLOYEE)

        logger.info(
            "OT request %s (%s) submitted by %s on %s",
            request.ticket_number,
            request.id,
            employee_id,
            request.route.value,
        )
        await self._notify(self._initial_notifications(request))
        return request

    async def resubmit_request(
        self,
        employee_id: UUID,
        resubmission: OTResubmission,
        basic_salary: Number,
        ot_base: Number | None = None,
        holidays: Iterable[CalendarEventItem] = (),
        today: date | None = None,
    ) -> OTRequest:
        """Create a new request replacing a rejected one.

        The route is chosen from the new respective supervisor selection,
        independent of the parent's route. The window is checked against the
        new work date.
        """
        parent = await self.repository.load_request(resubmission.parent_request_id)

        if parent.employee_id != employee_id:
            raise UnauthorizedActorError(
                parent.id, employee_id, ApproverRole.EMPLOYEE.value,
                "only the employee who submitted the request can resubmit it",
            )

        route = OTRequestStateMachine.route_for(resubmission.respective_supervisor_id)
        if parent.status != OTStatus.REJECTED:
            raise InvalidTransitionError(
                parent.status,
                OTRequestStateMachine.initial_status(route),
                ApproverRole.EMPLOYEE,
                "only rejected requests can be resubmitted",
            )

        await self._check_window(resubmission.ot_date, today)
        breakdown = self._price(resubmission, basic_salary, ot_base, holidays)

        ticket_number = await self._allocate_ticket_number(resubmission.ot_date)
        request = self._build_request(
            ticket_number, employee_id, parent.supervisor_id, resubmission, breakdown
        )
        request.parent_request_id = parent.id
        request.resubmission_count = (parent.resubmission_count or 0) + 1
        request.is_resubmission = True
        request = await self.repository.add_request(request)

        await self.repository.add_resubmission_history(
            ResubmissionHistory(
                original_request_id=parent.id,
                resubmitted_request_id=request.id,
                rejected_by_role=parent.rejection_stage or ApproverRole.SUPERVISOR,
                rejection_reason=select_rejection_reason(parent),
            )
        )
        await self._audit(request, "resubmit", None, employee_id, ApproverRole.EMPLOYEE)

        logger.info(
            "OT request %s resubmitted as %s (resubmission #%d)",
            parent.id,
            request.id,
            request.resubmission_count,
        )
        await self._notify(
            [
                Notification(
                    request_id=request.id,
                    notification_type=NotificationType.RESUBMITTED,
                    recipient_id=request.supervisor_id,
                ),
                *self._initial_notifications(request),
            ]
        )
        return request

    async def amend_request(
        self,
        request_id: UUID,
        employee_id: UUID,
        amendment: OTAmendment,
        basic_salary: Number,
        ot_base: Number | None = None,
        holidays: Iterable[CalendarEventItem] = (),
        today: date | None = None,
    ) -> OTRequest:
        """Edit work facts while the request sits in its route's initial state.

        Hours, day type and the monetary fields are recomputed.
        """
        request = await self.repository.load_request(request_id)
        if request.employee_id != employee_id:
            raise UnauthorizedActorError(
                request.id, employee_id, ApproverRole.EMPLOYEE.value,
                "only the employee who submitted the request can amend it",
            )

        prior_status = request.status
        if prior_status != OTRequestStateMachine.initial_status(request.route):
            raise InvalidTransitionError(
                prior_status,
                prior_status,
                ApproverRole.EMPLOYEE,
                "requests can only be amended before an approver acts on them",
            )

        changes = amendment.model_dump(exclude_unset=True, exclude_none=True)
        date_or_place_changed = "ot_date" in changes or "ot_location_state" in changes

        if "ot_date" in changes:
            await self._check_window(changes["ot_date"], today)
        if changes.get("start_time", request.start_time) == changes.get("end_time", request.end_time):
            raise ValueError("start_time and end_time must differ")

        for field_name, value in changes.items():
            if field_name != "day_type":
                setattr(request, field_name, value)

        if amendment.day_type is not None:
            request.day_type = amendment.day_type
        elif date_or_place_changed:
            request.day_type = determine_day_type(
                request.ot_date, list(holidays), request.ot_location_state
            )

        request.total_hours = compute_total_hours(request.start_time, request.end_time)
        self._apply_breakdown(
            request,
            calculate_ot_amount(
                resolve_ot_base(basic_salary, ot_base), request.day_type, request.total_hours
            ),
        )

        await self.repository.save_request(request, prior_status)
        await self._audit(request, "amend", prior_status, employee_id, ApproverRole.EMPLOYEE)
        return request

    async def reprice_request(
        self,
        request_id: UUID,
        basic_salary: Number,
        ot_base: Number | None = None,
    ) -> OTRequest:
        """Recompute ORP/HRP/amount after a salary change."""
        request = await self.repository.load_request(request_id)
        prior_status = request.status
        self._apply_breakdown(
            request,
            calculate_ot_amount(
                resolve_ot_base(basic_salary, ot_base), request.day_type, request.total_hours
            ),
        )
        await self.repository.save_request(request, prior_status)
        return request

    # ------------------------------------------------------------------
    # Approver actions
    # ------------------------------------------------------------------

    async def transition(
        self,
        request_id: UUID,
        action: ApprovalAction,
        actor_id: UUID | None,
        role: ApproverRole,
        remarks: str | None = None,
    ) -> OTRequest:
        """Apply one approver action to one request.

        Raises:
            RequestNotFoundError: unknown id
            InvalidTransitionError: action not legal from the current status/role
            UnauthorizedActorError: actor is not assigned to this stage
            InvalidRemarksError: remarks missing or malformed
            ConcurrentModificationError: status changed underneath (retryable)
        """
        action = ApprovalAction(action)
        role = ApproverRole(role)
        request = await self.repository.load_request(request_id)
        prior_status = OTStatus(request.status)

        target = OTRequestStateMachine.apply(request, action, role)
        self._authorize(request, role, actor_id)
        cleaned = self._validate_action_remarks(action, role, remarks)

        now = self.clock()
        self._record_stage(request, action, role, actor_id, cleaned, now)
        request.status = target
        steps = [(action.value, prior_status, target, actor_id, role)]

        # Route B: a confirmed request is handed straight to the direct supervisor
        if target == OTStatus.RESPECTIVE_SUPERVISOR_CONFIRMED:
            handoff = OTRequestStateMachine.apply(
                request, ApprovalAction.HANDOFF_TO_SUPERVISOR, ApproverRole.SYSTEM
            )
            request.status = handoff
            steps.append(
                (ApprovalAction.HANDOFF_TO_SUPERVISOR.value, target, handoff, None, ApproverRole.SYSTEM)
            )

        await self.repository.save_request(request, prior_status)

        for step_action, from_status, to_status, step_actor, step_role in steps:
            await self.repository.add_audit_event(
                RequestAuditEvent(
                    request_id=request.id,
                    action=step_action,
                    from_status=from_status,
                    to_status=to_status,
                    actor_id=step_actor,
                    actor_role=step_role,
                    remarks=cleaned if step_role == role else None,
                )
            )

        logger.info(
            "OT request %s: %s -> %s (%s by %s)",
            request.id,
            prior_status.value,
            OTStatus(request.status).value,
            action.value,
            actor_id,
        )
        await self._notify(self._transition_notifications(request, action, prior_status))
        return request

    async def supervisor_confirm(
        self, request_id: UUID, supervisor_id: UUID, remarks: str | None = None
    ) -> OTRequest:
        """Route A: direct supervisor confirms the claim."""
        return await self.transition(
            request_id, ApprovalAction.SUPERVISOR_CONFIRM, supervisor_id,
            ApproverRole.SUPERVISOR, remarks,
        )

    async def respective_supervisor_confirm(
        self, request_id: UUID, respective_supervisor_id: UUID, remarks: str | None = None
    ) -> OTRequest:
        """Route B: instructing supervisor confirms; the request moves on to the direct supervisor."""
        return await self.transition(
            request_id, ApprovalAction.RESPECTIVE_SUPERVISOR_CONFIRM, respective_supervisor_id,
            ApproverRole.RESPECTIVE_SUPERVISOR, remarks,
        )

    async def respective_supervisor_deny(
        self, request_id: UUID, respective_supervisor_id: UUID, denial_remarks: str
    ) -> OTRequest:
        """Route B: instructing supervisor denies; the request is rejected."""
        return await self.transition(
            request_id, ApprovalAction.RESPECTIVE_SUPERVISOR_DENY, respective_supervisor_id,
            ApproverRole.RESPECTIVE_SUPERVISOR, denial_remarks,
        )

    async def supervisor_verify(
        self, request_id: UUID, supervisor_id: UUID, remarks: str | None = None
    ) -> OTRequest:
        """Route B: direct supervisor verifies after the respective supervisor confirmed."""
        return await self.transition(
            request_id, ApprovalAction.SUPERVISOR_VERIFY, supervisor_id,
            ApproverRole.SUPERVISOR, remarks,
        )

    async def hr_certify(
        self, request_id: UUID, hr_id: UUID, remarks: str | None = None
    ) -> OTRequest:
        return await self.transition(
            request_id, ApprovalAction.HR_CERTIFY, hr_id, ApproverRole.HR, remarks
        )

    async def hr_return(self, request_id: UUID, hr_id: UUID, remarks: str) -> OTRequest:
        """Send a certified request back to the start of its route for amendment."""
        return await self.transition(
            request_id, ApprovalAction.HR_RETURN, hr_id, ApproverRole.HR, remarks
        )

    async def reject(
        self, request_id: UUID, actor_id: UUID, role: ApproverRole, remarks: str
    ) -> OTRequest:
        """Terminal rejection by whichever role holds the current stage."""
        return await self.transition(request_id, ApprovalAction.REJECT, actor_id, role, remarks)

    async def management_approve(
        self, request_id: UUID, management_id: UUID, remarks: str | None = None
    ) -> OTRequest:
        return await self.transition(
            request_id, ApprovalAction.MANAGEMENT_APPROVE, management_id,
            ApproverRole.MANAGEMENT, remarks,
        )

    async def management_reject(
        self, request_id: UUID, management_id: UUID, remarks: str
    ) -> OTRequest:
        """Send an approved request back to HR for recertification."""
        return await self.transition(
            request_id, ApprovalAction.MANAGEMENT_REJECT, management_id,
            ApproverRole.MANAGEMENT, remarks,
        )

    async def bulk_management_approve(
        self,
        request_ids: Sequence[UUID],
        management_id: UUID,
    ) -> int:
        """Approve many HR-certified requests with one set-based update.

        Every record is fetched and validated first; if any fails, nothing is
        written. The update itself is keyed by id only, so a record changed by
        someone else between the check and the update is still overwritten.

        Returns number of rows the update matched.
        """
        ids = list(dict.fromkeys(request_ids))
        if not ids:
            raise ValueError("No requests selected for approval")

        requests = await self.repository.load_requests_by_ids(ids)
        found = {r.id: r for r in requests}
        for request_id in ids:
            if request_id not in found:
                raise RequestNotFoundError(request_id)

        for request in requests:
            OTRequestStateMachine.apply(
                request, ApprovalAction.MANAGEMENT_APPROVE, ApproverRole.MANAGEMENT
            )

        prior = {r.id: OTStatus(r.status) for r in requests}
        now = self.clock()
        matched = await self.repository.bulk_update(
            ids,
            {
                "status": OTStatus.MANAGEMENT_APPROVED,
                "management_id": management_id,
                "management_reviewed_at": now,
                "updated_at": now,
            },
        )

        for request_id in ids:
            await self.repository.add_audit_event(
                RequestAuditEvent(
                    request_id=request_id,
                    action=ApprovalAction.MANAGEMENT_APPROVE.value,
                    from_status=prior[request_id],
                    to_status=OTStatus.MANAGEMENT_APPROVED,
                    actor_id=management_id,
                    actor_role=ApproverRole.MANAGEMENT,
                )
            )

        logger.info("Management %s bulk-approved %d OT request(s)", management_id, matched)
        await self._notify(
            [
                Notification(
                    request_id=r.id,
                    notification_type=NotificationType.MANAGEMENT_APPROVED,
                    recipient_id=r.employee_id,
                )
                for r in requests
            ]
        )
        return matched

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _check_window(self, work_date: date, today: date | None) -> None:
        policy = await self.repository.load_policy()
        ensure_can_submit(work_date, today or self.today(), policy)

    def today(self) -> date:
        """Current calendar date in the configured timezone."""
        return self.clock().astimezone(self.tz).date()

    async def _allocate_ticket_number(self, ot_date: date) -> str:
        for _ in range(TICKET_ATTEMPTS):
            ticket_number = generate_ticket_number(ot_date)
            if not await self.repository.ticket_number_exists(ticket_number):
                return ticket_number
        raise TicketNumberUnavailableError(ot_date, TICKET_ATTEMPTS)

    def _price(
        self,
        submission: OTSubmission,
        basic_salary: Number,
        ot_base: Number | None,
        holidays: Iterable[CalendarEventItem],
    ) -> RateBreakdown:
        day_type = submission.day_type or determine_day_type(
            submission.ot_date, list(holidays), submission.ot_location_state
        )
        return calculate_ot_amount(
            resolve_ot_base(basic_salary, ot_base), day_type, submission.total_hours
        )

    def _build_request(
        self,
        ticket_number: str,
        employee_id: UUID,
        supervisor_id: UUID | None,
        submission: OTSubmission,
        breakdown: RateBreakdown,
    ) -> OTRequest:
        route = OTRequestStateMachine.route_for(submission.respective_supervisor_id)
        request = OTRequest(
            ticket_number=ticket_number,
            employee_id=employee_id,
            supervisor_id=supervisor_id,
            respective_supervisor_id=submission.respective_supervisor_id,
            ot_date=submission.ot_date,
            ot_location_state=submission.ot_location_state,
            start_time=submission.start_time,
            end_time=submission.end_time,
            total_hours=breakdown.hours,
            reason=submission.reason,
            attachment_urls=list(submission.attachment_urls),
            eligibility_rule_id=submission.eligibility_rule_id,
            threshold_id=submission.threshold_id,
            status=OTRequestStateMachine.initial_status(route),
            resubmission_count=0,
            is_resubmission=False,
        )
        self._apply_breakdown(request, breakdown)
        return request

    @staticmethod
    def _apply_breakdown(request: OTRequest, breakdown: RateBreakdown) -> None:
        request.day_type = breakdown.day_type
        request.orp = breakdown.orp.quantize(RATE_PLACES)
        request.hrp = breakdown.hrp.quantize(RATE_PLACES)
        request.ot_amount = breakdown.ot_amount

    @staticmethod
    def _authorize(request: OTRequest, role: ApproverRole, actor_id: UUID | None) -> None:
        # HR and management are pools; authentication decides membership
        assigned_roles = (ApproverRole.SUPERVISOR, ApproverRole.RESPECTIVE_SUPERVISOR)
        if role in assigned_roles and actor_id is None:
            raise UnauthorizedActorError(
                request.id, actor_id, role.value, "an assigned approver id is required"
            )
        if role == ApproverRole.SUPERVISOR and actor_id != request.supervisor_id:
            raise UnauthorizedActorError(
                request.id, actor_id, role.value,
                "only the assigned supervisor can act on this request",
            )
        if role == ApproverRole.RESPECTIVE_SUPERVISOR and actor_id != request.respective_supervisor_id:
            raise UnauthorizedActorError(
                request.id, actor_id, role.value,
                "only the assigned respective supervisor can act on this request",
            )

    @staticmethod
    def _validate_action_remarks(
        action: ApprovalAction, role: ApproverRole, remarks: str | None
    ) -> str | None:
        # A respective supervisor rejecting is a denial whichever action names it
        if action == ApprovalAction.RESPECTIVE_SUPERVISOR_DENY or (
            action == ApprovalAction.REJECT and role == ApproverRole.RESPECTIVE_SUPERVISOR
        ):
            return validate_denial_remarks(remarks)
        return validate_remarks(remarks, required=action in REMARKS_REQUIRED)

    @staticmethod
    def _record_stage(
        request: OTRequest,
        action: ApprovalAction,
        role: ApproverRole,
        actor_id: UUID | None,
        remarks: str | None,
        now: datetime,
    ) -> None:
        """Stamp the per-stage timestamp, actor and remarks for an action."""
        if action == ApprovalAction.SUPERVISOR_CONFIRM:
            request.supervisor_confirmed_at = now
            if remarks:
                request.supervisor_remarks = remarks

        elif action == ApprovalAction.RESPECTIVE_SUPERVISOR_CONFIRM:
            request.respective_supervisor_confirmed_at = now
            if remarks:
                request.respective_supervisor_remarks = remarks

        elif action == ApprovalAction.RESPECTIVE_SUPERVISOR_DENY:
            request.respective_supervisor_denied_at = now
            request.respective_supervisor_denial_remarks = remarks
            request.rejection_stage = ApproverRole.RESPECTIVE_SUPERVISOR

        elif action == ApprovalAction.SUPERVISOR_VERIFY:
            request.supervisor_verified_at = now
            if remarks:
                request.supervisor_remarks = remarks

        elif action == ApprovalAction.HR_CERTIFY:
            request.hr_id = actor_id
            request.hr_certified_at = now
            if remarks:
                request.hr_remarks = remarks

        elif action == ApprovalAction.HR_RETURN:
            # Every stage up to HR must be redone on the route
            request.hr_id = actor_id
            request.hr_remarks = remarks
            request.hr_certified_at = None
            request.supervisor_confirmed_at = None
            request.supervisor_verified_at = None
            request.respective_supervisor_confirmed_at = None

        elif action == ApprovalAction.REJECT:
            request.rejection_stage = role
            if role == ApproverRole.SUPERVISOR:
                request.supervisor_remarks = remarks
            elif role == ApproverRole.RESPECTIVE_SUPERVISOR:
                request.respective_supervisor_denied_at = now
                request.respective_supervisor_denial_remarks = remarks
            elif role == ApproverRole.HR:
                request.hr_id = actor_id
                request.hr_remarks = remarks

        elif action == ApprovalAction.MANAGEMENT_APPROVE:
            request.management_id = actor_id
            request.management_reviewed_at = now
            if remarks:
                request.management_remarks = remarks

        elif action == ApprovalAction.MANAGEMENT_REJECT:
            request.management_id = actor_id
            request.management_reviewed_at = now
            request.management_remarks = remarks
            request.hr_certified_at = None

    async def _audit(
        self,
        request: OTRequest,
        action: str,
        from_status: OTStatus | None,
        actor_id: UUID | None,
        role: ApproverRole,
    ) -> None:
        await self.repository.add_audit_event(
            RequestAuditEvent(
                request_id=request.id,
                action=action,
                from_status=from_status,
                to_status=request.status,
                actor_id=actor_id,
                actor_role=role,
            )
        )

    @staticmethod
    def _initial_notifications(request: OTRequest) -> list[Notification]:
        if request.respective_supervisor_id is not None:
            return [
                Notification(
                    request_id=request.id,
                    notification_type=NotificationType.RESPECTIVE_SUPERVISOR_CONFIRMATION_REQUESTED,
                    recipient_id=request.respective_supervisor_id,
                )
            ]
        return [
            Notification(
                request_id=request.id,
                notification_type=NotificationType.SUPERVISOR_VERIFICATION_REQUESTED,
                recipient_id=request.supervisor_id,
            )
        ]

    def _transition_notifications(
        self,
        request: OTRequest,
        action: ApprovalAction,
        prior_status: OTStatus,
    ) -> list[Notification]:
        employee = request.employee_id
        status = OTStatus(request.status)

        def note(kind: NotificationType, recipient: UUID | None) -> Notification:
            return Notification(request_id=request.id, notification_type=kind, recipient_id=recipient)

        if status == OTStatus.PENDING_SUPERVISOR_VERIFICATION:
            return [
                note(NotificationType.RESPECTIVE_SUPERVISOR_CONFIRMED, employee),
                note(NotificationType.SUPERVISOR_VERIFICATION_REQUESTED, request.supervisor_id),
            ]
        if status == OTStatus.SUPERVISOR_CONFIRMED:
            return [
                note(NotificationType.SUPERVISOR_CONFIRMED, employee),
                note(NotificationType.HR_CERTIFICATION_REQUESTED, None),
            ]
        if status == OTStatus.SUPERVISOR_VERIFIED:
            return [
                note(NotificationType.SUPERVISOR_VERIFIED, employee),
                note(NotificationType.HR_CERTIFICATION_REQUESTED, None),
            ]
        if status == OTStatus.HR_CERTIFIED:
            if prior_status == OTStatus.MANAGEMENT_APPROVED:
                return [note(NotificationType.HR_RECERTIFICATION_REQUESTED, request.hr_id)]
            return [note(NotificationType.HR_CERTIFIED, employee)]
        if status == OTStatus.MANAGEMENT_APPROVED:
            return [note(NotificationType.MANAGEMENT_APPROVED, employee)]
        if status == OTStatus.REJECTED:
            if request.rejection_stage == ApproverRole.RESPECTIVE_SUPERVISOR:
                return [note(NotificationType.RESPECTIVE_SUPERVISOR_DENIED, employee)]
            return [note(NotificationType.REJECTED, employee)]
        if action == ApprovalAction.HR_RETURN:
            return [note(NotificationType.RETURNED_FOR_AMENDMENT, employee)]
        return []

    async def _notify(self, notifications: list[Notification]) -> None:
        if not notifications:
            return
        errors = await self.dispatcher.dispatch_many(notifications)
        if errors:
            logger.warning(
                "%d notification handler(s) failed; transition already committed",
                len(errors),
            )
