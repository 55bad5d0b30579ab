"""OT request state machine with role-checked transition validation."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol
from uuid import UUID

from overtime_engine.models.enums import ApprovalRoute, ApproverRole, OTStatus

__all__ = [
    "ApprovalAction",
    "ApprovalRoute",
    "ApproverRole",
    "InvalidTransitionError",
    "OTRequestStateMachine",
    "OTStatus",
    "Transition",
]


class ApprovalAction(str, Enum):
    """Actions an approver (or the system) can take on a request."""

    SUPERVISOR_CONFIRM = "supervisor_confirm"
    RESPECTIVE_SUPERVISOR_CONFIRM = "respective_supervisor_confirm"
    RESPECTIVE_SUPERVISOR_DENY = "respective_supervisor_deny"
    HANDOFF_TO_SUPERVISOR = "handoff_to_supervisor"
    SUPERVISOR_VERIFY = "supervisor_verify"
    HR_CERTIFY = "hr_certify"
    HR_RETURN = "hr_return"
    REJECT = "reject"
    MANAGEMENT_APPROVE = "management_approve"
    MANAGEMENT_REJECT = "management_reject"


@dataclass(frozen=True)
class Transition:
    """One legal (from, to, role) triple."""

    from_status: OTStatus
    to_status: OTStatus
    role: ApproverRole


class InvalidTransitionError(Exception):
    """Raised when an invalid state transition is attempted."""

    def __init__(
        self,
        from_status: str,
        to_status: str,
        required_role: str | None = None,
        reason: str | None = None,
    ):
        self.from_status = from_status
        self.to_status = to_status
        self.required_role = required_role
        self.reason = reason
        msg = f"Invalid transition from '{_value(from_status)}' to '{_value(to_status)}'"
        if required_role:
            msg += f" (requires role '{_value(required_role)}')"
        else:
            msg += " (not permitted for any role)"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


def _value(item: Any) -> str:
    return item.value if isinstance(item, Enum) else str(item)


class RoutedRequest(Protocol):
    """Anything carrying a status and a route-selecting supervisor id."""

    status: Any
    respective_supervisor_id: UUID | None


_S = OTStatus
_R = ApproverRole


class OTRequestStateMachine:
    """State machine for OT request approvals.

    Route A (no respective supervisor):
    - pending_verification → supervisor_confirmed (supervisor)

    Route B (respective supervisor confirms first):
    - pending_respective_supervisor_confirmation → respective_supervisor_confirmed
      (respective supervisor) or → rejected (denial)
    - respective_supervisor_confirmed → pending_supervisor_verification (system)
    - pending_supervisor_verification → supervisor_verified (supervisor)

    Both routes:
    - supervisor_confirmed | supervisor_verified → hr_certified (hr)
    - hr_certified → management_approved (management)
    - hr_certified → route initial state (hr, returned for amendment)
    - management_approved → hr_certified (management, recertification)

    Terminal rejection is available to whoever holds the request at its
    current stage.
    """

    TRANSITIONS: tuple[Transition, ...] = (
        # Route A
        Transition(_S.PENDING_VERIFICATION, _S.SUPERVISOR_CONFIRMED, _R.SUPERVISOR),
        Transition(_S.PENDING_VERIFICATION, _S.REJECTED, _R.SUPERVISOR),
        # Route B
        Transition(
            _S.PENDING_RESPECTIVE_SUPERVISOR_CONFIRMATION,
            _S.RESPECTIVE_SUPERVISOR_CONFIRMED,
            _R.RESPECTIVE_SUPERVISOR,
        ),
        Transition(
            _S.PENDING_RESPECTIVE_SUPERVISOR_CONFIRMATION,
            _S.REJECTED,
            _R.RESPECTIVE_SUPERVISOR,
        ),
        Transition(
            _S.RESPECTIVE_SUPERVISOR_CONFIRMED,
            _S.PENDING_SUPERVISOR_VERIFICATION,
            _R.SYSTEM,
        ),
        Transition(_S.PENDING_SUPERVISOR_VERIFICATION, _S.SUPERVISOR_VERIFIED, _R.SUPERVISOR),
        Transition(_S.PENDING_SUPERVISOR_VERIFICATION, _S.REJECTED, _R.SUPERVISOR),
        # Convergence at HR
        Transition(_S.SUPERVISOR_CONFIRMED, _S.HR_CERTIFIED, _R.HR),
        Transition(_S.SUPERVISOR_VERIFIED, _S.HR_CERTIFIED, _R.HR),
        Transition(_S.SUPERVISOR_CONFIRMED, _S.REJECTED, _R.HR),
        Transition(_S.SUPERVISOR_VERIFIED, _S.REJECTED, _R.HR),
        Transition(_S.HR_CERTIFIED, _S.PENDING_VERIFICATION, _R.HR),
        Transition(_S.HR_CERTIFIED, _S.PENDING_RESPECTIVE_SUPERVISOR_CONFIRMATION, _R.HR),
        # Management
        Transition(_S.HR_CERTIFIED, _S.MANAGEMENT_APPROVED, _R.MANAGEMENT),
        Transition(_S.MANAGEMENT_APPROVED, _S.HR_CERTIFIED, _R.MANAGEMENT),
    )

    INITIAL_STATUS: dict[ApprovalRoute, OTStatus] = {
        ApprovalRoute.A: _S.PENDING_VERIFICATION,
        ApprovalRoute.B: _S.PENDING_RESPECTIVE_SUPERVISOR_CONFIRMATION,
    }

    # Statuses only reachable on one route
    ROUTE_STATUSES: dict[ApprovalRoute, frozenset[OTStatus]] = {
        ApprovalRoute.A: frozenset({_S.PENDING_VERIFICATION, _S.SUPERVISOR_CONFIRMED}),
        ApprovalRoute.B: frozenset(
            {
                _S.PENDING_RESPECTIVE_SUPERVISOR_CONFIRMATION,
                _S.RESPECTIVE_SUPERVISOR_CONFIRMED,
                _S.PENDING_SUPERVISOR_VERIFICATION,
                _S.SUPERVISOR_VERIFIED,
            }
        ),
    }

    SHARED_STATUSES = frozenset({_S.HR_CERTIFIED, _S.MANAGEMENT_APPROVED, _S.REJECTED})

    # End of the pipeline; management_approved can still be sent back by management
    TERMINAL_STATUSES = frozenset({_S.MANAGEMENT_APPROVED, _S.REJECTED})

    # None = depends on the route
    ACTION_TARGETS: dict[ApprovalAction, OTStatus | None] = {
        ApprovalAction.SUPERVISOR_CONFIRM: _S.SUPERVISOR_CONFIRMED,
        ApprovalAction.RESPECTIVE_SUPERVISOR_CONFIRM: _S.RESPECTIVE_SUPERVISOR_CONFIRMED,
        ApprovalAction.RESPECTIVE_SUPERVISOR_DENY: _S.REJECTED,
        ApprovalAction.HANDOFF_TO_SUPERVISOR: _S.PENDING_SUPERVISOR_VERIFICATION,
        ApprovalAction.SUPERVISOR_VERIFY: _S.SUPERVISOR_VERIFIED,
        ApprovalAction.HR_CERTIFY: _S.HR_CERTIFIED,
        ApprovalAction.HR_RETURN: None,
        ApprovalAction.REJECT: _S.REJECTED,
        ApprovalAction.MANAGEMENT_APPROVE: _S.MANAGEMENT_APPROVED,
        ApprovalAction.MANAGEMENT_REJECT: _S.HR_CERTIFIED,
    }

    # Actions tied to one role; REJECT is open to whichever role holds the stage
    ACTION_ROLES: dict[ApprovalAction, ApproverRole] = {
        ApprovalAction.SUPERVISOR_CONFIRM: _R.SUPERVISOR,
        ApprovalAction.RESPECTIVE_SUPERVISOR_CONFIRM: _R.RESPECTIVE_SUPERVISOR,
        ApprovalAction.RESPECTIVE_SUPERVISOR_DENY: _R.RESPECTIVE_SUPERVISOR,
        ApprovalAction.HANDOFF_TO_SUPERVISOR: _R.SYSTEM,
        ApprovalAction.SUPERVISOR_VERIFY: _R.SUPERVISOR,
        ApprovalAction.HR_CERTIFY: _R.HR,
        ApprovalAction.HR_RETURN: _R.HR,
        ApprovalAction.MANAGEMENT_APPROVE: _R.MANAGEMENT,
        ApprovalAction.MANAGEMENT_REJECT: _R.MANAGEMENT,
    }

    _TABLE: frozenset[tuple[OTStatus, OTStatus, ApproverRole]] = frozenset(
        (t.from_status, t.to_status, t.role) for t in TRANSITIONS
    )

    @classmethod
    def can_transition(cls, from_status: str, to_status: str, role: str) -> bool:
        """Check if (from, to, role) appears in the transition table."""
        try:
            key = (OTStatus(from_status), OTStatus(to_status), ApproverRole(role))
        except ValueError:
            return False
        return key in cls._TABLE

    @classmethod
    def required_role(cls, from_status: str, to_status: str) -> ApproverRole | None:
        """Role the table requires for a status change, if the change exists at all."""
        for t in cls.TRANSITIONS:
            if t.from_status == from_status and t.to_status == to_status:
                return t.role
        return None

    @classmethod
    def route_for(cls, respective_supervisor_id: UUID | None) -> ApprovalRoute:
        """Route selected by the presence of a respective supervisor."""
        return ApprovalRoute.B if respective_supervisor_id is not None else ApprovalRoute.A

    @classmethod
    def initial_status(cls, route: ApprovalRoute) -> OTStatus:
        """Status a fresh (or resubmitted) request starts in."""
        return cls.INITIAL_STATUS[route]

    @classmethod
    def is_terminal(cls, status: str) -> bool:
        return OTStatus(status) in cls.TERMINAL_STATUSES

    @classmethod
    def belongs_to_route(cls, status: str, route: ApprovalRoute) -> bool:
        """Whether a status can ever be held by a request on this route."""
        status = OTStatus(status)
        return status in cls.SHARED_STATUSES or status in cls.ROUTE_STATUSES[route]

    @classmethod
    def get_next_statuses(cls, current_status: str, role: str | None = None) -> list[OTStatus]:
        """Get valid next statuses, optionally limited to one role."""
        return [
            t.to_status
            for t in cls.TRANSITIONS
            if t.from_status == current_status and (role is None or t.role == role)
        ]

    @classmethod
    def target_for(cls, action: ApprovalAction, route: ApprovalRoute) -> OTStatus:
        """Resolve the status an action moves a request on ``route`` to."""
        target = cls.ACTION_TARGETS[action]
        if target is None:
            # HR return sends the request back to the start of its own route
            return cls.initial_status(route)
        return target

    @classmethod
    def validate_transition(
        cls,
        from_status: str,
        to_status: str,
        role: str,
        route: ApprovalRoute | None = None,
    ) -> None:
        """Validate a transition, raising InvalidTransitionError if invalid."""
        if route is not None:
            for status in (from_status, to_status):
                if not cls.belongs_to_route(status, route):
                    raise InvalidTransitionError(
                        from_status,
                        to_status,
                        cls.required_role(from_status, to_status),
                        f"status '{_value(status)}' is not part of {route.value}",
                    )

        if not cls.can_transition(from_status, to_status, role):
            raise InvalidTransitionError(
                from_status,
                to_status,
                cls.required_role(from_status, to_status),
                f"role '{_value(role)}' may not perform this transition",
            )

    @classmethod
    def apply(
        cls,
        request: RoutedRequest,
        action: ApprovalAction | str,
        role: ApproverRole | str,
    ) -> OTStatus:
        """Compute the status ``action`` moves ``request`` to.

        Pure: the request is not modified. Raises InvalidTransitionError when
        the (current, target, role) triple is not in the table, when the
        action is reserved for another role, or when the target would leave
        the request's route.
        """
        action = ApprovalAction(action)
        current = OTStatus(request.status)
        route = cls.route_for(request.respective_supervisor_id)
        target = cls.target_for(action, route)

        action_role = cls.ACTION_ROLES.get(action)
        if action_role is not None and action_role != role:
            raise InvalidTransitionError(
                current,
                target,
                action_role,
                f"action '{action.value}' is reserved for role '{action_role.value}'",
            )

        cls.validate_transition(current, target, role, route)
        return target
