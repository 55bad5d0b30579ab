"""Tests for the OT request state machine."""

from itertools import product
from uuid import uuid4

import pytest

from overtime_engine.models import ApprovalRoute, ApproverRole, OTStatus
from overtime_engine.services.state_machine import (
    ApprovalAction,
    InvalidTransitionError,
    OTRequestStateMachine,
)

S = OTStatus
R = ApproverRole

VALID = {
    (S.PENDING_VERIFICATION, S.SUPERVISOR_CONFIRMED, R.SUPERVISOR),
    (S.PENDING_VERIFICATION, S.REJECTED, R.SUPERVISOR),
    (S.PENDING_RESPECTIVE_SUPERVISOR_CONFIRMATION, S.RESPECTIVE_SUPERVISOR_CONFIRMED, R.RESPECTIVE_SUPERVISOR),
    (S.PENDING_RESPECTIVE_SUPERVISOR_CONFIRMATION, S.REJECTED, R.RESPECTIVE_SUPERVISOR),
    (S.RESPECTIVE_SUPERVISOR_CONFIRMED, S.PENDING_SUPERVISOR_VERIFICATION, R.SYSTEM),
    (S.PENDING_SUPERVISOR_VERIFICATION, S.SUPERVISOR_VERIFIED, R.SUPERVISOR),
    (S.PENDING_SUPERVISOR_VERIFICATION, S.REJECTED, R.SUPERVISOR),
    (S.SUPERVISOR_CONFIRMED, S.HR_CERTIFIED, R.HR),
    (S.SUPERVISOR_VERIFIED, S.HR_CERTIFIED, R.HR),
    (S.SUPERVISOR_CONFIRMED, S.REJECTED, R.HR),
    (S.SUPERVISOR_VERIFIED, S.REJECTED, R.HR),
    (S.HR_CERTIFIED, S.PENDING_VERIFICATION, R.HR),
    (S.HR_CERTIFIED, S.PENDING_RESPECTIVE_SUPERVISOR_CONFIRMATION, R.HR),
    (S.HR_CERTIFIED, S.MANAGEMENT_APPROVED, R.MANAGEMENT),
    (S.MANAGEMENT_APPROVED, S.HR_CERTIFIED, R.MANAGEMENT),
}


class FakeRequest:
    def __init__(self, status, respective_supervisor_id=None):
        self.status = status
        self.respective_supervisor_id = respective_supervisor_id


def route_a(status):
    return FakeRequest(status)


def route_b(status):
    return FakeRequest(status, uuid4())


class TestTransitionTable:
    """The table is exactly the set of legal (from, to, role) triples."""

    @pytest.mark.parametrize("from_status,to_status,role", sorted(VALID))
    def test_valid_transitions(self, from_status, to_status, role):
        assert OTRequestStateMachine.can_transition(from_status, to_status, role) is True

    def test_every_other_combination_is_invalid(self):
        for from_status, to_status, role in product(OTStatus, OTStatus, ApproverRole):
            expected = (from_status, to_status, role) in VALID
            assert (
                OTRequestStateMachine.can_transition(from_status, to_status, role) is expected
            ), (from_status, to_status, role)

    def test_string_values_accepted(self):
        assert OTRequestStateMachine.can_transition(
            "pending_verification", "supervisor_confirmed", "supervisor"
        ) is True
        assert OTRequestStateMachine.can_transition("draft", "rejected", "supervisor") is False
        assert OTRequestStateMachine.can_transition(
            "pending_verification", "supervisor_confirmed", "janitor"
        ) is False

    def test_rejected_is_final(self):
        assert OTRequestStateMachine.get_next_statuses(S.REJECTED) == []
        assert OTRequestStateMachine.is_terminal("rejected") is True

    def test_management_approved_only_returns_to_hr(self):
        assert OTRequestStateMachine.get_next_statuses(S.MANAGEMENT_APPROVED) == [S.HR_CERTIFIED]

    def test_required_role(self):
        assert (
            OTRequestStateMachine.required_role(S.PENDING_VERIFICATION, S.SUPERVISOR_CONFIRMED)
            == R.SUPERVISOR
        )
        assert OTRequestStateMachine.required_role(S.PENDING_VERIFICATION, S.HR_CERTIFIED) is None

    def test_validate_transition_raises(self):
        with pytest.raises(InvalidTransitionError) as exc_info:
            OTRequestStateMachine.validate_transition(
                S.PENDING_VERIFICATION, S.SUPERVISOR_CONFIRMED, R.HR
            )

        assert exc_info.value.from_status == S.PENDING_VERIFICATION
        assert exc_info.value.to_status == S.SUPERVISOR_CONFIRMED
        assert exc_info.value.required_role == R.SUPERVISOR
        assert "requires role 'supervisor'" in str(exc_info.value)

    def test_skip_straight_to_hr_is_not_permitted(self):
        with pytest.raises(InvalidTransitionError) as exc_info:
            OTRequestStateMachine.validate_transition(
                S.PENDING_VERIFICATION, S.HR_CERTIFIED, R.HR
            )
        assert "not permitted for any role" in str(exc_info.value)


class TestRoutes:
    """Route selection and route membership."""

    def test_route_selected_by_respective_supervisor(self):
        assert OTRequestStateMachine.route_for(None) == ApprovalRoute.A
        assert OTRequestStateMachine.route_for(uuid4()) == ApprovalRoute.B

    def test_initial_status(self):
        assert OTRequestStateMachine.initial_status(ApprovalRoute.A) == S.PENDING_VERIFICATION
        assert (
            OTRequestStateMachine.initial_status(ApprovalRoute.B)
            == S.PENDING_RESPECTIVE_SUPERVISOR_CONFIRMATION
        )

    def test_route_statuses_do_not_overlap(self):
        a = OTRequestStateMachine.ROUTE_STATUSES[ApprovalRoute.A]
        b = OTRequestStateMachine.ROUTE_STATUSES[ApprovalRoute.B]
        assert a.isdisjoint(b)
        assert a | b | OTRequestStateMachine.SHARED_STATUSES == set(OTStatus)

    def test_route_a_request_cannot_enter_route_b_status(self):
        with pytest.raises(InvalidTransitionError):
            OTRequestStateMachine.validate_transition(
                S.HR_CERTIFIED,
                S.PENDING_RESPECTIVE_SUPERVISOR_CONFIRMATION,
                R.HR,
                ApprovalRoute.A,
            )


class TestApply:
    """Action-level validation used by the lifecycle service."""

    def test_route_a_supervisor_confirm(self):
        target = OTRequestStateMachine.apply(
            route_a(S.PENDING_VERIFICATION), ApprovalAction.SUPERVISOR_CONFIRM, R.SUPERVISOR
        )
        assert target == S.SUPERVISOR_CONFIRMED

    def test_apply_does_not_modify_request(self):
        request = route_a(S.PENDING_VERIFICATION)
        OTRequestStateMachine.apply(request, ApprovalAction.SUPERVISOR_CONFIRM, R.SUPERVISOR)
        assert request.status == S.PENDING_VERIFICATION

    def test_route_b_request_cannot_be_supervisor_confirmed(self):
        with pytest.raises(InvalidTransitionError):
            OTRequestStateMachine.apply(
                route_b(S.PENDING_RESPECTIVE_SUPERVISOR_CONFIRMATION),
                ApprovalAction.SUPERVISOR_CONFIRM,
                R.SUPERVISOR,
            )

    def test_route_a_request_cannot_be_verified(self):
        with pytest.raises(InvalidTransitionError):
            OTRequestStateMachine.apply(
                route_a(S.PENDING_SUPERVISOR_VERIFICATION),
                ApprovalAction.SUPERVISOR_VERIFY,
                R.SUPERVISOR,
            )

    def test_hr_return_goes_to_route_start(self):
        assert (
            OTRequestStateMachine.apply(route_a(S.HR_CERTIFIED), ApprovalAction.HR_RETURN, R.HR)
            == S.PENDING_VERIFICATION
        )
        assert (
            OTRequestStateMachine.apply(route_b(S.HR_CERTIFIED), ApprovalAction.HR_RETURN, R.HR)
            == S.PENDING_RESPECTIVE_SUPERVISOR_CONFIRMATION
        )

    def test_action_reserved_for_role(self):
        with pytest.raises(InvalidTransitionError) as exc_info:
            OTRequestStateMachine.apply(
                route_a(S.HR_CERTIFIED), ApprovalAction.MANAGEMENT_APPROVE, R.HR
            )
        assert exc_info.value.required_role == R.MANAGEMENT

    def test_reject_uses_stage_role(self):
        assert (
            OTRequestStateMachine.apply(route_a(S.SUPERVISOR_CONFIRMED), ApprovalAction.REJECT, R.HR)
            == S.REJECTED
        )
        with pytest.raises(InvalidTransitionError):
            OTRequestStateMachine.apply(
                route_a(S.SUPERVISOR_CONFIRMED), ApprovalAction.REJECT, R.SUPERVISOR
            )

    def test_management_cannot_reject_outright(self):
        with pytest.raises(InvalidTransitionError):
            OTRequestStateMachine.apply(
                route_a(S.MANAGEMENT_APPROVED), ApprovalAction.REJECT, R.MANAGEMENT
            )

    def test_handoff_only_by_system(self):
        request = route_b(S.RESPECTIVE_SUPERVISOR_CONFIRMED)
        assert (
            OTRequestStateMachine.apply(request, ApprovalAction.HANDOFF_TO_SUPERVISOR, R.SYSTEM)
            == S.PENDING_SUPERVISOR_VERIFICATION
        )
        with pytest.raises(InvalidTransitionError):
            OTRequestStateMachine.apply(request, ApprovalAction.HANDOFF_TO_SUPERVISOR, R.SUPERVISOR)

    def test_no_action_leaves_rejected(self):
        for action, role in product(ApprovalAction, ApproverRole):
            with pytest.raises(InvalidTransitionError):
                OTRequestStateMachine.apply(route_a(S.REJECTED), action, role)


A = ApprovalAction
ROUTE_A_APPLY = {
    (S.PENDING_VERIFICATION, A.SUPERVISOR_CONFIRM, R.SUPERVISOR): S.SUPERVISOR_CONFIRMED,
    (S.PENDING_VERIFICATION, A.REJECT, R.SUPERVISOR): S.REJECTED,
    (S.SUPERVISOR_CONFIRMED, A.HR_CERTIFY, R.HR): S.HR_CERTIFIED,
    (S.SUPERVISOR_CONFIRMED, A.REJECT, R.HR): S.REJECTED,
    (S.HR_CERTIFIED, A.HR_RETURN, R.HR): S.PENDING_VERIFICATION,
    (S.HR_CERTIFIED, A.MANAGEMENT_APPROVE, R.MANAGEMENT): S.MANAGEMENT_APPROVED,
    (S.MANAGEMENT_APPROVED, A.MANAGEMENT_REJECT, R.MANAGEMENT): S.HR_CERTIFIED,
}
ROUTE_B_APPLY = {
    (S.PENDING_RESPECTIVE_SUPERVISOR_CONFIRMATION, A.RESPECTIVE_SUPERVISOR_CONFIRM, R.RESPECTIVE_SUPERVISOR): S.RESPECTIVE_SUPERVISOR_CONFIRMED,
    (S.PENDING_RESPECTIVE_SUPERVISOR_CONFIRMATION, A.RESPECTIVE_SUPERVISOR_DENY, R.RESPECTIVE_SUPERVISOR): S.REJECTED,
    (S.PENDING_RESPECTIVE_SUPERVISOR_CONFIRMATION, A.REJECT, R.RESPECTIVE_SUPERVISOR): S.REJECTED,
    (S.RESPECTIVE_SUPERVISOR_CONFIRMED, A.HANDOFF_TO_SUPERVISOR, R.SYSTEM): S.PENDING_SUPERVISOR_VERIFICATION,
    (S.PENDING_SUPERVISOR_VERIFICATION, A.SUPERVISOR_VERIFY, R.SUPERVISOR): S.SUPERVISOR_VERIFIED,
    (S.PENDING_SUPERVISOR_VERIFICATION, A.REJECT, R.SUPERVISOR): S.REJECTED,
    (S.SUPERVISOR_VERIFIED, A.HR_CERTIFY, R.HR): S.HR_CERTIFIED,
    (S.SUPERVISOR_VERIFIED, A.REJECT, R.HR): S.REJECTED,
    (S.HR_CERTIFIED, A.HR_RETURN, R.HR): S.PENDING_RESPECTIVE_SUPERVISOR_CONFIRMATION,
    (S.HR_CERTIFIED, A.MANAGEMENT_APPROVE, R.MANAGEMENT): S.MANAGEMENT_APPROVED,
    (S.MANAGEMENT_APPROVED, A.MANAGEMENT_REJECT, R.MANAGEMENT): S.HR_CERTIFIED,
}


class TestApplyExhaustive:
    """Every (status, action, role) on each route either yields its target or fails."""

    @pytest.mark.parametrize(
        "make_request,expected",
        [(route_a, ROUTE_A_APPLY), (route_b, ROUTE_B_APPLY)],
        ids=["route_a", "route_b"],
    )
    def test_apply(self, make_request, expected):
        for status, action, role in product(OTStatus, ApprovalAction, ApproverRole):
            request = make_request(status)
            key = (status, action, role)
            if key in expected:
                assert OTRequestStateMachine.apply(request, action, role) == expected[key]
            else:
                with pytest.raises(InvalidTransitionError):
                    OTRequestStateMachine.apply(request, action, role)

    @pytest.mark.parametrize(
        "route,expected",
        [(ApprovalRoute.A, ROUTE_A_APPLY), (ApprovalRoute.B, ROUTE_B_APPLY)],
    )
    def test_route_never_changes(self, route, expected):
        for target in expected.values():
            assert OTRequestStateMachine.belongs_to_route(target, route)
