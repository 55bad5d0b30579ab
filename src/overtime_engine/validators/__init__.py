"""Input validators for OT submissions and approver actions."""

from overtime_engine.validators.remarks import (
    InvalidRemarksError,
    validate_denial_remarks,
    validate_remarks,
)
from overtime_engine.validators.submission_window import (
    SubmissionDecision,
    SubmissionPolicy,
    SubmissionWindowViolation,
    can_submit,
    can_submit_range,
    ensure_can_submit,
    submission_rule_message,
)

__all__ = [
    "InvalidRemarksError",
    "SubmissionDecision",
    "SubmissionPolicy",
    "SubmissionWindowViolation",
    "can_submit",
    "can_submit_range",
    "ensure_can_submit",
    "submission_rule_message",
    "validate_denial_remarks",
    "validate_remarks",
]
