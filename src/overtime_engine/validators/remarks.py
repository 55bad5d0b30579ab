"""Validation of approver remarks."""

from __future__ import annotations

MAX_REMARKS_LENGTH = 500
MIN_DENIAL_REMARKS_LENGTH = 10


class InvalidRemarksError(Exception):
    """Raised when remarks are missing, too short or too long."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


def validate_remarks(
    remarks: str | None,
    max_length: int = MAX_REMARKS_LENGTH,
    required: bool = False,
) -> str | None:
    """Validate remarks and return them trimmed (None when absent)."""
    if remarks is None or not remarks.strip():
        if required:
            raise InvalidRemarksError("Remarks are required for this action.")
        return None

    trimmed = remarks.strip()
    if len(trimmed) > max_length:
        raise InvalidRemarksError(
            f"Remarks cannot exceed {max_length} characters. Current length: {len(trimmed)}"
        )
    return trimmed


def validate_denial_remarks(remarks: str | None) -> str:
    """Denials must explain themselves in at least a short sentence."""
    trimmed = validate_remarks(remarks, required=True) or ""
    if len(trimmed) < MIN_DENIAL_REMARKS_LENGTH:
        raise InvalidRemarksError(
            f"Denial remarks are required and must be at least "
            f"{MIN_DENIAL_REMARKS_LENGTH} characters."
        )
    return trimmed
