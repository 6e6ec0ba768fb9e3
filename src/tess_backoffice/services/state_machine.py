"""Salary payment state machine with transition validation."""

from __future__ import annotations

from typing import TYPE_CHECKING

from tess_backoffice.models import PaymentMethod, SalaryStatus

if TYPE_CHECKING:
    from tess_backoffice.models import SalaryRecord


class InvalidTransitionError(Exception):
    """Raised when an invalid state transition is attempted."""

    def __init__(self, from_status: str, to_status: str, reason: str | None = None):
        self.from_status = from_status
        self.to_status = to_status
        self.reason = reason
        msg = f"Invalid transition from '{_value(from_status)}' to '{_value(to_status)}'"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


def _value(status: str) -> str:
    return getattr(status, "value", status)


class SalaryStateMachine:
    """State machine for salary payment status.

    Allowed transitions:
    - Pending → Processing
    - Processing → Paid

    There are no back-transitions and no skipping; Paid is terminal.
    """

    VALID_TRANSITIONS: dict[str, list[str]] = {
        SalaryStatus.PENDING: [SalaryStatus.PROCESSING],
        SalaryStatus.PROCESSING: [SalaryStatus.PAID],
        SalaryStatus.PAID: [],  # Terminal state
    }

    # Statuses where bonuses, deductions and payment method can be edited
    EDITABLE = {
        SalaryStatus.PENDING,
        SalaryStatus.PROCESSING,
    }

    @classmethod
    def can_transition(cls, from_status: str, to_status: str) -> bool:
        """Check if a transition is valid."""
        allowed = cls.VALID_TRANSITIONS.get(from_status, [])
        return to_status in allowed

    @classmethod
    def validate_transition(cls, from_status: str, to_status: str) -> None:
        """Validate a transition, raising InvalidTransitionError if invalid."""
        if not cls.can_transition(from_status, to_status):
            reason = "status is terminal" if cls.is_terminal(from_status) else None
            raise InvalidTransitionError(from_status, to_status, reason)

    @classmethod
    def can_edit(cls, status: str) -> bool:
        """Check if adjustments can still be edited in this status."""
        return status in cls.EDITABLE

    @classmethod
    def is_terminal(cls, status: str) -> bool:
        return not cls.VALID_TRANSITIONS.get(status, [])

    @classmethod
    def get_next_statuses(cls, current_status: str) -> list[str]:
        """Get list of valid next statuses from current status."""
        return cls.VALID_TRANSITIONS.get(current_status, [])

    @classmethod
    def validate_salary_for_transition(
        cls,
        salary: SalaryRecord,
        to_status: str,
        payment_method: PaymentMethod | None = None,
    ) -> list[str]:
        """Validate a salary record for a specific transition, returning any errors.

        Returns list of error messages (empty if valid).
        """
        errors: list[str] = []
        from_status = salary.status

        if not cls.can_transition(from_status, to_status):
            errors.append(
                f"Cannot transition from '{_value(from_status)}' to '{_value(to_status)}'"
            )
            return errors

        if to_status == SalaryStatus.PAID:
            if (payment_method or salary.payment_method) is None:
                errors.append("A payment method is required to mark a salary as paid")

        return errors
