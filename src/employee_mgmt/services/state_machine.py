"""Status state machines for leave requests and salary records."""

from __future__ import annotations

from enum import Enum

from employee_mgmt.errors import ValidationError


class LeaveStatus(str, Enum):
    """Leave request status values."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class SalaryStatus(str, Enum):
    """Salary record status values."""

    PENDING = "pending"
    PAID = "paid"


class InvalidTransitionError(ValidationError):
    """Raised when an invalid state transition is attempted."""

    def __init__(self, from_status: str, to_status: str, reason: str | None = None):
        self.from_status = from_status
        self.to_status = to_status
        self.reason = reason
        msg = f"Invalid transition from '{from_status}' to '{to_status}'"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class LeaveStateMachine:
    """State machine for leave request decisions.

    Allowed transitions:
    - pending → approved
    - pending → rejected

    Approved and rejected are terminal.
    """

    VALID_TRANSITIONS: dict[str, list[str]] = {
        LeaveStatus.PENDING: [LeaveStatus.APPROVED, LeaveStatus.REJECTED],
        LeaveStatus.APPROVED: [],
        LeaveStatus.REJECTED: [],
    }

    # Statuses in which the owning employee may still withdraw the request
    WITHDRAWABLE = {LeaveStatus.PENDING}

    @classmethod
    def is_decision(cls, status: str) -> bool:
        """Check if status is one an admin may set."""
        return status in (LeaveStatus.APPROVED, LeaveStatus.REJECTED)

    @classmethod
    def can_transition(cls, from_status: str, to_status: str) -> bool:
        """Check if a transition is valid."""
        return to_status in cls.VALID_TRANSITIONS.get(from_status, [])

    @classmethod
    def validate_transition(cls, from_status: str, to_status: str) -> None:
        """Validate a transition, raising InvalidTransitionError if invalid."""
        if not cls.can_transition(from_status, to_status):
            raise InvalidTransitionError(
                from_status, to_status, f"leave application is already {from_status}"
            )

    @classmethod
    def can_withdraw(cls, status: str) -> bool:
        """Check if the owner may delete a request in this status."""
        return status in cls.WITHDRAWABLE


class SalaryStateMachine:
    """State machine for salary payment status.

    Allowed transitions:
    - pending → paid (stamps paid_at)
    - paid → pending (clears paid_at)
    """

    VALID_TRANSITIONS: dict[str, list[str]] = {
        SalaryStatus.PENDING: [SalaryStatus.PAID],
        SalaryStatus.PAID: [SalaryStatus.PENDING],
    }

    @classmethod
    def is_valid_status(cls, status: str) -> bool:
        return status in cls.VALID_TRANSITIONS

    @classmethod
    def can_transition(cls, from_status: str, to_status: str) -> bool:
        """Check if a transition is valid. Staying in place is always allowed."""
        if from_status == to_status:
            return cls.is_valid_status(to_status)
        return to_status in cls.VALID_TRANSITIONS.get(from_status, [])

    @classmethod
    def validate_transition(cls, from_status: str, to_status: str) -> None:
        """Validate a transition, raising InvalidTransitionError if invalid."""
        if not cls.can_transition(from_status, to_status):
            raise InvalidTransitionError(from_status, to_status)

    @classmethod
    def is_payment(cls, from_status: str, to_status: str) -> bool:
        """Check if this transition marks the record as paid."""
        return from_status != SalaryStatus.PAID and to_status == SalaryStatus.PAID

    @classmethod
    def is_reversal(cls, from_status: str, to_status: str) -> bool:
        """Check if this transition reverts a paid record to pending."""
        return from_status == SalaryStatus.PAID and to_status == SalaryStatus.PENDING
