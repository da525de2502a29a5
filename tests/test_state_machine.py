"""Tests for leave and salary state machines."""

import pytest

from employee_mgmt.errors import ValidationError
from employee_mgmt.services.state_machine import (
    InvalidTransitionError,
    LeaveStateMachine,
    SalaryStateMachine,
)


class TestLeaveStateMachine:
    """Test leave decision transitions."""

    def test_valid_transitions(self):
        """Pending requests can be approved or rejected."""
        assert LeaveStateMachine.can_transition("pending", "approved") is True
        assert LeaveStateMachine.can_transition("pending", "rejected") is True

    def test_decisions_are_terminal(self):
        assert LeaveStateMachine.can_transition("approved", "rejected") is False
        assert LeaveStateMachine.can_transition("rejected", "approved") is False
        assert LeaveStateMachine.can_transition("approved", "pending") is False
        assert LeaveStateMachine.can_transition("approved", "approved") is False

    def test_validate_transition_raises(self):
        """validate_transition raises a 400-class error carrying both statuses."""
        with pytest.raises(InvalidTransitionError) as exc_info:
            LeaveStateMachine.validate_transition("approved", "rejected")

        assert exc_info.value.from_status == "approved"
        assert exc_info.value.to_status == "rejected"
        assert isinstance(exc_info.value, ValidationError)
        assert exc_info.value.status_code == 400

    def test_is_decision(self):
        assert LeaveStateMachine.is_decision("approved") is True
        assert LeaveStateMachine.is_decision("rejected") is True
        assert LeaveStateMachine.is_decision("pending") is False
        assert LeaveStateMachine.is_decision("cancelled") is False

    def test_can_withdraw(self):
        """Only pending requests can be withdrawn by their owner."""
        assert LeaveStateMachine.can_withdraw("pending") is True
        assert LeaveStateMachine.can_withdraw("approved") is False
        assert LeaveStateMachine.can_withdraw("rejected") is False


class TestSalaryStateMachine:
    """Test salary payment status transitions."""

    def test_valid_transitions(self):
        assert SalaryStateMachine.can_transition("pending", "paid") is True
        assert SalaryStateMachine.can_transition("paid", "pending") is True

    def test_same_status_allowed(self):
        assert SalaryStateMachine.can_transition("paid", "paid") is True
        assert SalaryStateMachine.can_transition("pending", "pending") is True

    def test_unknown_status_rejected(self):
        assert SalaryStateMachine.is_valid_status("cancelled") is False
        assert SalaryStateMachine.can_transition("pending", "cancelled") is False
        with pytest.raises(InvalidTransitionError):
            SalaryStateMachine.validate_transition("pending", "cancelled")

    def test_payment_and_reversal_detection(self):
        assert SalaryStateMachine.is_payment("pending", "paid") is True
        assert SalaryStateMachine.is_payment("paid", "paid") is False
        assert SalaryStateMachine.is_reversal("paid", "pending") is True
        assert SalaryStateMachine.is_reversal("pending", "pending") is False
