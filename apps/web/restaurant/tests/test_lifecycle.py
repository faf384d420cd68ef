"""Tests for the order lifecycle guard."""

import pytest

from tableside_schemas import OrderStatus, PaymentStatus

from apps.web.restaurant.exceptions import InvalidTransition, ValidationFailure
from apps.web.restaurant.lifecycle import (
    allowed_transitions,
    can_transition,
    ensure_payment_transition,
    ensure_transition,
    is_terminal,
)


class TestOrderTransitions:
    """Tests for workflow status transitions."""

    @pytest.mark.parametrize(
        ("current", "target"),
        [
            (OrderStatus.PENDING, OrderStatus.PREPARING),
            (OrderStatus.PENDING, OrderStatus.CANCELLED),
            (OrderStatus.PREPARING, OrderStatus.READY),
            (OrderStatus.PREPARING, OrderStatus.CANCELLED),
            (OrderStatus.READY, OrderStatus.COMPLETED),
            (OrderStatus.READY, OrderStatus.CANCELLED),
        ],
    )
    def test_forward_transitions_allowed(self, current, target):
        assert can_transition(current, target) is True
        assert ensure_transition(current, target) == target

    @pytest.mark.parametrize(
        ("current", "target"),
        [
            (OrderStatus.PENDING, OrderStatus.READY),
            (OrderStatus.PREPARING, OrderStatus.PENDING),
            (OrderStatus.READY, OrderStatus.PREPARING),
            (OrderStatus.COMPLETED, OrderStatus.PENDING),
            (OrderStatus.CANCELLED, OrderStatus.PREPARING),
            (OrderStatus.PENDING, OrderStatus.PENDING),
        ],
    )
    def test_illegal_transitions_rejected(self, current, target):
        assert can_transition(current, target) is False
        with pytest.raises(InvalidTransition) as exc_info:
            ensure_transition(current, target)

        assert exc_info.value.current == current.value
        assert exc_info.value.target == target.value
        assert exc_info.value.field == "status"

    def test_invalid_transition_is_validation_failure(self):
        """Views map InvalidTransition to a 400 through ValidationFailure."""
        with pytest.raises(ValidationFailure):
            ensure_transition("completed", "ready")

    def test_accepts_plain_strings(self):
        assert ensure_transition("pending", "preparing") == OrderStatus.PREPARING

    def test_unknown_status_raises_value_error(self):
        with pytest.raises(ValueError):
            ensure_transition("pending", "shipped")

    @pytest.mark.parametrize("status", [OrderStatus.COMPLETED, OrderStatus.CANCELLED])
    def test_terminal_statuses(self, status):
        assert is_terminal(status) is True
        assert allowed_transitions(status) == frozenset()

    def test_pending_not_terminal(self):
        assert is_terminal("pending") is False
        assert allowed_transitions("pending") == {
            OrderStatus.PREPARING,
            OrderStatus.CANCELLED,
        }


class TestPaymentTransitions:
    """Tests for payment status transitions."""

    def test_pending_to_completed(self):
        assert (
            ensure_payment_transition(PaymentStatus.PENDING, PaymentStatus.COMPLETED)
            == PaymentStatus.COMPLETED
        )

    def test_completed_is_final(self):
        with pytest.raises(InvalidTransition) as exc_info:
            ensure_payment_transition("completed", "pending")

        assert exc_info.value.field == "payment_status"

    def test_completed_cannot_complete_again(self):
        with pytest.raises(InvalidTransition):
            ensure_payment_transition("completed", "completed")
