"""Tests for payment services."""

import uuid
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from tableside_schemas import OrderStatus, PaymentMethod, PaymentStatus

from apps.web.payments.exceptions import PaymentError
from apps.web.payments.services import process_payment
from apps.web.restaurant import store
from apps.web.restaurant.exceptions import (
    InvalidTransition,
    OrderNotFound,
    ValidationFailure,
)
from apps.web.restaurant.models import Order
from apps.web.restaurant.tests.factories import OrderFactory


@pytest.mark.django_db
class TestProcessPayment:
    """Tests for process_payment."""

    def test_success_marks_order_paid(self):
        order = OrderFactory()

        result = process_payment(order.pk, PaymentMethod.ESEWA)

        assert result.success is True
        assert result.message == "Payment processed successfully"
        assert result.transaction_id.startswith("ESEWA-")

        order.refresh_from_db()
        assert order.payment_status == PaymentStatus.COMPLETED
        assert order.status == OrderStatus.PREPARING
        assert order.payment_method == PaymentMethod.ESEWA
        assert order.transaction_id == result.transaction_id

    def test_method_recorded_from_payment(self):
        order = OrderFactory(payment_method=PaymentMethod.ESEWA)

        process_payment(order.pk, "khalti")

        order.refresh_from_db()
        assert order.payment_method == PaymentMethod.KHALTI

    def test_already_paid_returns_stored_transaction(self):
        order = OrderFactory(
            status=OrderStatus.READY,
            payment_status=PaymentStatus.COMPLETED,
            transaction_id="ESEWA-1718000000000-abc123xyz",
        )

        with patch("apps.web.payments.services.get_provider") as mock_get_provider:
            result = process_payment(order.pk, PaymentMethod.ESEWA)

        mock_get_provider.assert_not_called()
        assert result.success is True
        assert result.transaction_id == "ESEWA-1718000000000-abc123xyz"
        order.refresh_from_db()
        assert order.status == OrderStatus.READY

    def test_declined_leaves_order_untouched(self):
        order = OrderFactory()

        result = process_payment(order.pk, PaymentMethod.KHALTI, decline=True)

        assert result.success is False
        assert result.transaction_id is None
        order.refresh_from_db()
        assert order.payment_status == PaymentStatus.PENDING
        assert order.status == OrderStatus.PENDING
        assert order.transaction_id == ""

    def test_provider_error_reported(self):
        order = OrderFactory()
        provider = MagicMock(method=PaymentMethod.ESEWA)
        provider.process = AsyncMock(side_effect=PaymentError("Wallet unreachable"))

        with patch("apps.web.payments.services.get_provider", return_value=provider):
            result = process_payment(order.pk, PaymentMethod.ESEWA)

        assert result.success is False
        assert result.message == "Wallet unreachable"
        order.refresh_from_db()
        assert order.payment_status == PaymentStatus.PENDING

    def test_cancelled_order_rejected_before_charge(self):
        order = OrderFactory(status=OrderStatus.CANCELLED)

        with patch("apps.web.payments.services.get_provider") as mock_get_provider:
            with pytest.raises(InvalidTransition):
                process_payment(order.pk, PaymentMethod.ESEWA)

        mock_get_provider.assert_not_called()

    def test_unknown_order(self):
        with pytest.raises(OrderNotFound):
            process_payment(uuid.uuid4(), PaymentMethod.ESEWA)

    def test_unsupported_method(self):
        order = OrderFactory()

        with pytest.raises(ValidationFailure) as exc_info:
            process_payment(order.pk, "paypal")

        assert exc_info.value.field == "provider"

    def test_concurrent_payment_keeps_first(self):
        """A payment that lands while ours is in flight wins."""
        order = OrderFactory()

        def paid_elsewhere_first(order_id, method, transaction_id):
            Order.objects.filter(pk=order_id).update(
                status=OrderStatus.PREPARING,
                payment_status=PaymentStatus.COMPLETED,
                transaction_id="ESEWA-1-first",
            )
            return store.complete_payment(order_id, method, transaction_id)

        with patch(
            "apps.web.payments.services.complete_payment",
            side_effect=paid_elsewhere_first,
        ):
            result = process_payment(order.pk, PaymentMethod.KHALTI)

        assert result.success is True
        assert result.transaction_id == "ESEWA-1-first"
        order.refresh_from_db()
        assert order.transaction_id == "ESEWA-1-first"
