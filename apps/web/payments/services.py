"""
Payment services - runs the simulated provider round trip for an order.

Handles:
1. Rejecting payment for orders the lifecycle no longer allows to be paid
2. Charging through the provider for the chosen method
3. Recording the completed payment on the order
"""

import asyncio
import logging
from typing import Any
from uuid import UUID

from tableside_schemas import PaymentMethod, PaymentResult, PaymentStatus

from apps.web.payments.exceptions import PaymentDeclined, PaymentError
from apps.web.payments.providers import get_provider
from apps.web.restaurant.exceptions import InvalidTransition, ValidationFailure
from apps.web.restaurant.lifecycle import PAID_ORDER_STATUS, ensure_transition
from apps.web.restaurant.store import complete_payment, fetch_order

logger = logging.getLogger(__name__)

PAYMENT_SUCCESS_MESSAGE = "Payment processed successfully"
PAYMENT_ALREADY_COMPLETED_MESSAGE = "Payment already completed"


def process_payment(
    order_id: UUID | str,
    method: PaymentMethod | str,
    **provider_kwargs: Any,
) -> PaymentResult:
    """
    Pay for an order with a simulated provider.

    Paying an order that is already paid returns success with the stored
    transaction id and does not charge again. A declined charge returns
    success=False and leaves the order untouched.

    Args:
        order_id: Order to pay for.
        method: esewa or khalti.
        **provider_kwargs: Passed to the provider (delay_seconds, decline).

    Returns:
        PaymentResult describing the outcome.

    Raises:
        OrderNotFound: If the order does not exist.
        ValidationFailure: If the method is unsupported.
        InvalidTransition: If the order can no longer be paid (e.g. cancelled).
        RemoteFailure: If recording the payment fails.
    """
    order = fetch_order(order_id)

    if order.payment_status == PaymentStatus.COMPLETED:
        logger.info("Order %s already paid, returning stored transaction", order.id)
        return PaymentResult(
            success=True,
            message=PAYMENT_ALREADY_COMPLETED_MESSAGE,
            transaction_id=order.transaction_id or None,
        )

    ensure_transition(order.status, PAID_ORDER_STATUS)

    try:
        provider = get_provider(method, **provider_kwargs)
    except ValueError as e:
        raise ValidationFailure(str(e), field="provider") from e

    try:
        charge = asyncio.run(provider.process(order))
    except PaymentDeclined as e:
        logger.warning("Payment declined for order %s: %s", order.id, e.message)
        return PaymentResult(success=False, message=e.message)
    except PaymentError as e:
        logger.error("Payment failed for order %s: %s", order.id, e.message)
        return PaymentResult(success=False, message=e.message)

    try:
        complete_payment(order.id, provider.method, charge.transaction_id)
    except InvalidTransition:
        # A concurrent request may have paid first
        current = fetch_order(order.id)
        if current.payment_status != PaymentStatus.COMPLETED:
            raise
        logger.info("Order %s was paid concurrently, keeping first payment", order.id)
        return PaymentResult(
            success=True,
            message=PAYMENT_ALREADY_COMPLETED_MESSAGE,
            transaction_id=current.transaction_id or None,
        )

    return PaymentResult(
        success=True,
        message=PAYMENT_SUCCESS_MESSAGE,
        transaction_id=charge.transaction_id,
    )
