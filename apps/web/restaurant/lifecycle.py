"""
Order lifecycle - legal workflow and payment status transitions.

Workflow:
    pending   -> preparing | cancelled
    preparing -> ready | cancelled
    ready     -> completed | cancelled
    completed, cancelled are terminal.

Payment:
    pending -> completed (one way, no refunds)

The guard runs before every status write; the store never accepts a
transition this table does not list.
"""

from tableside_schemas import OrderStatus, PaymentStatus

from apps.web.restaurant.exceptions import InvalidTransition

ORDER_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.PREPARING, OrderStatus.CANCELLED}),
    OrderStatus.PREPARING: frozenset({OrderStatus.READY, OrderStatus.CANCELLED}),
    OrderStatus.READY: frozenset({OrderStatus.COMPLETED, OrderStatus.CANCELLED}),
    OrderStatus.COMPLETED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}

PAYMENT_TRANSITIONS: dict[PaymentStatus, frozenset[PaymentStatus]] = {
    PaymentStatus.PENDING: frozenset({PaymentStatus.COMPLETED}),
    PaymentStatus.COMPLETED: frozenset(),
}

# Workflow status derived when a payment completes
PAID_ORDER_STATUS = OrderStatus.PREPARING


def allowed_transitions(current: OrderStatus | str) -> frozenset[OrderStatus]:
    """Statuses an order in `current` may move to."""
    return ORDER_TRANSITIONS[OrderStatus(current)]


def is_terminal(status: OrderStatus | str) -> bool:
    """Check if no further workflow transitions are possible."""
    return not allowed_transitions(status)


def can_transition(current: OrderStatus | str, target: OrderStatus | str) -> bool:
    """Check if current -> target is a legal workflow transition."""
    return OrderStatus(target) in allowed_transitions(current)


def ensure_transition(
    current: OrderStatus | str, target: OrderStatus | str
) -> OrderStatus:
    """
    Validate a workflow transition.

    Returns:
        The target as an OrderStatus.

    Raises:
        InvalidTransition: If the lifecycle does not allow the move.
    """
    current_status = OrderStatus(current)
    target_status = OrderStatus(target)
    if target_status not in ORDER_TRANSITIONS[current_status]:
        raise InvalidTransition(current_status.value, target_status.value)
    return target_status


def ensure_payment_transition(
    current: PaymentStatus | str, target: PaymentStatus | str
) -> PaymentStatus:
    """
    Validate a payment status transition.

    Raises:
        InvalidTransition: If the payment status cannot move to target.
    """
    current_status = PaymentStatus(current)
    target_status = PaymentStatus(target)
    if target_status not in PAYMENT_TRANSITIONS[current_status]:
        raise InvalidTransition(
            current_status.value, target_status.value, field="payment_status"
        )
    return target_status
