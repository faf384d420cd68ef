"""Ordering exceptions."""


class TablesideError(Exception):
    """Base exception for ordering errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class RemoteFailure(TablesideError):
    """A store or auth call failed (network, permission or constraint)."""


class NotFound(TablesideError):
    """A requested record does not exist."""


class OrderNotFound(NotFound):
    """Order lookup by id found nothing."""

    def __init__(self, order_id: object) -> None:
        super().__init__(f"Order {order_id} not found")
        self.order_id = order_id


class MenuItemNotFound(NotFound):
    """Menu item lookup by id found nothing."""

    def __init__(self, item_id: object) -> None:
        super().__init__(f"Menu item {item_id} not found")
        self.item_id = item_id


class ValidationFailure(TablesideError):
    """Missing or invalid checkout/admin input."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class InvalidTransition(ValidationFailure):
    """Order or payment status change not allowed by the lifecycle."""

    def __init__(self, current: str, target: str, field: str = "status") -> None:
        super().__init__(f"Cannot move from '{current}' to '{target}'", field=field)
        self.current = current
        self.target = target


class Unauthorized(TablesideError):
    """A non-admin attempted an admin action."""
