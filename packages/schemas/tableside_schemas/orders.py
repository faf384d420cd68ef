"""Order and menu schemas - data contracts shared by the store, sync and payments."""

from collections.abc import Iterable
from datetime import datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

# =============================================================================
# Enums
# =============================================================================


class OrderStatus(str, Enum):
    """Order workflow status."""

    PENDING = "pending"
    PREPARING = "preparing"
    READY = "ready"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class PaymentStatus(str, Enum):
    """Payment status. One-way: pending -> completed."""

    PENDING = "pending"
    COMPLETED = "completed"


class PaymentMethod(str, Enum):
    """Supported (simulated) payment providers."""

    ESEWA = "esewa"
    KHALTI = "khalti"


# =============================================================================
# Line items
# =============================================================================


class LineItem(BaseModel):
    """One menu item plus quantity, snapshotted into an order."""

    menu_item_id: int | None = None
    name: str = Field(..., min_length=1, max_length=200)
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    quantity: int = Field(..., ge=1)
    image_url: str = ""

    @property
    def line_total(self) -> Decimal:
        """price * quantity"""
        return self.price * self.quantity


def cart_total(items: Iterable[LineItem]) -> Decimal:
    """Sum of price * quantity over a cart."""
    return sum((item.line_total for item in items), Decimal("0"))


# =============================================================================
# Records
# =============================================================================


class OrderRecord(BaseModel):
    """
    An order as read from the store or pushed by the realtime channel.

    updated_at doubles as the record version: consumers drop records older
    than the one they already hold.
    """

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    customer_name: str
    customer_email: str
    table_number: int
    items: list[LineItem]
    total_amount: Decimal
    status: OrderStatus
    payment_method: PaymentMethod
    payment_status: PaymentStatus
    transaction_id: str = ""
    created_at: datetime
    updated_at: datetime


class MenuItemRecord(BaseModel):
    """A menu item."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str
    price: Decimal
    category: str
    image_url: str
    available: bool
