"""
Pydantic schemas for the public ordering API.

These schemas define the request and response contract for the customer
pages: menu, checkout, order status and recent orders.
"""

from decimal import Decimal

from pydantic import BaseModel, Field

from tableside_schemas import (
    LineItem,
    MenuItemRecord,
    OrderRecord,
    PaymentMethod,
    PaymentResult,
)

# =============================================================================
# Menu
# =============================================================================


class MenuCategorySchema(BaseModel):
    """One category heading with its items."""

    name: str
    items: list[MenuItemRecord] = Field(default_factory=list)


class MenuResponse(BaseModel):
    """Customer menu grouped by category."""

    categories: list[MenuCategorySchema]


class ItemOfTheDayResponse(BaseModel):
    """Featured item; null when the menu is empty."""

    item: MenuItemRecord | None


# =============================================================================
# Orders
# =============================================================================


class OrderCreateRequest(BaseModel):
    """Request body for checkout."""

    customer_name: str = Field(min_length=1, max_length=200)
    customer_email: str = Field(min_length=3, max_length=254)
    table_number: int = Field(ge=1)
    items: list[LineItem] = Field(min_length=1)
    total_amount: Decimal | None = Field(
        default=None,
        description="Client cart total; must equal the sum of the line items",
    )
    payment_method: PaymentMethod


class OrderCreateResponse(BaseModel):
    """Created order with the outcome of its payment."""

    order: OrderRecord
    payment: PaymentResult


class OrderDetailResponse(BaseModel):
    """Single order for the status page."""

    order: OrderRecord


class PaymentRequest(BaseModel):
    """Request body for paying an existing order."""

    provider: PaymentMethod


class PaymentResponse(BaseModel):
    """Payment outcome with the order as it stands afterwards."""

    order: OrderRecord
    payment: PaymentResult


class RecentOrderSchema(BaseModel):
    """Line items of one recent order."""

    items: list[LineItem]


class RecentOrdersResponse(BaseModel):
    """Most recent orders, newest first."""

    orders: list[RecentOrderSchema]


# =============================================================================
# Errors
# =============================================================================


class ValidationErrorDetail(BaseModel):
    """Single validation error."""

    field: str
    message: str


class ValidationErrorResponse(BaseModel):
    """Response for validation errors."""

    error: str = "validation_error"
    details: list[ValidationErrorDetail]
