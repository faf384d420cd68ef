"""
Pydantic schemas for the admin API.
"""

from decimal import Decimal

from pydantic import BaseModel, Field

from tableside_schemas import MenuItemRecord, OrderRecord, OrderStatus

# =============================================================================
# Auth
# =============================================================================


class LoginRequest(BaseModel):
    """Admin sign-in form."""

    email: str = Field(min_length=1)
    password: str = Field(min_length=1)


class SessionResponse(BaseModel):
    """Current admin session, if any."""

    authenticated: bool
    email: str | None = None
    role: str | None = None


class PasswordResetRequest(BaseModel):
    """Request for reset instructions."""

    email: str = Field(min_length=1)


# =============================================================================
# Menu management
# =============================================================================


class MenuItemCreateRequest(BaseModel):
    """New menu item. Category is normalized on save."""

    name: str = Field(min_length=1, max_length=200)
    description: str = ""
    price: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    category: str = Field(min_length=1, max_length=100)
    image_url: str = ""
    available: bool = True


class MenuItemUpdateRequest(BaseModel):
    """Partial menu item update; only fields sent are changed."""

    name: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    price: Decimal | None = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    category: str | None = Field(default=None, min_length=1, max_length=100)
    image_url: str | None = None
    available: bool | None = None


class MenuItemResponse(BaseModel):
    item: MenuItemRecord


class MenuItemListResponse(BaseModel):
    items: list[MenuItemRecord]


# =============================================================================
# Order workflow
# =============================================================================


class OrderStatusUpdateRequest(BaseModel):
    """Move an order to a new workflow status."""

    status: OrderStatus


class OrderResponse(BaseModel):
    order: OrderRecord


class OrderListResponse(BaseModel):
    orders: list[OrderRecord]
