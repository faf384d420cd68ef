"""Tableside Schemas - Pydantic models for data contracts."""

from tableside_schemas.orders import (
    LineItem,
    MenuItemRecord,
    OrderRecord,
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
    cart_total,
)
from tableside_schemas.payments import PaymentResult, ProviderCharge

__all__ = [
    # Orders
    "LineItem",
    "MenuItemRecord",
    "OrderRecord",
    "OrderStatus",
    "PaymentMethod",
    "PaymentStatus",
    "cart_total",
    # Payments
    "PaymentResult",
    "ProviderCharge",
]
