"""Factory classes for restaurant models."""

from decimal import Decimal
from typing import Any

import factory

from apps.web.core.models import User
from apps.web.restaurant.models import (
    MenuItem,
    Order,
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
)

TEST_PASSWORD = "testpass123"


def line_item(
    menu_item: MenuItem | None = None,
    quantity: int = 1,
    **overrides: Any,
) -> dict[str, Any]:
    """Cart line as stored on an order."""
    line = {
        "menu_item_id": menu_item.pk if menu_item else None,
        "name": menu_item.name if menu_item else "Momo",
        "price": str(menu_item.price) if menu_item else "150.00",
        "quantity": quantity,
        "image_url": menu_item.image_url if menu_item else "",
    }
    line.update(overrides)
    return line


class UserFactory(factory.django.DjangoModelFactory):
    """Factory for User model."""

    class Meta:
        model = User

    username = factory.Sequence(lambda n: f"user{n}")
    email = factory.LazyAttribute(lambda obj: f"{obj.username}@example.com")
    password = factory.django.Password(TEST_PASSWORD)
    role = User.Role.STAFF


class MenuItemFactory(factory.django.DjangoModelFactory):
    """Factory for MenuItem model."""

    class Meta:
        model = MenuItem

    name = factory.Sequence(lambda n: f"Item {n}")
    description = factory.Faker("sentence")
    price = factory.LazyFunction(lambda: Decimal("150.00"))
    category = "Appetizers"
    image_url = ""
    available = True


class OrderFactory(factory.django.DjangoModelFactory):
    """Factory for Order model."""

    class Meta:
        model = Order

    customer_name = factory.Faker("name")
    customer_email = factory.Faker("email")
    table_number = 4
    items = factory.LazyFunction(lambda: [line_item(quantity=2)])
    total_amount = factory.LazyAttribute(
        lambda obj: sum(
            (Decimal(line["price"]) * line["quantity"] for line in obj.items),
            Decimal("0"),
        )
    )
    status = OrderStatus.PENDING
    payment_method = PaymentMethod.ESEWA
    payment_status = PaymentStatus.PENDING
    transaction_id = ""
