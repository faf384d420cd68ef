"""Tests for restaurant models."""

import uuid
from decimal import Decimal

import pytest

import tableside_schemas

from apps.web.restaurant.models import (
    MenuItem,
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
)
from apps.web.restaurant.tests.factories import MenuItemFactory, OrderFactory


@pytest.mark.django_db
class TestMenuItem:
    """Tests for MenuItem model."""

    def test_create_menu_item(self) -> None:
        """Test creating a menu item."""
        item = MenuItemFactory(name="Momo", price=Decimal("150.00"))

        assert item.pk is not None
        assert str(item) == "Momo"
        assert item.available is True

    def test_category_normalized_on_save(self) -> None:
        """Test that category casing is normalized on every save."""
        item = MenuItemFactory(category="  main   COURSE ")

        item.refresh_from_db()
        assert item.category == "Main Course"

    def test_category_normalized_on_update(self) -> None:
        """Test that changing the category later is normalized too."""
        item = MenuItemFactory(category="Drinks")

        item.category = "hot drinks"
        item.save()

        item.refresh_from_db()
        assert item.category == "Hot Drinks"

    def test_items_ordered_by_category_then_name(self) -> None:
        """Test default ordering groups items by category."""
        MenuItemFactory(name="Tea", category="Drinks")
        MenuItemFactory(name="Momo", category="Appetizers")
        MenuItemFactory(name="Coffee", category="Drinks")

        names = list(MenuItem.objects.values_list("name", flat=True))

        assert names == ["Momo", "Coffee", "Tea"]


@pytest.mark.django_db
class TestOrder:
    """Tests for Order model."""

    def test_create_order_defaults(self) -> None:
        """Test that a new order starts pending on both statuses."""
        order = OrderFactory()

        assert isinstance(order.pk, uuid.UUID)
        assert order.status == OrderStatus.PENDING
        assert order.payment_status == PaymentStatus.PENDING
        assert order.transaction_id == ""

    def test_order_str(self) -> None:
        """Test order string representation."""
        order = OrderFactory(customer_name="Asha", table_number=7)

        assert "Asha" in str(order)
        assert "table 7" in str(order)

    def test_updated_at_advances_on_save(self) -> None:
        """Test that updated_at moves forward when the order changes."""
        order = OrderFactory()
        first = order.updated_at

        order.status = OrderStatus.PREPARING
        order.save()

        assert order.updated_at >= first
        assert order.created_at <= order.updated_at

    def test_items_snapshot_survives_menu_delete(self) -> None:
        """Test that deleting a menu item leaves placed orders intact."""
        item = MenuItemFactory(name="Chowmein")
        order = OrderFactory(
            items=[
                {
                    "menu_item_id": item.pk,
                    "name": "Chowmein",
                    "price": "200.00",
                    "quantity": 1,
                    "image_url": "",
                }
            ]
        )

        item.delete()
        order.refresh_from_db()

        assert order.items[0]["name"] == "Chowmein"
        assert order.total_amount == Decimal("200.00")


class TestChoicesMatchSchemas:
    """Model choices must carry the same values as the shared enums."""

    @pytest.mark.parametrize(
        ("choices", "schema_enum"),
        [
            (OrderStatus, tableside_schemas.OrderStatus),
            (PaymentStatus, tableside_schemas.PaymentStatus),
            (PaymentMethod, tableside_schemas.PaymentMethod),
        ],
    )
    def test_values_match(self, choices, schema_enum) -> None:
        assert list(choices.values) == [member.value for member in schema_enum]
