"""
Order store - typed access to orders and menu items.

Every read and write of Order and MenuItem rows goes through here. Callers
get tableside_schemas records back, never model instances. Database errors
surface as RemoteFailure; nothing in this module retries.
"""

import logging
from collections import Counter
from collections.abc import Iterable
from decimal import Decimal, InvalidOperation
from typing import Any
from uuid import UUID

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import DatabaseError, transaction

from asgiref.sync import sync_to_async
from pydantic import ValidationError as PydanticValidationError

from tableside_schemas import (
    LineItem,
    MenuItemRecord,
    OrderRecord,
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
    cart_total,
)

from apps.web.restaurant.categories import normalize_category
from apps.web.restaurant.exceptions import (
    MenuItemNotFound,
    OrderNotFound,
    RemoteFailure,
    ValidationFailure,
)
from apps.web.restaurant.lifecycle import (
    PAID_ORDER_STATUS,
    ensure_payment_transition,
    ensure_transition,
)
from apps.web.restaurant.models import MenuItem, Order

logger = logging.getLogger(__name__)

MENU_ITEM_FIELDS = (
    "name",
    "description",
    "price",
    "category",
    "image_url",
    "available",
)


def _parse_order_id(order_id: UUID | str) -> UUID:
    """Order ids are opaque UUIDs; anything else cannot exist."""
    if isinstance(order_id, UUID):
        return order_id
    try:
        return UUID(str(order_id))
    except ValueError as e:
        raise OrderNotFound(order_id) from e


def _coerce_line_items(items: Iterable[LineItem | dict[str, Any]]) -> list[LineItem]:
    try:
        return [
            item if isinstance(item, LineItem) else LineItem.model_validate(item)
            for item in items
        ]
    except PydanticValidationError as e:
        raise ValidationFailure(f"Invalid line item: {e}", field="items") from e


# =============================================================================
# Orders
# =============================================================================


def create_order(
    customer_name: str,
    customer_email: str,
    table_number: int,
    items: Iterable[LineItem | dict[str, Any]],
    total_amount: Decimal | None,
    payment_method: PaymentMethod | str,
) -> OrderRecord:
    """
    Create an order from a cart snapshot.

    The order starts as status=pending, payment_status=pending.

    Args:
        customer_name: Customer's name (required).
        customer_email: Customer's email (required).
        table_number: Table the customer sits at (positive).
        items: Cart line items; at least one.
        total_amount: Client-computed total. Must equal sum(price * quantity);
            None means "use the computed sum".
        payment_method: esewa or khalti.

    Returns:
        The created order.

    Raises:
        ValidationFailure: If a required field is missing or inconsistent.
        RemoteFailure: If the insert fails.
    """
    if not customer_name or not customer_name.strip():
        raise ValidationFailure("Customer name is required", field="customer_name")
    if not customer_email or not customer_email.strip():
        raise ValidationFailure("Customer email is required", field="customer_email")
    try:
        table = int(table_number)
    except (TypeError, ValueError) as e:
        raise ValidationFailure(
            "Table number must be positive", field="table_number"
        ) from e
    if table < 1:
        raise ValidationFailure("Table number must be positive", field="table_number")

    try:
        method = PaymentMethod(payment_method)
    except ValueError as e:
        raise ValidationFailure(
            f"Unsupported payment method: {payment_method}", field="payment_method"
        ) from e

    line_items = _coerce_line_items(items)
    if not line_items:
        raise ValidationFailure("Cart is empty", field="items")

    computed_total = cart_total(line_items)
    if total_amount is not None:
        # str() first so a float total compares by its written value
        try:
            client_total = Decimal(str(total_amount))
        except InvalidOperation as e:
            raise ValidationFailure(
                f"Invalid total: {total_amount}", field="total_amount"
            ) from e
        if client_total != computed_total:
            raise ValidationFailure(
                f"Total {total_amount} does not match cart total {computed_total}",
                field="total_amount",
            )

    order = Order(
        customer_name=customer_name.strip(),
        customer_email=customer_email.strip(),
        table_number=table,
        items=[item.model_dump(mode="json") for item in line_items],
        total_amount=computed_total,
        status=OrderStatus.PENDING.value,
        payment_method=method.value,
        payment_status=PaymentStatus.PENDING.value,
    )

    try:
        order.full_clean()
    except DjangoValidationError as e:
        field, messages = next(iter(e.message_dict.items()))
        raise ValidationFailure(messages[0], field=field) from e

    try:
        order.save()
    except DatabaseError as e:
        logger.error("Failed to create order for %s: %s", customer_email, e)
        raise RemoteFailure("Failed to create order") from e

    logger.info(
        "Order created: order_id=%s table=%s total=%s method=%s",
        order.pk,
        order.table_number,
        order.total_amount,
        order.payment_method,
    )
    return OrderRecord.model_validate(order)


def fetch_order(order_id: UUID | str) -> OrderRecord:
    """
    Load one order.

    Raises:
        OrderNotFound: If no order has this id.
        RemoteFailure: If the read fails.
    """
    pk = _parse_order_id(order_id)
    try:
        order = Order.objects.get(pk=pk)
    except Order.DoesNotExist as e:
        raise OrderNotFound(order_id) from e
    except DatabaseError as e:
        logger.error("Failed to load order %s: %s", order_id, e)
        raise RemoteFailure("Failed to load order") from e
    return OrderRecord.model_validate(order)


afetch_order = sync_to_async(fetch_order)


def update_order_status(order_id: UUID | str, status: OrderStatus | str) -> OrderRecord:
    """
    Move an order to a new workflow status.

    The lifecycle guard runs against the locked row, so two admins racing
    on the same order cannot both apply a transition from the same state.

    Raises:
        ValidationFailure: If status is not a known value.
        InvalidTransition: If the lifecycle does not allow the move.
        OrderNotFound: If no order has this id.
        RemoteFailure: If the write fails.
    """
    try:
        target = OrderStatus(status)
    except ValueError as e:
        raise ValidationFailure(f"Unknown status: {status}", field="status") from e

    pk = _parse_order_id(order_id)
    try:
        with transaction.atomic():
            try:
                order = Order.objects.select_for_update().get(pk=pk)
            except Order.DoesNotExist as e:
                raise OrderNotFound(order_id) from e

            previous = order.status
            ensure_transition(previous, target)
            order.status = target.value
            order.save(update_fields=["status", "updated_at"])
    except DatabaseError as e:
        logger.error("Failed to update order %s status: %s", order_id, e)
        raise RemoteFailure("Failed to update order status") from e

    logger.info(
        "Order status changed: order_id=%s %s -> %s", order.pk, previous, target.value
    )
    return OrderRecord.model_validate(order)


def complete_payment(
    order_id: UUID | str,
    method: PaymentMethod | str,
    transaction_id: str,
) -> OrderRecord:
    """
    Record a completed payment and derive the paid workflow status.

    Sets payment_status=completed, payment_method=method and
    status=preparing in one write.

    Raises:
        InvalidTransition: If the order is already paid or no longer pending.
        OrderNotFound: If no order has this id.
        RemoteFailure: If the write fails.
    """
    payment_method = PaymentMethod(method)
    pk = _parse_order_id(order_id)
    try:
        with transaction.atomic():
            try:
                order = Order.objects.select_for_update().get(pk=pk)
            except Order.DoesNotExist as e:
                raise OrderNotFound(order_id) from e

            ensure_payment_transition(order.payment_status, PaymentStatus.COMPLETED)
            ensure_transition(order.status, PAID_ORDER_STATUS)

            order.payment_status = PaymentStatus.COMPLETED.value
            order.payment_method = payment_method.value
            order.status = PAID_ORDER_STATUS.value
            order.transaction_id = transaction_id
            order.save(
                update_fields=[
                    "payment_status",
                    "payment_method",
                    "status",
                    "transaction_id",
                    "updated_at",
                ]
            )
    except DatabaseError as e:
        logger.error("Failed to record payment for order %s: %s", order_id, e)
        raise RemoteFailure("Failed to update payment status") from e

    logger.info(
        "Payment completed: order_id=%s method=%s transaction_id=%s",
        order.pk,
        payment_method.value,
        transaction_id,
    )
    return OrderRecord.model_validate(order)


def list_orders(status: OrderStatus | str | None = None) -> list[OrderRecord]:
    """All orders, newest first, optionally filtered by workflow status."""
    queryset = Order.objects.all()
    if status:
        try:
            queryset = queryset.filter(status=OrderStatus(status).value)
        except ValueError as e:
            raise ValidationFailure(f"Unknown status: {status}", field="status") from e
    try:
        return [OrderRecord.model_validate(order) for order in queryset]
    except DatabaseError as e:
        logger.error("Failed to list orders: %s", e)
        raise RemoteFailure("Failed to load orders") from e


def recent_orders(limit: int = 5) -> list[list[LineItem]]:
    """Line items of the most recent orders, newest first."""
    try:
        queryset = Order.objects.order_by("-created_at").values_list("items", flat=True)
        rows = list(queryset[:limit])
    except DatabaseError as e:
        logger.error("Failed to load recent orders: %s", e)
        raise RemoteFailure("Failed to load recent orders") from e
    return [_coerce_line_items(items) for items in rows]


# =============================================================================
# Menu items
# =============================================================================


def list_menu_items(
    available_only: bool = False,
    category: str | None = None,
) -> list[MenuItemRecord]:
    """
    Menu items ordered by category then name.

    Args:
        available_only: Hide items marked unavailable (customer menu).
        category: Only this category; compared after normalization.
    """
    queryset = MenuItem.objects.all()
    if available_only:
        queryset = queryset.filter(available=True)
    if category:
        queryset = queryset.filter(category=normalize_category(category))
    try:
        return [MenuItemRecord.model_validate(item) for item in queryset]
    except DatabaseError as e:
        logger.error("Failed to list menu items: %s", e)
        raise RemoteFailure("Failed to load menu items") from e


def _save_menu_item(item: MenuItem) -> MenuItemRecord:
    try:
        item.full_clean()
    except DjangoValidationError as e:
        field, messages = next(iter(e.message_dict.items()))
        raise ValidationFailure(messages[0], field=field) from e

    try:
        item.save()
    except DatabaseError as e:
        logger.error("Failed to save menu item %s: %s", item.name, e)
        raise RemoteFailure("Failed to save menu item") from e
    return MenuItemRecord.model_validate(item)


def create_menu_item(
    name: str,
    price: Decimal,
    category: str,
    description: str = "",
    image_url: str = "",
    available: bool = True,
) -> MenuItemRecord:
    """
    Add a menu item. The category is stored normalized.

    Raises:
        ValidationFailure: If name, price or category is missing or invalid.
        RemoteFailure: If the insert fails.
    """
    if not name or not category or not category.strip() or price is None:
        raise ValidationFailure("Name, price and category are required")

    record = _save_menu_item(
        MenuItem(
            name=name,
            description=description,
            price=price,
            category=category,
            image_url=image_url,
            available=available,
        )
    )
    logger.info("Menu item created: id=%s category=%s", record.id, record.category)
    return record


def _get_menu_item(item_id: int) -> MenuItem:
    try:
        return MenuItem.objects.get(pk=item_id)
    except MenuItem.DoesNotExist as e:
        raise MenuItemNotFound(item_id) from e
    except DatabaseError as e:
        logger.error("Failed to load menu item %s: %s", item_id, e)
        raise RemoteFailure("Failed to load menu item") from e


def update_menu_item(item_id: int, **changes: Any) -> MenuItemRecord:
    """
    Change fields of a menu item.

    Raises:
        ValidationFailure: If a field is unknown or a value is invalid.
        MenuItemNotFound: If no item has this id.
        RemoteFailure: If the write fails.
    """
    unknown = set(changes) - set(MENU_ITEM_FIELDS)
    if unknown:
        raise ValidationFailure(
            f"Unknown field(s): {', '.join(sorted(unknown))}", field=sorted(unknown)[0]
        )
    if "category" in changes and not str(changes["category"]).strip():
        raise ValidationFailure("Category is required", field="category")

    item = _get_menu_item(item_id)
    for field, value in changes.items():
        setattr(item, field, value)
    record = _save_menu_item(item)
    logger.info("Menu item updated: id=%s fields=%s", item_id, sorted(changes))
    return record


def delete_menu_item(item_id: int) -> None:
    """
    Remove a menu item. Placed orders keep their snapshot.

    Raises:
        MenuItemNotFound: If no item has this id.
        RemoteFailure: If the delete fails.
    """
    item = _get_menu_item(item_id)
    try:
        item.delete()
    except DatabaseError as e:
        logger.error("Failed to delete menu item %s: %s", item_id, e)
        raise RemoteFailure("Failed to delete menu item") from e
    logger.info("Menu item deleted: id=%s", item_id)


# =============================================================================
# Aggregates
# =============================================================================


def most_ordered_item() -> MenuItemRecord | None:
    """
    The menu item with the highest total ordered quantity.

    Line items are matched to menu items by menu_item_id, falling back to
    the item name for carts that did not carry an id. Ties go to the item
    reached first. Items no longer on the menu are skipped.
    """
    try:
        menu = list(MenuItem.objects.all())
        carts = Order.objects.values_list("items", flat=True)
        by_id = {item.pk: item for item in menu}
        by_name = {item.name: item for item in menu}

        quantities: Counter[int] = Counter()
        for cart in carts:
            for line in cart:
                item = by_id.get(line.get("menu_item_id")) or by_name.get(
                    line.get("name")
                )
                if item is not None:
                    quantities[item.pk] += int(line.get("quantity", 1))
    except DatabaseError as e:
        logger.error("Failed to aggregate ordered items: %s", e)
        raise RemoteFailure("Failed to load most ordered item") from e

    if not quantities:
        return None
    top_id, _count = quantities.most_common(1)[0]
    return MenuItemRecord.model_validate(by_id[top_id])


def item_of_the_day() -> MenuItemRecord | None:
    """Most ordered item, else the first available item, else None."""
    item = most_ordered_item()
    if item is not None:
        return item

    try:
        fallback = MenuItem.objects.filter(available=True).first()
    except DatabaseError as e:
        logger.error("Failed to load fallback item of the day: %s", e)
        raise RemoteFailure("Failed to load item of the day") from e
    return MenuItemRecord.model_validate(fallback) if fallback else None
