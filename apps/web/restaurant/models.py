"""
Restaurant models - menu items and orders.

Orders snapshot their cart as JSON line items; menu edits never change a
placed order. Status choices mirror the shared tableside_schemas enums.
"""

import uuid

from django.core.validators import MinValueValidator
from django.db import models

from apps.web.core.models import TimestampedModel
from apps.web.restaurant.categories import normalize_category


class OrderStatus(models.TextChoices):
    """Order workflow status."""

    PENDING = "pending", "Pending"
    PREPARING = "preparing", "Preparing"
    READY = "ready", "Ready"
    COMPLETED = "completed", "Completed"
    CANCELLED = "cancelled", "Cancelled"


class PaymentStatus(models.TextChoices):
    """Payment status."""

    PENDING = "pending", "Pending"
    COMPLETED = "completed", "Completed"


class PaymentMethod(models.TextChoices):
    """Simulated payment providers."""

    ESEWA = "esewa", "eSewa"
    KHALTI = "khalti", "Khalti"


class MenuItem(TimestampedModel):
    """
    Individual menu item.

    category is stored normalized; save() is the single write path that
    applies normalize_category, so every entry point groups consistently.
    """

    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(0)],
    )
    category = models.CharField(max_length=100)
    image_url = models.URLField(blank=True)
    available = models.BooleanField(
        default=True,
        help_text="Unavailable items are hidden from the customer menu",
    )

    class Meta:
        ordering = ["category", "name"]
        indexes = [
            models.Index(
                fields=["available", "category"],
                name="restaurant__availab_5b2d1e_idx",
            ),
        ]

    def __str__(self) -> str:
        return self.name

    def save(self, *args, **kwargs) -> None:
        self.category = normalize_category(self.category)
        super().save(*args, **kwargs)


class Order(TimestampedModel):
    """
    Customer order.

    Tracks the workflow status and the payment status. updated_at is the
    version pushed to status subscribers.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    # Customer information
    customer_name = models.CharField(max_length=200)
    customer_email = models.EmailField()
    table_number = models.PositiveIntegerField(validators=[MinValueValidator(1)])

    # Cart snapshot: [{menu_item_id, name, price, quantity, image_url}]
    items = models.JSONField(default=list)
    total_amount = models.DecimalField(max_digits=10, decimal_places=2)

    status = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.PENDING,
    )

    # Payment
    payment_method = models.CharField(
        max_length=20,
        choices=PaymentMethod.choices,
    )
    payment_status = models.CharField(
        max_length=20,
        choices=PaymentStatus.choices,
        default=PaymentStatus.PENDING,
    )
    transaction_id = models.CharField(
        max_length=100,
        blank=True,
        help_text="Provider reference (display only, not verified)",
    )

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status"], name="restaurant__status_8c1f3a_idx"),
            models.Index(
                fields=["created_at"], name="restaurant__created_4e7b90_idx"
            ),
        ]

    def __str__(self) -> str:
        return f"Order {self.pk} - {self.customer_name} (table {self.table_number})"
