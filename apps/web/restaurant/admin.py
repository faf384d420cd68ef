"""Admin registration for restaurant models."""

from django.contrib import admin

from apps.web.restaurant.models import MenuItem, Order


@admin.register(MenuItem)
class MenuItemAdmin(admin.ModelAdmin):
    """Admin for menu items."""

    list_display = ["name", "category", "price", "available"]
    list_filter = ["available", "category"]
    list_editable = ["available"]
    search_fields = ["name", "description", "category"]
    readonly_fields = ["created_at", "updated_at"]


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    """Admin for orders. Status changes go through the admin API."""

    list_display = [
        "id",
        "customer_name",
        "table_number",
        "status",
        "payment_status",
        "payment_method",
        "total_amount",
        "created_at",
    ]
    list_filter = ["status", "payment_status", "payment_method"]
    search_fields = ["customer_name", "customer_email", "transaction_id"]
    readonly_fields = [
        "id",
        "items",
        "total_amount",
        "status",
        "payment_status",
        "transaction_id",
        "created_at",
        "updated_at",
    ]

    fieldsets = [
        (None, {"fields": ["id", "status"]}),
        ("Customer", {"fields": ["customer_name", "customer_email", "table_number"]}),
        ("Cart", {"fields": ["items", "total_amount"]}),
        (
            "Payment",
            {"fields": ["payment_method", "payment_status", "transaction_id"]},
        ),
        ("Timestamps", {"fields": ["created_at", "updated_at"]}),
    ]
