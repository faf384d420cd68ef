"""
URL routing for restaurant API endpoints.

All endpoints are public (no auth required) and CORS-enabled.
"""

from django.urls import path

from apps.web.restaurant import views

app_name = "restaurant"

urlpatterns = [
    # Menu endpoints
    path("menu", views.menu, name="menu"),
    path("menu/item-of-the-day", views.featured_item, name="item_of_the_day"),
    # Order endpoints
    path("orders", views.order_create, name="order_create"),
    path("orders/recent", views.recent, name="recent_orders"),
    path("orders/<str:order_id>", views.order_detail, name="order_detail"),
    path("orders/<str:order_id>/pay", views.order_pay, name="order_pay"),
    path("orders/<str:order_id>/events", views.order_events, name="order_events"),
]
