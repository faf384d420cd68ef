"""
Dashboard URL routes - admin JSON API.
"""

from django.urls import path

from . import views

app_name = "dashboard"

urlpatterns = [
    # Auth
    path("login", views.login_view, name="login"),
    path("logout", views.logout_view, name="logout"),
    path("session", views.session_view, name="session"),
    path("password-reset", views.password_reset, name="password_reset"),
    # Menu management
    path("menu-items", views.menu_items, name="menu_items"),
    path("menu-items/<int:item_id>", views.menu_item_detail, name="menu_item_detail"),
    # Order workflow
    path("orders", views.orders, name="orders"),
    path("orders/<str:order_id>/status", views.order_status, name="order_status"),
]
