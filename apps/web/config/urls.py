"""
URL configuration for Tableside.
"""

from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path("admin/", admin.site.urls),
    # Admin JSON API (menu management, order workflow, auth)
    path("api/admin/", include("apps.web.dashboard.urls")),
    # Public API endpoints
    path("api/", include("apps.web.restaurant.urls")),
]
