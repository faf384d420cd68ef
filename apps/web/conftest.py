"""
Pytest configuration for Django app tests.
"""

from django.core.cache import cache
from django.test import Client as DjangoClient

import pytest

from apps.web.core.models import User
from apps.web.restaurant.tests.factories import UserFactory


@pytest.fixture(autouse=True)
def clear_cache():
    """Idempotency replays live in the cache; start every test empty."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def api_client() -> DjangoClient:
    """Django test client for API requests."""
    return DjangoClient()


@pytest.fixture
def restaurant_admin(db) -> User:
    """A signed-up user with the admin role."""
    return UserFactory(
        username="manager",
        email="manager@example.com",
        role=User.Role.ADMIN,
    )


@pytest.fixture
def staff_user(db) -> User:
    """A signed-up user without the admin role."""
    return UserFactory(
        username="waiter",
        email="waiter@example.com",
        role=User.Role.STAFF,
    )


@pytest.fixture
def admin_api_client(restaurant_admin: User) -> DjangoClient:
    """Test client signed in as an admin."""
    http_client = DjangoClient()
    http_client.force_login(restaurant_admin)
    return http_client
