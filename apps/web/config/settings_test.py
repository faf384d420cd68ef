"""
Test settings - deterministic defaults so the suite runs without secrets.
"""

import os

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://:memory:")

from apps.web.config.settings import *  # noqa: E402, F403

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

CACHES = {
    "default": {"BACKEND": "django.core.cache.backends.locmem.LocMemCache"},
}

PAYMENT_SIMULATED_DELAY_SECONDS = 0.0
ORDER_POLL_INTERVAL_SECONDS = 0.01
RESEND_API_KEY = "re_test_key"
