"""
Decorators for request handling and access control.
"""

import json
import logging
from collections.abc import Callable
from functools import wraps
from typing import Any

from django.core.cache import cache
from django.http import HttpRequest, JsonResponse

logger = logging.getLogger(__name__)

IDEMPOTENCY_TTL_SECONDS = 86400  # 24 hours


def idempotency_key_required(view_func: Callable[..., Any]) -> Callable[..., Any]:
    """
    Decorator that requires an Idempotency-Key header for POST requests.

    A resubmitted form carrying the same key gets the cached response from
    the first request instead of creating a second record. Only successful
    responses are cached, so a failed submit can be retried with the same key.

    Usage:
        @idempotency_key_required
        def create_order(request):
            ...
    """

    @wraps(view_func)
    def wrapper(request: HttpRequest, *args: Any, **kwargs: Any) -> Any:
        key = request.headers.get("Idempotency-Key")

        if not key:
            return JsonResponse(
                {"error": "Idempotency-Key header is required"},
                status=400,
            )

        cache_key = f"idempotency:{request.path}:{key}"
        cached = cache.get(cache_key)

        if cached:
            logger.info("Replaying cached response for idempotency key %s", key)
            return JsonResponse(cached["data"], status=cached["status"])

        response = view_func(request, *args, **kwargs)

        if response.status_code < 400:
            cache.set(
                cache_key,
                {
                    "data": json.loads(response.content),
                    "status": response.status_code,
                },
                timeout=IDEMPOTENCY_TTL_SECONDS,
            )

        return response

    return wrapper


def admin_required(view_func: Callable[..., Any]) -> Callable[..., Any]:
    """
    Decorator that restricts a JSON view to signed-in admins.

    Returns 401 for anonymous requests and 403 for signed-in users whose
    role is not admin.
    """

    @wraps(view_func)
    def wrapper(request: HttpRequest, *args: Any, **kwargs: Any) -> Any:
        user = request.user
        if not user.is_authenticated:
            return JsonResponse({"error": "authentication_required"}, status=401)

        if not getattr(user, "is_admin", False):
            logger.warning("Non-admin user %s denied access to %s", user, request.path)
            return JsonResponse({"error": "admin_required"}, status=403)

        return view_func(request, *args, **kwargs)

    return wrapper
