"""JSON response helpers shared by the public and admin APIs."""

import logging
from typing import Any

from django.http import JsonResponse

from pydantic import ValidationError as PydanticValidationError

from apps.web.restaurant.exceptions import (
    MenuItemNotFound,
    NotFound,
    OrderNotFound,
    RemoteFailure,
    TablesideError,
    Unauthorized,
    ValidationFailure,
)
from apps.web.restaurant.serializers import (
    ValidationErrorDetail,
    ValidationErrorResponse,
)

logger = logging.getLogger(__name__)


def _cors_headers() -> dict[str, str]:
    """CORS headers for the customer site."""
    return {
        "Access-Control-Allow-Origin": "*",
        "Access-Control-Allow-Methods": "GET, POST, PATCH, DELETE, OPTIONS",
        "Access-Control-Allow-Headers": "Content-Type, Idempotency-Key",
    }


def json_response(data: dict[str, Any], status: int = 200) -> JsonResponse:
    """Create a JSON response with CORS headers."""
    response = JsonResponse(data, status=status)
    for key, value in _cors_headers().items():
        response[key] = value
    return response


def invalid_body_response(e: PydanticValidationError) -> JsonResponse:
    """400 listing every field pydantic rejected."""
    errors = [
        ValidationErrorDetail(
            field=".".join(str(loc) for loc in err["loc"]),
            message=err["msg"],
        )
        for err in e.errors()
    ]
    response = ValidationErrorResponse(details=errors)
    return json_response(response.model_dump(), status=400)


def error_response(e: TablesideError) -> JsonResponse:
    """
    Map an ordering error to its JSON response.

    ValidationFailure -> 400, OrderNotFound/MenuItemNotFound -> 404,
    Unauthorized -> 403, RemoteFailure -> 503.
    """
    if isinstance(e, ValidationFailure):
        logger.warning("Rejected request: %s", e.message)
        response = ValidationErrorResponse(
            details=[
                ValidationErrorDetail(field=e.field or "non_field", message=e.message)
            ]
        )
        return json_response(response.model_dump(), status=400)

    if isinstance(e, OrderNotFound):
        return json_response(
            {"error": "order_not_found", "message": e.message}, status=404
        )
    if isinstance(e, MenuItemNotFound):
        return json_response(
            {"error": "menu_item_not_found", "message": e.message}, status=404
        )
    if isinstance(e, NotFound):
        return json_response({"error": "not_found", "message": e.message}, status=404)

    if isinstance(e, Unauthorized):
        logger.warning("Unauthorized: %s", e.message)
        return json_response(
            {"error": "admin_required", "message": e.message}, status=403
        )

    if isinstance(e, RemoteFailure):
        logger.error("Remote failure: %s", e.message)
        return json_response(
            {"error": "service_unavailable", "message": e.message}, status=503
        )

    logger.error("Unhandled ordering error: %s", e.message)
    return json_response({"error": "server_error", "message": e.message}, status=500)
