"""
Dashboard views - Admin authentication, menu management and order workflow.

All endpoints return JSON. Everything except login, session and password
reset requires a signed-in user with the admin role.
"""

import json
import logging

from django.contrib.auth import authenticate, get_user_model, login, logout
from django.http import HttpRequest, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import (
    require_GET,
    require_http_methods,
    require_POST,
)

from pydantic import ValidationError as PydanticValidationError

from apps.web.core.decorators import admin_required
from apps.web.dashboard.serializers import (
    LoginRequest,
    MenuItemCreateRequest,
    MenuItemListResponse,
    MenuItemResponse,
    MenuItemUpdateRequest,
    OrderListResponse,
    OrderResponse,
    OrderStatusUpdateRequest,
    PasswordResetRequest,
    SessionResponse,
)
from apps.web.dashboard.services import EmailError, send_password_reset
from apps.web.restaurant.exceptions import TablesideError, Unauthorized
from apps.web.restaurant.responses import (
    error_response,
    invalid_body_response,
    json_response,
)
from apps.web.restaurant.store import (
    create_menu_item,
    delete_menu_item,
    list_menu_items,
    list_orders,
    update_menu_item,
    update_order_status,
)

logger = logging.getLogger(__name__)


def _parse_body(request: HttpRequest) -> dict | None:
    try:
        body = json.loads(request.body or b"{}")
    except json.JSONDecodeError:
        return None
    return body if isinstance(body, dict) else None


def _invalid_json() -> JsonResponse:
    return json_response({"error": "Invalid JSON in request body"}, status=400)


def _session_response(request: HttpRequest) -> SessionResponse:
    user = request.user
    if not user.is_authenticated:
        return SessionResponse(authenticated=False)
    return SessionResponse(authenticated=True, email=user.email, role=user.role)


# =============================================================================
# Auth
# =============================================================================


@csrf_exempt
@require_POST
def login_view(request: HttpRequest) -> JsonResponse:
    """
    POST /api/admin/login

    Sign in with email and password. Only admins get a session; any other
    role is signed out and refused.
    """
    body = _parse_body(request)
    if body is None:
        return _invalid_json()

    try:
        credentials = LoginRequest.model_validate(body)
    except PydanticValidationError as e:
        return invalid_body_response(e)

    account = (
        get_user_model()
        .objects.filter(email__iexact=credentials.email.strip())
        .first()
    )
    user = None
    if account is not None:
        user = authenticate(
            request, username=account.get_username(), password=credentials.password
        )

    if user is None:
        logger.warning("Failed admin login for %s", credentials.email)
        return json_response(
            {
                "error": "invalid_credentials",
                "message": "Invalid email or password",
                "can_reset_password": True,
            },
            status=401,
        )

    if not user.is_admin:
        logout(request)
        return error_response(Unauthorized("Access denied. Admin only."))

    login(request, user)
    logger.info("Admin %s signed in", user.email)
    return json_response(_session_response(request).model_dump())


@csrf_exempt
@require_POST
def logout_view(request: HttpRequest) -> JsonResponse:
    """
    POST /api/admin/logout
    """
    logout(request)
    return json_response({"authenticated": False})


@require_GET
def session_view(request: HttpRequest) -> JsonResponse:
    """
    GET /api/admin/session

    Current session; {"authenticated": false} when signed out.
    """
    return json_response(_session_response(request).model_dump())


@csrf_exempt
@require_POST
def password_reset(request: HttpRequest) -> JsonResponse:
    """
    POST /api/admin/password-reset

    Email reset instructions. The response is the same whether or not the
    address belongs to an account.
    """
    body = _parse_body(request)
    if body is None:
        return _invalid_json()

    try:
        reset_request = PasswordResetRequest.model_validate(body)
    except PydanticValidationError as e:
        return invalid_body_response(e)

    try:
        send_password_reset(reset_request.email)
    except EmailError as e:
        logger.error("Password reset email failed: %s", e)
        return json_response(
            {"error": "email_failed", "message": "Failed to send reset instructions"},
            status=503,
        )

    return json_response({"status": "sent"})


# =============================================================================
# Menu management
# =============================================================================


@csrf_exempt
@require_http_methods(["GET", "POST"])
@admin_required
def menu_items(request: HttpRequest) -> JsonResponse:
    """
    GET /api/admin/menu-items - every item, including unavailable ones
    POST /api/admin/menu-items - create an item
    """
    if request.method == "GET":
        try:
            items = list_menu_items()
        except TablesideError as e:
            return error_response(e)
        return json_response(MenuItemListResponse(items=items).model_dump(mode="json"))

    body = _parse_body(request)
    if body is None:
        return _invalid_json()

    try:
        item_request = MenuItemCreateRequest.model_validate(body)
    except PydanticValidationError as e:
        return invalid_body_response(e)

    try:
        item = create_menu_item(**item_request.model_dump())
    except TablesideError as e:
        return error_response(e)

    return json_response(
        MenuItemResponse(item=item).model_dump(mode="json"), status=201
    )


@csrf_exempt
@require_http_methods(["PATCH", "DELETE"])
@admin_required
def menu_item_detail(request: HttpRequest, item_id: int) -> JsonResponse:
    """
    PATCH /api/admin/menu-items/{item_id} - change some fields
    DELETE /api/admin/menu-items/{item_id} - remove the item
    """
    if request.method == "DELETE":
        try:
            delete_menu_item(item_id)
        except TablesideError as e:
            return error_response(e)
        return json_response({"deleted": True})

    body = _parse_body(request)
    if body is None:
        return _invalid_json()

    try:
        changes = MenuItemUpdateRequest.model_validate(body)
    except PydanticValidationError as e:
        return invalid_body_response(e)

    try:
        item = update_menu_item(item_id, **changes.model_dump(exclude_unset=True))
    except TablesideError as e:
        return error_response(e)

    return json_response(MenuItemResponse(item=item).model_dump(mode="json"))


# =============================================================================
# Order workflow
# =============================================================================


@require_GET
@admin_required
def orders(request: HttpRequest) -> JsonResponse:
    """
    GET /api/admin/orders?status=

    All orders, newest first, optionally filtered by status.
    """
    try:
        records = list_orders(status=request.GET.get("status") or None)
    except TablesideError as e:
        return error_response(e)

    return json_response(OrderListResponse(orders=records).model_dump(mode="json"))


@csrf_exempt
@require_POST
@admin_required
def order_status(request: HttpRequest, order_id: str) -> JsonResponse:
    """
    POST /api/admin/orders/{order_id}/status

    Move an order along the workflow. Illegal transitions return 400 and
    leave the order unchanged.
    """
    body = _parse_body(request)
    if body is None:
        return _invalid_json()

    try:
        status_request = OrderStatusUpdateRequest.model_validate(body)
    except PydanticValidationError as e:
        return invalid_body_response(e)

    try:
        order = update_order_status(order_id, status_request.status)
    except TablesideError as e:
        return error_response(e)

    return json_response(OrderResponse(order=order).model_dump(mode="json"))
