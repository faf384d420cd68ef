"""
Menu and Order API views - Public endpoints for the customer pages.

These endpoints are used by the ordering frontend:
- Menu browsing and the featured item of the day
- Checkout: order creation and simulated payment
- Order status page: detail fetch and live status stream
- Recent orders strip
"""

import asyncio
import json
import logging
from collections.abc import AsyncIterator

from django.conf import settings
from django.http import HttpRequest, JsonResponse, StreamingHttpResponse
from django.views.decorators.cache import cache_control
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_POST

from pydantic import ValidationError as PydanticValidationError

from tableside_schemas import PaymentResult

from apps.web.core.decorators import idempotency_key_required
from apps.web.payments.services import process_payment
from apps.web.restaurant.categories import group_by_category
from apps.web.restaurant.exceptions import TablesideError
from apps.web.restaurant.lifecycle import is_terminal
from apps.web.restaurant.responses import (
    error_response,
    invalid_body_response,
    json_response,
)
from apps.web.restaurant.serializers import (
    ItemOfTheDayResponse,
    MenuCategorySchema,
    MenuResponse,
    OrderCreateRequest,
    OrderCreateResponse,
    OrderDetailResponse,
    PaymentRequest,
    PaymentResponse,
    RecentOrderSchema,
    RecentOrdersResponse,
)
from apps.web.restaurant.store import (
    afetch_order,
    create_order,
    fetch_order,
    item_of_the_day,
    list_menu_items,
    recent_orders,
)
from apps.web.restaurant.sync import OrderStatusSync, OrderView

logger = logging.getLogger(__name__)


def _parse_body(request: HttpRequest) -> dict | None:
    try:
        body = json.loads(request.body or b"{}")
    except json.JSONDecodeError:
        return None
    return body if isinstance(body, dict) else None


def _invalid_json() -> JsonResponse:
    return json_response({"error": "Invalid JSON in request body"}, status=400)


# =============================================================================
# Menu
# =============================================================================


@require_GET
@cache_control(max_age=30, public=True)
def menu(request: HttpRequest) -> JsonResponse:
    """
    GET /api/menu?category=

    Available menu items grouped by category. Categories are sorted by
    name; an optional category parameter narrows to one category.
    """
    try:
        items = list_menu_items(
            available_only=True, category=request.GET.get("category") or None
        )
    except TablesideError as e:
        return error_response(e)

    response = MenuResponse(
        categories=[
            MenuCategorySchema(name=name, items=category_items)
            for name, category_items in group_by_category(items).items()
        ]
    )
    return json_response(response.model_dump(mode="json"))


@require_GET
@cache_control(max_age=60, public=True)
def featured_item(_request: HttpRequest) -> JsonResponse:
    """
    GET /api/menu/item-of-the-day

    Most ordered item, falling back to the first available item.
    Returns {"item": null} when the menu is empty.
    """
    try:
        item = item_of_the_day()
    except TablesideError as e:
        return error_response(e)

    return json_response(ItemOfTheDayResponse(item=item).model_dump(mode="json"))


# =============================================================================
# Orders
# =============================================================================


@csrf_exempt
@require_POST
@idempotency_key_required
def order_create(request: HttpRequest) -> JsonResponse:
    """
    POST /api/orders

    Create an order from the cart, then run its simulated payment.

    Request body: OrderCreateRequest schema
    Response: OrderCreateResponse schema (201) or ValidationErrorResponse (400)
    """
    body = _parse_body(request)
    if body is None:
        return _invalid_json()

    try:
        order_request = OrderCreateRequest.model_validate(body)
    except PydanticValidationError as e:
        return invalid_body_response(e)

    try:
        order = create_order(
            customer_name=order_request.customer_name,
            customer_email=order_request.customer_email,
            table_number=order_request.table_number,
            items=order_request.items,
            total_amount=order_request.total_amount,
            payment_method=order_request.payment_method,
        )
    except TablesideError as e:
        return error_response(e)

    # The order exists from here on. Payment failures go in the 201 body so
    # an idempotent replay returns this order instead of creating another.
    try:
        payment = process_payment(order.id, order.payment_method)
    except TablesideError as e:
        logger.warning("Payment for new order %s failed: %s", order.id, e.message)
        payment = PaymentResult(success=False, message=e.message)

    try:
        order = fetch_order(order.id)
    except TablesideError as e:
        logger.warning("Reloading order %s failed: %s", order.id, e.message)

    response = OrderCreateResponse(order=order, payment=payment)
    return json_response(response.model_dump(mode="json"), status=201)


@require_GET
def order_detail(_request: HttpRequest, order_id: str) -> JsonResponse:
    """
    GET /api/orders/{order_id}

    Response: OrderDetailResponse schema (200) or 404 order_not_found
    """
    try:
        order = fetch_order(order_id)
    except TablesideError as e:
        return error_response(e)

    return json_response(OrderDetailResponse(order=order).model_dump(mode="json"))


@csrf_exempt
@require_POST
def order_pay(request: HttpRequest, order_id: str) -> JsonResponse:
    """
    POST /api/orders/{order_id}/pay

    Pay for an existing order. Paying an already-paid order returns the
    original transaction id.

    Request body: PaymentRequest schema
    Response: PaymentResponse schema (200), 402 when declined
    """
    body = _parse_body(request)
    if body is None:
        return _invalid_json()

    try:
        payment_request = PaymentRequest.model_validate(body)
    except PydanticValidationError as e:
        return invalid_body_response(e)

    try:
        payment = process_payment(order_id, payment_request.provider)
        order = fetch_order(order_id)
    except TablesideError as e:
        return error_response(e)

    response = PaymentResponse(order=order, payment=payment)
    return json_response(
        response.model_dump(mode="json"), status=200 if payment.success else 402
    )


@require_GET
def recent(_request: HttpRequest) -> JsonResponse:
    """
    GET /api/orders/recent

    Line items (name, image) of the most recent orders, newest first.
    """
    try:
        carts = recent_orders(limit=settings.RECENT_ORDERS_LIMIT)
    except TablesideError as e:
        return error_response(e)

    response = RecentOrdersResponse(
        orders=[RecentOrderSchema(items=items) for items in carts]
    )
    return json_response(response.model_dump(mode="json"))


# =============================================================================
# Live order status
# =============================================================================


def _format_event(view: OrderView) -> str:
    payload = {
        "order": view.order.model_dump(mode="json") if view.order else None,
        "loading": view.loading,
        "not_found": view.not_found,
        "error": view.error,
    }
    return f"event: order\ndata: {json.dumps(payload)}\n\n"


async def _order_event_stream(order_id: str) -> AsyncIterator[str]:
    """Yield one event per view change until the order settles or vanishes."""
    queue: asyncio.Queue[OrderView] = asyncio.Queue()
    async with OrderStatusSync(
        order_id, fetch=afetch_order, on_change=queue.put_nowait
    ):
        while True:
            view = await queue.get()
            yield _format_event(view)
            if view.not_found:
                return
            if view.order is not None and is_terminal(view.order.status):
                logger.debug(
                    "Order %s reached %s, closing stream", order_id, view.order.status
                )
                return


@require_GET
async def order_events(
    _request: HttpRequest, order_id: str
) -> JsonResponse | StreamingHttpResponse:
    """
    GET /api/orders/{order_id}/events

    Server-Sent Events stream of the order as it changes. Each event
    carries {order, loading, not_found, error}. The stream ends once the
    order reaches a terminal status; a client disconnect tears down the
    subscription and polling.
    """
    try:
        await afetch_order(order_id)
    except TablesideError as e:
        return error_response(e)

    response = StreamingHttpResponse(
        _order_event_stream(order_id), content_type="text/event-stream"
    )
    response["Cache-Control"] = "no-cache"
    response["X-Accel-Buffering"] = "no"
    return response
