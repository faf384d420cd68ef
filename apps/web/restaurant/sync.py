"""
Order status sync - keeps one order's view current while a customer watches.

Two sources feed the view: pushed updates from the realtime channel and a
periodic re-fetch. Whichever arrives, the record with the newer updated_at
wins; an older record never overwrites a newer one. After close() no
source writes to the view again.

Usage:
    async with OrderStatusSync(order_id, on_change=queue.put_nowait) as sync:
        print(sync.view.order.status)
"""

import asyncio
import contextlib
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, replace
from typing import Any
from uuid import UUID

from django.conf import settings

from tableside_schemas import OrderRecord

from apps.web.restaurant.exceptions import OrderNotFound, RemoteFailure
from apps.web.restaurant.realtime import ORDERS_TABLE, RealtimeChannel
from apps.web.restaurant.realtime import channel as default_channel
from apps.web.restaurant.store import afetch_order

logger = logging.getLogger(__name__)

FetchOrder = Callable[[UUID | str], Awaitable[OrderRecord]]


@dataclass(frozen=True)
class OrderView:
    """What the customer sees for one order."""

    order: OrderRecord | None = None
    loading: bool = True
    not_found: bool = False
    error: str | None = None


class OrderStatusSync:
    """
    Async context manager that tracks one order.

    Entering subscribes to pushed updates, performs the initial fetch and
    starts polling. Exiting unsubscribes and cancels polling together.

    Args:
        order_id: Order to watch.
        fetch: Coroutine function loading an order by id.
        channel: Realtime channel to subscribe to.
        poll_interval: Seconds between re-fetches.
        on_change: Called with the new OrderView whenever it changes.
            Always called on the event loop thread.
    """

    def __init__(
        self,
        order_id: UUID | str,
        fetch: FetchOrder | None = None,
        channel: RealtimeChannel | None = None,
        poll_interval: float | None = None,
        on_change: Callable[[OrderView], Any] | None = None,
    ) -> None:
        self.order_id = order_id
        self.view = OrderView()
        self._fetch = fetch or afetch_order
        self._channel = channel or default_channel
        self._poll_interval = (
            poll_interval
            if poll_interval is not None
            else settings.ORDER_POLL_INTERVAL_SECONDS
        )
        self._on_change = on_change
        self._loop: asyncio.AbstractEventLoop | None = None
        self._subscription = None
        self._poll_task: asyncio.Task | None = None
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def __aenter__(self) -> "OrderStatusSync":
        self._loop = asyncio.get_running_loop()
        self._subscription = self._channel.subscribe(
            ORDERS_TABLE, self.order_id, self._on_push
        )
        try:
            await self.refresh()
            self._poll_task = asyncio.create_task(self._poll())
        except BaseException:
            # __aexit__ does not run when entry fails
            await self.close()
            raise
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def close(self) -> None:
        """Stop both update sources. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True

        if self._subscription is not None:
            self._channel.unsubscribe(self._subscription)
        if self._poll_task is not None:
            self._poll_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._poll_task
        logger.debug("Stopped watching order %s", self.order_id)

    async def refresh(self) -> OrderView:
        """Fetch the order once and merge the result into the view."""
        try:
            order = await self._fetch(self.order_id)
        except OrderNotFound:
            self._set(replace(self.view, loading=False, not_found=True, error=None))
        except RemoteFailure as e:
            logger.warning("Failed to refresh order %s: %s", self.order_id, e.message)
            self._set(replace(self.view, loading=False, error=e.message))
        else:
            self._apply(order)
        return self.view

    async def _poll(self) -> None:
        while not self._closed:
            await asyncio.sleep(self._poll_interval)
            try:
                await self.refresh()
            except Exception:
                logger.exception("Unexpected error polling order %s", self.order_id)

    def _on_push(self, record: OrderRecord | dict[str, Any]) -> None:
        # Runs on whichever thread published; hop onto our loop
        if self._closed or self._loop is None or self._loop.is_closed():
            return
        self._loop.call_soon_threadsafe(self._apply, record)

    def _apply(self, record: OrderRecord | dict[str, Any]) -> None:
        order = (
            record
            if isinstance(record, OrderRecord)
            else OrderRecord.model_validate(record)
        )
        current = self.view.order
        if current is not None and order.updated_at < current.updated_at:
            logger.debug(
                "Discarding stale update for order %s (%s < %s)",
                self.order_id,
                order.updated_at,
                current.updated_at,
            )
            return
        self._set(OrderView(order=order, loading=False))

    def _set(self, view: OrderView) -> None:
        if self._closed or view == self.view:
            return
        self.view = view
        if self._on_change is not None:
            self._on_change(view)
