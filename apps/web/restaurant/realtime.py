"""
Realtime change channel - in-process fan-out of record updates.

Subscribers register for one record of one table and receive the full
updated record. Publishing happens from whichever thread saved the row
(usually an ORM worker thread), so callbacks must be thread-safe.
"""

import itertools
import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

ORDERS_TABLE = "orders"


@dataclass(frozen=True)
class Subscription:
    """Handle returned by subscribe(); pass it to unsubscribe()."""

    id: int
    table: str
    record_id: str


class RealtimeChannel:
    """
    Update-notification channel keyed by (table, record id).

    Usage:
        sub = channel.subscribe("orders", order_id, on_update)
        ...
        channel.unsubscribe(sub)
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._ids = itertools.count(1)
        self._subscribers: dict[tuple[str, str], dict[int, Callable[[Any], None]]] = {}

    def subscribe(
        self,
        table: str,
        record_id: object,
        on_update: Callable[[Any], None],
    ) -> Subscription:
        """Register on_update for updates to one record."""
        key = (table, str(record_id))
        with self._lock:
            subscription = Subscription(next(self._ids), table, key[1])
            self._subscribers.setdefault(key, {})[subscription.id] = on_update
        logger.debug("Subscribed %s to %s:%s", subscription.id, table, key[1])
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        """Remove a subscription. Unknown or repeated handles are ignored."""
        key = (subscription.table, subscription.record_id)
        with self._lock:
            callbacks = self._subscribers.get(key)
            if callbacks is None:
                return
            callbacks.pop(subscription.id, None)
            if not callbacks:
                del self._subscribers[key]
        logger.debug("Unsubscribed %s", subscription.id)

    def subscriber_count(self, table: str, record_id: object) -> int:
        """Number of live subscriptions for one record."""
        with self._lock:
            return len(self._subscribers.get((table, str(record_id)), {}))

    def publish(self, table: str, record_id: object, record: Any) -> int:
        """
        Deliver record to every subscriber of (table, record_id).

        A failing callback is logged and does not stop delivery to the
        others.

        Returns:
            Number of callbacks invoked.
        """
        with self._lock:
            subscribers = self._subscribers.get((table, str(record_id)), {})
            callbacks = list(subscribers.values())

        for callback in callbacks:
            try:
                callback(record)
            except Exception as e:
                logger.exception(
                    "Realtime subscriber failed for %s:%s: %s", table, record_id, e
                )
        return len(callbacks)


# Process-wide channel used by signals and the order status stream
channel = RealtimeChannel()
