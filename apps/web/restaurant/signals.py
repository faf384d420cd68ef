"""
Signal receivers - push order updates to realtime subscribers.

Updates are published on commit so a rolled-back write is never pushed.
Inserts are not published; subscribers only watch existing orders.
"""

import logging
from functools import partial
from typing import Any

from django.db import transaction
from django.db.models.signals import post_save
from django.dispatch import receiver

from tableside_schemas import OrderRecord

from apps.web.restaurant.models import Order
from apps.web.restaurant.realtime import ORDERS_TABLE, channel

logger = logging.getLogger(__name__)


@receiver(post_save, sender=Order, dispatch_uid="publish_order_update")
def publish_order_update(
    sender: type[Order], instance: Order, created: bool, **kwargs: Any
) -> None:
    """Publish the saved order to its subscribers once the write commits."""
    if created:
        return

    record = OrderRecord.model_validate(instance)
    transaction.on_commit(partial(channel.publish, ORDERS_TABLE, record.id, record))
    logger.debug("Queued realtime update for order %s (%s)", record.id, record.status)
