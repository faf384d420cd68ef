"""Tests for the realtime channel and order update publishing."""

import uuid

from django.db import transaction

import pytest

from tableside_schemas import OrderRecord, OrderStatus

from apps.web.restaurant.models import Order
from apps.web.restaurant.realtime import ORDERS_TABLE, RealtimeChannel, channel
from apps.web.restaurant.tests.factories import OrderFactory


class TestRealtimeChannel:
    """Tests for RealtimeChannel."""

    def test_publish_reaches_subscriber(self):
        realtime = RealtimeChannel()
        received = []
        realtime.subscribe("orders", "abc", received.append)

        delivered = realtime.publish("orders", "abc", {"status": "ready"})

        assert delivered == 1
        assert received == [{"status": "ready"}]

    def test_publish_scoped_to_record(self):
        realtime = RealtimeChannel()
        received = []
        realtime.subscribe("orders", "abc", received.append)

        delivered = realtime.publish("orders", "other", {"status": "ready"})

        assert delivered == 0
        assert received == []

    def test_record_id_compared_as_string(self):
        """UUID and str ids address the same subscription."""
        realtime = RealtimeChannel()
        order_id = uuid.uuid4()
        received = []
        realtime.subscribe(ORDERS_TABLE, order_id, received.append)

        realtime.publish(ORDERS_TABLE, str(order_id), "update")

        assert received == ["update"]

    def test_unsubscribe_stops_delivery(self):
        realtime = RealtimeChannel()
        received = []
        subscription = realtime.subscribe("orders", "abc", received.append)

        realtime.unsubscribe(subscription)
        realtime.publish("orders", "abc", "update")

        assert received == []
        assert realtime.subscriber_count("orders", "abc") == 0

    def test_unsubscribe_twice_is_harmless(self):
        realtime = RealtimeChannel()
        subscription = realtime.subscribe("orders", "abc", lambda record: None)

        realtime.unsubscribe(subscription)
        realtime.unsubscribe(subscription)

        assert realtime.subscriber_count("orders", "abc") == 0

    def test_failing_subscriber_does_not_block_others(self):
        realtime = RealtimeChannel()
        received = []

        def broken(record):
            raise RuntimeError("boom")

        realtime.subscribe("orders", "abc", broken)
        realtime.subscribe("orders", "abc", received.append)

        delivered = realtime.publish("orders", "abc", "update")

        assert delivered == 2
        assert received == ["update"]

    def test_subscriber_count(self):
        realtime = RealtimeChannel()
        first = realtime.subscribe("orders", "abc", lambda record: None)
        realtime.subscribe("orders", "abc", lambda record: None)

        assert realtime.subscriber_count("orders", "abc") == 2

        realtime.unsubscribe(first)

        assert realtime.subscriber_count("orders", "abc") == 1


@pytest.fixture
def order_updates():
    """Subscribe to an order for the length of the test."""
    received: list[OrderRecord] = []
    subscriptions = []

    def watch(order: Order) -> list[OrderRecord]:
        subscriptions.append(channel.subscribe(ORDERS_TABLE, order.pk, received.append))
        return received

    yield watch

    for subscription in subscriptions:
        channel.unsubscribe(subscription)


@pytest.mark.django_db
class TestOrderUpdatePublishing:
    """Tests for publishing saved orders to subscribers."""

    def test_update_published_on_commit(
        self, order_updates, django_capture_on_commit_callbacks
    ):
        order = OrderFactory()
        received = order_updates(order)

        with django_capture_on_commit_callbacks(execute=True):
            order.status = OrderStatus.PREPARING
            order.save()

        assert len(received) == 1
        assert isinstance(received[0], OrderRecord)
        assert received[0].id == order.pk
        assert received[0].status == OrderStatus.PREPARING

    def test_insert_not_published(self, django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks() as callbacks:
            OrderFactory()

        assert callbacks == []

    def test_rolled_back_update_not_published(
        self, order_updates, django_capture_on_commit_callbacks
    ):
        order = OrderFactory()
        received = order_updates(order)

        with django_capture_on_commit_callbacks(execute=True):
            with pytest.raises(RuntimeError):
                with transaction.atomic():
                    order.status = OrderStatus.CANCELLED
                    order.save()
                    raise RuntimeError("abort")

        assert received == []
