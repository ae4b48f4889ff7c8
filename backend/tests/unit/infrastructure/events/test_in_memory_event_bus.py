"""Unit tests for InMemoryEventBus."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest

from domain.meal_selection.core.events.skip_events import SkipRequested
from domain.order.core.events.order_status_changed import OrderStatusChanged
from domain.order.core.value_objects.order_status import OrderStatus
from domain.shared.events.base import DomainEvent
from infrastructure.events.in_memory_bus import InMemoryEventBus

NOW = datetime(2025, 3, 9, 8, 0, tzinfo=timezone.utc)


@pytest.fixture
def bus() -> InMemoryEventBus:
    return InMemoryEventBus()


@pytest.fixture
def status_changed() -> OrderStatusChanged:
    return OrderStatusChanged.create(
        order_id="O1",
        customer_id="C1",
        date_key="2025-03-10",
        previous_status=OrderStatus.PENDING,
        new_status=OrderStatus.OUT_FOR_DELIVERY,
        actor_id="admin1",
        occurred_at=NOW,
    )


class TestInMemoryEventBus:
    @pytest.mark.asyncio
    async def test_publish_to_subscribers_in_order(self, bus, status_changed):
        calls = []

        async def first(event):
            calls.append(("first", event.order_id))

        async def second(event):
            calls.append(("second", event.order_id))

        bus.subscribe(OrderStatusChanged, first)
        bus.subscribe(OrderStatusChanged, second)
        await bus.publish(status_changed)

        assert calls == [("first", "O1"), ("second", "O1")]

    @pytest.mark.asyncio
    async def test_only_matching_type(self, bus, status_changed):
        handler = AsyncMock()
        bus.subscribe(SkipRequested, handler)

        await bus.publish(status_changed)

        handler.assert_not_called()

    @pytest.mark.asyncio
    async def test_base_class_subscription(self, bus, status_changed):
        """Subscribing to DomainEvent receives every event."""
        handler = AsyncMock()
        bus.subscribe(DomainEvent, handler)

        await bus.publish(status_changed)

        handler.assert_awaited_once_with(status_changed)

    @pytest.mark.asyncio
    async def test_failing_handler_does_not_stop_others(self, bus, status_changed):
        failing = AsyncMock(side_effect=RuntimeError("boom"))
        healthy = AsyncMock()
        bus.subscribe(OrderStatusChanged, failing)
        bus.subscribe(OrderStatusChanged, healthy)

        await bus.publish(status_changed)

        healthy.assert_awaited_once_with(status_changed)

    @pytest.mark.asyncio
    async def test_unsubscribe_and_clear(self, bus, status_changed):
        handler = AsyncMock()
        bus.subscribe(OrderStatusChanged, handler)

        assert bus.unsubscribe(OrderStatusChanged, handler) is True
        assert bus.unsubscribe(OrderStatusChanged, handler) is False
        await bus.publish(status_changed)
        handler.assert_not_called()

        bus.subscribe(OrderStatusChanged, handler)
        bus.clear()
        assert bus.get_handler_count(OrderStatusChanged) == 0
