"""Unit tests for status workflow services."""

from datetime import datetime, timezone

from domain.order.core.entities.order import Order
from domain.order.core.value_objects.order_status import OrderStatus
from domain.order.services.status_workflow import (
    get_allowed_next_statuses,
    get_status_history_for_date,
    get_status_statistics,
    group_orders_by_status,
    is_status_change_allowed,
)

NOW = datetime(2025, 3, 10, 6, 0, tzinfo=timezone.utc)
DATE = "2025-03-10"


def _order(order_id, status=None):
    order = Order(order_id=order_id, customer_id="C1")
    if status is not None:
        order.change_daily_status(DATE, status, "admin1", NOW)
    return order


def test_allowed_next_statuses_for_missing_record_is_pending_set():
    order = _order("O1")
    assert get_allowed_next_statuses(order, DATE) == OrderStatus.PENDING.allowed_next()
    assert is_status_change_allowed(order, DATE, OrderStatus.OUT_FOR_DELIVERY) is True


def test_allowed_next_statuses_empty_when_final():
    order = _order("O1", OrderStatus.CANCELLED)
    assert get_allowed_next_statuses(order, DATE) == frozenset()
    assert is_status_change_allowed(order, DATE, OrderStatus.CANCELLED) is False
    assert is_status_change_allowed(order, DATE, OrderStatus.PENDING) is False


def test_status_history_synthesizes_default_without_mutating():
    order = _order("O1")

    record = get_status_history_for_date(order, DATE)

    assert record.status is OrderStatus.PENDING
    assert record.notes == "Default status (dailyStatuses not found)"
    assert order.daily_statuses == {}


def test_group_and_statistics():
    orders = [
        _order("O1"),
        _order("O2", OrderStatus.OUT_FOR_DELIVERY),
        _order("O3", OrderStatus.OUT_FOR_DELIVERY),
        _order("O4", OrderStatus.DELIVERY_SKIPPED),
    ]

    grouped = group_orders_by_status(orders, DATE)
    assert [o.order_id for o in grouped[OrderStatus.OUT_FOR_DELIVERY]] == ["O2", "O3"]
    assert grouped[OrderStatus.DELIVERED] == []

    stats = get_status_statistics(orders, DATE)
    assert stats.total == 4
    assert stats.by_status[OrderStatus.OUT_FOR_DELIVERY].count == 2
    assert stats.by_status[OrderStatus.OUT_FOR_DELIVERY].percentage == 50
    assert stats.by_status[OrderStatus.PENDING].percentage == 25
    assert stats.by_status[OrderStatus.CANCELLED].count == 0


def test_statistics_empty():
    stats = get_status_statistics([], DATE)
    assert stats.total == 0
    assert all(count.percentage == 0 for count in stats.by_status.values())
