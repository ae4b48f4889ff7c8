"""Unit tests for the Order aggregate."""

from datetime import datetime, timezone

import pytest

from domain.order.core.entities.order import Order
from domain.order.core.entities.status_record import (
    DEFAULT_STATUS_NOTE,
    MIGRATION_ACTOR,
    SYSTEM_ACTOR,
    StatusRecord,
)
from domain.order.core.events.order_status_changed import OrderStatusChanged
from domain.order.core.exceptions.domain_errors import InvalidTransitionError
from domain.order.core.value_objects.order_status import OrderStatus
from domain.shared.errors import InvalidDateKeyError

NOW = datetime(2025, 3, 10, 6, 0, tzinfo=timezone.utc)
LATER = datetime(2025, 3, 10, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def order():
    return Order(order_id="O1", customer_id="C1", selected_days=["Mon", "Wed"])


class TestEnsureDailyStatus:
    def test_creates_default_pending_record(self, order):
        record, created = order.ensure_daily_status("2025-03-10", NOW)

        assert created is True
        assert record.status is OrderStatus.PENDING
        assert record.updated_by == SYSTEM_ACTOR
        assert record.notes == DEFAULT_STATUS_NOTE
        assert order.daily_statuses["2025-03-10"] == record
        assert order.updated_at == NOW

    def test_second_call_returns_same_record(self, order):
        first, _ = order.ensure_daily_status("2025-03-10", NOW)
        second, created = order.ensure_daily_status("2025-03-10", LATER)

        assert created is False
        assert second == first
        assert second.updated_at == NOW

    def test_does_not_overwrite_non_default_status(self, order):
        order.change_daily_status("2025-03-10", OrderStatus.CANCELLED, "admin1", NOW)

        record, created = order.ensure_daily_status("2025-03-10", LATER)

        assert created is False
        assert record.status is OrderStatus.CANCELLED

    def test_rejects_malformed_date(self, order):
        with pytest.raises(InvalidDateKeyError):
            order.ensure_daily_status("10/03/2025", NOW)


class TestChangeDailyStatus:
    def test_legal_transition_writes_record_and_emits_event(self, order):
        record = order.change_daily_status(
            "2025-03-10",
            OrderStatus.OUT_FOR_DELIVERY,
            "admin1",
            NOW,
            notes="Driver left",
            notify_customer=True,
        )

        assert record.status is OrderStatus.OUT_FOR_DELIVERY
        assert record.updated_by == "admin1"
        assert order.current_status("2025-03-10") is OrderStatus.OUT_FOR_DELIVERY

        events = order.collect_events()
        assert len(events) == 1
        event = events[0]
        assert isinstance(event, OrderStatusChanged)
        assert event.previous_status is OrderStatus.PENDING
        assert event.new_status is OrderStatus.OUT_FOR_DELIVERY
        assert event.notify_customer is True
        assert order.collect_events() == []

    def test_illegal_transition_leaves_record_unchanged(self, order):
        order.change_daily_status("2025-03-10", OrderStatus.OUT_FOR_DELIVERY, "admin1", NOW)
        order.change_daily_status("2025-03-10", OrderStatus.DELIVERED, "admin1", NOW)
        before = order.status_record("2025-03-10")
        order.collect_events()

        with pytest.raises(InvalidTransitionError) as exc_info:
            order.change_daily_status("2025-03-10", OrderStatus.PENDING, "admin1", LATER)

        assert exc_info.value.current == "delivered"
        assert exc_info.value.requested == "pending"
        assert order.status_record("2025-03-10") == before
        assert order.collect_events() == []

    def test_same_status_is_allowed_on_terminal(self, order):
        order.change_daily_status("2025-03-10", OrderStatus.CANCELLED, "admin1", NOW)

        record = order.change_daily_status("2025-03-10", OrderStatus.CANCELLED, "admin2", LATER)

        assert record.updated_by == "admin2"

    def test_skip_reason_only_kept_for_skips(self, order):
        record = order.change_daily_status(
            "2025-03-10", OrderStatus.CANCELLED, "admin1", NOW, skip_reason="Public Holiday"
        )
        assert record.skip_reason is None

        skipped = order.change_daily_status(
            "2025-03-12", OrderStatus.DELIVERY_SKIPPED, "admin1", NOW, skip_reason="Public Holiday"
        )
        assert skipped.skip_reason == "Public Holiday"

    def test_legacy_status_transitions_as_normalized(self, order):
        order.daily_statuses["2025-03-10"] = StatusRecord(
            status=OrderStatus.OUT_FOR_DELIVERY,
            updated_at=NOW,
            updated_by="admin0",
            legacy_status="ready_for_pickup",
        )

        record = order.change_daily_status("2025-03-10", OrderStatus.DELIVERED, "admin1", LATER)

        assert record.status is OrderStatus.DELIVERED
        assert record.legacy_status is None


class TestMaintenance:
    def test_migrate_legacy_status_rewrites_literal(self, order):
        order.daily_statuses["2025-03-10"] = StatusRecord(
            status=OrderStatus.PENDING,
            updated_at=NOW,
            updated_by="admin0",
            legacy_status="in_preparation",
        )

        migrated = order.migrate_legacy_status("2025-03-10", LATER)

        assert migrated.status is OrderStatus.PENDING
        assert migrated.legacy_status is None
        assert migrated.stored_status == "pending"
        assert migrated.updated_by == MIGRATION_ACTOR
        assert "in_preparation" in migrated.notes

    def test_migrate_legacy_status_noop_without_legacy(self, order):
        order.ensure_daily_status("2025-03-10", NOW)
        assert order.migrate_legacy_status("2025-03-10", LATER) is None
        assert order.migrate_legacy_status("2025-03-11", LATER) is None

    def test_prune_statuses_before_cutoff(self, order):
        for day in ("2025-03-01", "2025-03-02", "2025-03-10"):
            order.ensure_daily_status(day, NOW)

        removed = order.prune_statuses_before("2025-03-03", LATER)

        assert removed == 2
        assert list(order.daily_statuses) == ["2025-03-10"]

    def test_is_scheduled_on_uses_weekday(self, order):
        assert order.is_scheduled_on("2025-03-10") is True  # Monday
        assert order.is_scheduled_on("2025-03-11") is False

    def test_deactivate(self, order):
        order.deactivate(NOW)
        assert order.is_active is False
        assert order.updated_at == NOW


class TestStatusRecord:
    def test_skip_reason_requires_skipped_status(self):
        with pytest.raises(ValueError):
            StatusRecord(
                status=OrderStatus.PENDING,
                updated_at=NOW,
                updated_by="admin1",
                skip_reason="Public Holiday",
            )

    def test_stored_status_round_trips_legacy(self):
        record = StatusRecord(
            status=OrderStatus.PENDING,
            updated_at=NOW,
            updated_by="admin1",
            legacy_status="in_preparation",
        )
        assert record.stored_status == "in_preparation"
