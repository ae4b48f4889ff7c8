"""Unit tests for InMemoryUnitOfWork (copy-on-commit with version checks)."""

import pytest

from domain.catalog.core.entities.allergy import Allergy
from domain.meal_selection.core.entities.daily_selection import DailySelection
from domain.meal_selection.core.value_objects.skip_request import SkipRequestStatus
from domain.order.core.entities.status_record import StatusRecord
from domain.order.core.value_objects.order_status import OrderStatus
from domain.shared.errors import TransactionConflictError
from infrastructure.persistence.in_memory import (
    InMemoryAllergyRepository,
    InMemoryUnitOfWork,
)


class TestIsolation:
    @pytest.mark.asyncio
    async def test_uncommitted_writes_are_invisible(self, add_order, store, clock):
        """Staged writes stay private until commit."""
        add_order("O1")

        async with InMemoryUnitOfWork(store) as uow:
            order = await uow.orders.get("O1")
            order.ensure_daily_status("2025-03-10", clock.now())
            await uow.orders.save(order)

            async with InMemoryUnitOfWork(store) as other:
                assert (await other.orders.get("O1")).daily_statuses == {}

            # Read-your-writes inside the same unit of work.
            assert (await uow.orders.get("O1")).status_record("2025-03-10") is not None

        assert store.get_order("O1").daily_statuses == {}

    @pytest.mark.asyncio
    async def test_reads_are_copies(self, add_order, store, clock):
        add_order("O1")

        async with InMemoryUnitOfWork(store) as uow:
            order = await uow.orders.get("O1")
            order.ensure_daily_status("2025-03-10", clock.now())

        assert store.get_order("O1").daily_statuses == {}

    @pytest.mark.asyncio
    async def test_commit_bumps_version(self, add_order, store, clock):
        add_order("O1")

        for _ in range(2):
            async with InMemoryUnitOfWork(store) as uow:
                order = await uow.orders.get("O1")
                await uow.orders.save(order)
                await uow.commit()

        assert store.get_order("O1").version == 2

    @pytest.mark.asyncio
    async def test_rollback_discards(self, add_order, store, clock):
        add_order("O1")
        uow = InMemoryUnitOfWork(store)
        order = await uow.orders.get("O1")
        order.deactivate(clock.now())
        await uow.orders.save(order)

        await uow.rollback()
        await uow.commit()

        assert store.get_order("O1").is_active is True


class TestConflicts:
    @pytest.mark.asyncio
    async def test_lost_race_raises_and_writes_nothing(self, add_order, add_selection, store, clock):
        """The second of two overlapping writers to the same order loses."""
        add_order("O1")
        add_selection("S1", order_id="O1")
        first = InMemoryUnitOfWork(store)
        second = InMemoryUnitOfWork(store)

        order_a = await first.orders.get("O1")
        order_b = await second.orders.get("O1")
        selection_b = await second.meal_selections.get("S1")

        order_a.ensure_daily_status("2025-03-10", clock.now())
        await first.orders.save(order_a)
        await first.commit()

        order_b.deactivate(clock.now())
        selection_b.request_skip("2025-03-10", "user1", clock.now())
        await second.orders.save(order_b)
        await second.meal_selections.save(selection_b)
        with pytest.raises(TransactionConflictError):
            await second.commit()

        assert store.get_order("O1").is_active is True
        assert store.get_meal_selection("S1").daily_selection("2025-03-10") is None

    @pytest.mark.asyncio
    async def test_read_only_dependency_is_validated(self, add_order, add_selection, store, clock):
        """A decision based on a read becomes stale if that document changes."""
        add_order("O1")
        add_selection("S1", order_id="O1")
        reader = InMemoryUnitOfWork(store)
        writer = InMemoryUnitOfWork(store)

        await reader.orders.get("O1")
        selection = await reader.meal_selections.get("S1")
        selection.request_skip("2025-03-10", "user1", clock.now())
        await reader.meal_selections.save(selection)

        order = await writer.orders.get("O1")
        order.change_daily_status("2025-03-10", OrderStatus.CANCELLED, "admin1", clock.now())
        await writer.orders.save(order)
        await writer.commit()

        with pytest.raises(TransactionConflictError):
            await reader.commit()

    @pytest.mark.asyncio
    async def test_concurrent_creation_conflicts(self, store, clock):
        from domain.meal_selection.core.entities.meal_selection import MealSelection

        first = InMemoryUnitOfWork(store)
        second = InMemoryUnitOfWork(store)
        assert await first.meal_selections.get("S9") is None
        assert await second.meal_selections.get("S9") is None

        await first.meal_selections.save(MealSelection("S9", "O9", "u"))
        await first.commit()
        await second.meal_selections.save(MealSelection("S9", "O9", "other"))

        with pytest.raises(TransactionConflictError):
            await second.commit()
        assert store.get_meal_selection("S9").user_id == "u"


class TestQueries:
    @pytest.mark.asyncio
    async def test_order_queries(self, add_order, store, clock):
        add_order("O1", selected_days=["Mon"])
        add_order("O2", selected_days=["Tue"])
        add_order("O3", selected_days=["Mon"], is_active=False)
        add_order("O4", daily_statuses={
            "2025-03-10": StatusRecord(
                status=OrderStatus.OUT_FOR_DELIVERY,
                updated_at=clock.now(),
                updated_by="admin1",
                legacy_status="ready_for_pickup",
            )
        })

        async with InMemoryUnitOfWork(store) as uow:
            monday = await uow.orders.list_active_for_weekday("Mon")
            out = await uow.orders.list_with_status_on("2025-03-10", OrderStatus.OUT_FOR_DELIVERY)
            pending = await uow.orders.list_with_status_on("2025-03-10", OrderStatus.PENDING)
            by_ids = await uow.orders.list_by_ids(["O2", "missing"])

        assert [order.order_id for order in monday] == ["O1", "O4"]
        assert [order.order_id for order in out] == ["O4"]
        assert pending == []
        assert [order.order_id for order in by_ids] == ["O2"]

    @pytest.mark.asyncio
    async def test_selection_queries(self, add_selection, store):
        add_selection("S1", order_id="O1", daily_selections={
            "2025-03-10": DailySelection(
                is_skipped=True,
                skip_request_status=SkipRequestStatus.PENDING,
                admin_action_required=True,
            )
        })
        add_selection("S2", order_id="O2")

        async with InMemoryUnitOfWork(store) as uow:
            pending = await uow.meal_selections.list_with_pending_skip("2025-03-10")
            by_order = await uow.meal_selections.list_by_order_ids(["O1", "O2", "O3"])
            single = await uow.meal_selections.get_by_order_id("O2")

        assert [selection.selection_id for selection in pending] == ["S1"]
        assert set(by_order) == {"O1", "O2"}
        assert single.selection_id == "S2"

    @pytest.mark.asyncio
    async def test_allergies_sorted_by_name(self, store):
        store.add_allergy(Allergy("a2", "Peanuts"))
        store.add_allergy(Allergy("a1", "Gluten"))

        allergies = await InMemoryAllergyRepository(store).list_all()

        assert [allergy.name for allergy in allergies] == ["Gluten", "Peanuts"]
