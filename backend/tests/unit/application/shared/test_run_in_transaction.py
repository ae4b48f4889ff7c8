"""Unit tests for run_in_transaction (optimistic retry loop)."""

import pytest

from application.shared.transaction import run_in_transaction
from domain.shared.errors import TransactionConflictError
from infrastructure.persistence.in_memory import InMemoryUnitOfWork


class RacingUnitOfWork(InMemoryUnitOfWork):
    """Simulates a concurrent writer committing O1 just before us."""

    def __init__(self, store, races):
        super().__init__(store)
        self._races = races

    async def commit(self) -> None:
        if self._races["remaining"] > 0:
            self._races["remaining"] -= 1
            self._store.orders["O1"].version += 1
        await super().commit()


def _racing_factory(store, races):
    counter = {"remaining": races}
    return lambda: RacingUnitOfWork(store, counter), counter


async def _ensure(uow, date_key="2025-03-10", now=None):
    order = await uow.orders.get("O1")
    _, created = order.ensure_daily_status(date_key, now)
    await uow.orders.save(order)
    return created


class TestRunInTransaction:
    @pytest.mark.asyncio
    async def test_commits_work(self, add_order, uow_factory, store, clock):
        add_order("O1")

        async def work(uow):
            return await _ensure(uow, now=clock.now())

        assert await run_in_transaction(uow_factory, work) is True
        assert store.get_order("O1").status_record("2025-03-10") is not None
        assert store.get_order("O1").version == 1

    @pytest.mark.asyncio
    async def test_retries_after_conflict(self, add_order, store, clock):
        add_order("O1")
        factory, counter = _racing_factory(store, races=2)
        attempts = []

        async def work(uow):
            attempts.append(1)
            return await _ensure(uow, now=clock.now())

        await run_in_transaction(factory, work, max_attempts=5)

        assert len(attempts) == 3
        assert counter["remaining"] == 0
        assert store.get_order("O1").status_record("2025-03-10") is not None

    @pytest.mark.asyncio
    async def test_conflict_surfaced_after_max_attempts(self, add_order, store, clock):
        add_order("O1")
        factory, _ = _racing_factory(store, races=10)
        attempts = []

        async def work(uow):
            attempts.append(1)
            return await _ensure(uow, now=clock.now())

        with pytest.raises(TransactionConflictError):
            await run_in_transaction(factory, work, max_attempts=3)

        assert len(attempts) == 3
        assert store.get_order("O1").daily_statuses == {}

    @pytest.mark.asyncio
    async def test_other_errors_not_retried(self, add_order, uow_factory, store, clock):
        add_order("O1")
        attempts = []

        async def work(uow):
            attempts.append(1)
            await _ensure(uow, now=clock.now())
            raise ValueError("boom")

        with pytest.raises(ValueError):
            await run_in_transaction(uow_factory, work)

        assert len(attempts) == 1
        assert store.get_order("O1").daily_statuses == {}
