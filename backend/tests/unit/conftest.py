"""Unit test configuration.

Unit tests run against the in-memory unit of work and a fake clock; they
never touch MongoDB or the network.
"""

from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, FrozenSet, List, Optional
from unittest.mock import AsyncMock

import pytest

from domain.meal_selection.core.entities.daily_selection import DailySelection
from domain.meal_selection.core.entities.meal_selection import MealSelection
from domain.order.core.entities.order import Order
from domain.order.core.entities.status_record import StatusRecord
from infrastructure.persistence.in_memory import (
    InMemoryDocumentStore,
    InMemoryOrderRepository,
    InMemoryUnitOfWork,
)

FIXED_NOW = datetime(2025, 3, 9, 8, 0, tzinfo=timezone.utc)

ALL_DAYS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]


class FakeClock:
    """IClock whose time only moves when told to."""

    def __init__(self, now: datetime = FIXED_NOW) -> None:
        self.current = now

    def now(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> None:
        self.current = self.current + timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def uow_factory(store):
    return lambda: InMemoryUnitOfWork(store)


class UnreachableOrderRepository(InMemoryOrderRepository):
    """Order reads that fail like a lost MongoDB connection for some ids."""

    def __init__(self, uow: InMemoryUnitOfWork, unreachable: FrozenSet[str]) -> None:
        super().__init__(uow)
        self._unreachable = unreachable

    async def get(self, order_id: str) -> Optional[Order]:
        if order_id in self._unreachable:
            raise ConnectionError("server selection timeout")
        return await super().get(order_id)


class UnreachableOrdersUnitOfWork(InMemoryUnitOfWork):
    def __init__(self, store: InMemoryDocumentStore, unreachable: FrozenSet[str]) -> None:
        super().__init__(store)
        self.orders = UnreachableOrderRepository(self, unreachable)


@pytest.fixture
def unreachable_uow_factory(store):
    """Build a uow factory whose reads of the given order ids raise ConnectionError."""

    def _build(*order_ids: str):
        return lambda: UnreachableOrdersUnitOfWork(store, frozenset(order_ids))

    return _build


@pytest.fixture
def event_bus():
    return AsyncMock()


@pytest.fixture
def add_order(store) -> Callable[..., Order]:
    """Seed an order; returns the seeded copy."""

    def _add(
        order_id: str = "O1",
        customer_id: str = "C1",
        selected_days: Optional[List[str]] = None,
        daily_statuses: Optional[Dict[str, StatusRecord]] = None,
        is_active: bool = True,
    ) -> Order:
        order = Order(
            order_id=order_id,
            customer_id=customer_id,
            selected_days=list(ALL_DAYS if selected_days is None else selected_days),
            is_active=is_active,
            daily_statuses=dict(daily_statuses or {}),
            created_at=FIXED_NOW,
            updated_at=FIXED_NOW,
        )
        store.add_order(order)
        return order

    return _add


@pytest.fixture
def add_selection(store) -> Callable[..., MealSelection]:
    """Seed a meal selection linked to an order."""

    def _add(
        selection_id: str = "S1",
        order_id: str = "O1",
        user_id: str = "user1",
        daily_selections: Optional[Dict[str, DailySelection]] = None,
    ) -> MealSelection:
        selection = MealSelection(
            selection_id=selection_id,
            order_id=order_id,
            user_id=user_id,
            start_date="2025-03-01",
            end_date="2025-03-31",
            daily_selections=dict(daily_selections or {}),
            updated_at=FIXED_NOW,
        )
        store.add_meal_selection(selection)
        return selection

    return _add
