"""In-memory implementation of IUnitOfWork for testing and development.

The store keeps committed aggregates with a version counter. A unit of
work reads deep copies, stages writes privately and, at commit, checks
that nothing it read has changed since (optimistic concurrency, like a
document database transaction). Commit has no await point, so it is
atomic with respect to other coroutines.
"""

from copy import deepcopy
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple
import logging

from domain.catalog.core.entities.allergy import Allergy
from domain.meal_selection.core.entities.meal_selection import MealSelection
from domain.meal_selection.core.ports.meal_selection_repository import (
    IMealSelectionRepository,
)
from domain.meal_selection.core.value_objects.skip_request import SkipState
from domain.order.core.entities.order import Order
from domain.order.core.ports.order_repository import IOrderRepository
from domain.order.core.value_objects.order_status import OrderStatus
from domain.shared.errors import TransactionConflictError
from domain.shared.ports.unit_of_work import IUnitOfWork

logger = logging.getLogger(__name__)

ORDERS = "orders"
MEAL_SELECTIONS = "meal_selections"

# Version recorded for a document read as absent.
ABSENT = -1


@dataclass
class InMemoryDocumentStore:
    """Committed state shared by every unit of work built on it."""

    orders: Dict[str, Order] = field(default_factory=dict)
    meal_selections: Dict[str, MealSelection] = field(default_factory=dict)
    allergies: Dict[str, Allergy] = field(default_factory=dict)

    def add_order(self, order: Order) -> None:
        """Seed an order outside any transaction (fixtures, imports)."""
        self.orders[order.order_id] = deepcopy(order)

    def add_meal_selection(self, selection: MealSelection) -> None:
        """Seed a meal selection outside any transaction."""
        self.meal_selections[selection.selection_id] = deepcopy(selection)

    def add_allergy(self, allergy: Allergy) -> None:
        self.allergies[allergy.allergy_id] = allergy

    def get_order(self, order_id: str) -> Optional[Order]:
        """Committed copy of an order (test inspection)."""
        order = self.orders.get(order_id)
        return deepcopy(order) if order else None

    def get_meal_selection(self, selection_id: str) -> Optional[MealSelection]:
        """Committed copy of a meal selection (test inspection)."""
        selection = self.meal_selections.get(selection_id)
        return deepcopy(selection) if selection else None

    def clear(self) -> None:
        self.orders.clear()
        self.meal_selections.clear()
        self.allergies.clear()


class InMemoryUnitOfWork(IUnitOfWork):
    """Copy-on-commit unit of work over an InMemoryDocumentStore."""

    def __init__(self, store: InMemoryDocumentStore) -> None:
        self._store = store
        self._reads: Dict[Tuple[str, str], int] = {}
        self._staged: Dict[Tuple[str, str], Any] = {}
        self.orders = InMemoryOrderRepository(self)
        self.meal_selections = InMemoryMealSelectionRepository(self)

    async def commit(self) -> None:
        """
        Validate the read set and apply staged writes.

        Raises:
            TransactionConflictError: If a document read here was changed
                by a unit of work that committed first
        """
        for (collection, doc_id), read_version in self._reads.items():
            if self._committed_version(collection, doc_id) != read_version:
                logger.debug(
                    "Transaction conflict",
                    extra={"collection": collection, "doc_id": doc_id},
                )
                raise TransactionConflictError(
                    f"{collection}/{doc_id} was modified by a concurrent transaction"
                )

        for (collection, doc_id), entity in self._staged.items():
            stored = deepcopy(entity)
            stored.version = max(self._committed_version(collection, doc_id), 0) + 1
            self._collection(collection)[doc_id] = stored

        self._staged.clear()
        self._reads.clear()

    async def rollback(self) -> None:
        self._staged.clear()
        self._reads.clear()

    def _collection(self, name: str) -> Dict:
        return self._store.orders if name == ORDERS else self._store.meal_selections

    def _committed_version(self, collection: str, doc_id: str) -> int:
        entity = self._collection(collection).get(doc_id)
        return entity.version if entity is not None else ABSENT

    def _read(self, collection: str, doc_id: str):
        key = (collection, doc_id)
        if key in self._staged:
            return deepcopy(self._staged[key])
        entity = self._collection(collection).get(doc_id)
        self._reads.setdefault(key, entity.version if entity is not None else ABSENT)
        return deepcopy(entity) if entity is not None else None

    def _query(self, collection: str, predicate: Callable[[Any], bool]) -> List:
        """Documents matching the predicate; only matches join the read set."""
        ids = set(self._collection(collection)) | {
            doc_id for (name, doc_id) in self._staged if name == collection
        }
        matches = []
        for doc_id in sorted(ids):
            key = (collection, doc_id)
            if key in self._staged:
                candidate = self._staged[key]
            else:
                candidate = self._collection(collection)[doc_id]
            if predicate(candidate):
                matches.append(self._read(collection, doc_id))
        return matches

    def _stage(self, collection: str, doc_id: str, entity: Any) -> None:
        key = (collection, doc_id)
        # Blind write: the document must not change between staging and commit.
        self._reads.setdefault(key, self._committed_version(collection, doc_id))
        staged = deepcopy(entity)
        # Pending events belong to the caller, never to stored state.
        staged.collect_events()
        self._staged[key] = staged


class InMemoryOrderRepository(IOrderRepository):
    """Order repository bound to an InMemoryUnitOfWork."""

    def __init__(self, uow: InMemoryUnitOfWork) -> None:
        self._uow = uow

    async def get(self, order_id: str) -> Optional[Order]:
        return self._uow._read(ORDERS, order_id)

    async def save(self, order: Order) -> None:
        self._uow._stage(ORDERS, order.order_id, order)

    async def list_by_ids(self, order_ids: Sequence[str]) -> List[Order]:
        orders = [self._uow._read(ORDERS, order_id) for order_id in order_ids]
        return [order for order in orders if order is not None]

    async def list_all(self) -> List[Order]:
        return self._uow._query(ORDERS, lambda order: True)

    async def list_active_for_weekday(self, weekday: str) -> List[Order]:
        return self._uow._query(
            ORDERS, lambda order: order.is_active and weekday in order.selected_days
        )

    async def list_with_status_on(self, date_key: str, status: OrderStatus) -> List[Order]:
        return self._uow._query(
            ORDERS,
            lambda order: order.status_record(date_key) is not None
            and order.current_status(date_key) is status,
        )


class InMemoryMealSelectionRepository(IMealSelectionRepository):
    """Meal selection repository bound to an InMemoryUnitOfWork."""

    def __init__(self, uow: InMemoryUnitOfWork) -> None:
        self._uow = uow

    async def get(self, selection_id: str) -> Optional[MealSelection]:
        return self._uow._read(MEAL_SELECTIONS, selection_id)

    async def get_by_order_id(self, order_id: str) -> Optional[MealSelection]:
        matches = self._uow._query(
            MEAL_SELECTIONS, lambda selection: selection.order_id == order_id
        )
        return matches[0] if matches else None

    async def list_by_order_ids(self, order_ids: Sequence[str]) -> Dict[str, MealSelection]:
        wanted = set(order_ids)
        found: Dict[str, MealSelection] = {}
        for selection in self._uow._query(
            MEAL_SELECTIONS, lambda selection: selection.order_id in wanted
        ):
            if selection.order_id not in found:
                found[selection.order_id] = selection
        return found

    async def list_with_pending_skip(self, date_key: str) -> List[MealSelection]:
        return self._uow._query(
            MEAL_SELECTIONS,
            lambda selection: selection.skip_state(date_key) is SkipState.USER_REQUESTED_PENDING,
        )

    async def save(self, selection: MealSelection) -> None:
        self._uow._stage(MEAL_SELECTIONS, selection.selection_id, selection)
