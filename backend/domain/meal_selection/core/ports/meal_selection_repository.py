"""Meal selection repository port (interface)."""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Sequence

from domain.meal_selection.core.entities.meal_selection import MealSelection


class IMealSelectionRepository(ABC):
    """Repository interface for the MealSelection aggregate.

    ``order_id`` is an application enforced join key: at most one
    selection per order is expected, lookups by order return the first.
    """

    @abstractmethod
    async def get(self, selection_id: str) -> Optional[MealSelection]:
        """Find selection by id."""
        pass

    @abstractmethod
    async def get_by_order_id(self, order_id: str) -> Optional[MealSelection]:
        """Find the selection linked to an order."""
        pass

    @abstractmethod
    async def list_by_order_ids(self, order_ids: Sequence[str]) -> Dict[str, MealSelection]:
        """Selections keyed by order id; orders without one are absent."""
        pass

    @abstractmethod
    async def list_with_pending_skip(self, date_key: str) -> List[MealSelection]:
        """Selections holding a pending skip request on the date."""
        pass

    @abstractmethod
    async def save(self, selection: MealSelection) -> None:
        """Stage selection for write (create or update)."""
        pass
