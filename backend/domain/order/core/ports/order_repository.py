"""Order repository port (interface)."""

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from domain.order.core.entities.order import Order
from domain.order.core.value_objects.order_status import OrderStatus


class IOrderRepository(ABC):
    """Repository interface for the Order aggregate.

    Instances are bound to a unit of work: reads observe the transaction's
    snapshot and ``save`` is only made durable by ``IUnitOfWork.commit``.
    """

    @abstractmethod
    async def get(self, order_id: str) -> Optional[Order]:
        """Find order by id.

        Returns:
            Order entity if found, None otherwise
        """
        pass

    @abstractmethod
    async def save(self, order: Order) -> None:
        """Stage order for write (create or update).

        Note:
            Implementations compare ``order.version`` with the stored
            version at commit and raise TransactionConflictError on mismatch.
        """
        pass

    @abstractmethod
    async def list_by_ids(self, order_ids: Sequence[str]) -> List[Order]:
        """Find orders by ids; missing ids are ignored."""
        pass

    @abstractmethod
    async def list_all(self) -> List[Order]:
        """Every order, active or not."""
        pass

    @abstractmethod
    async def list_active_for_weekday(self, weekday: str) -> List[Order]:
        """Active orders delivering on the weekday (``Mon``..``Sun``)."""
        pass

    @abstractmethod
    async def list_with_status_on(self, date_key: str, status: OrderStatus) -> List[Order]:
        """Orders whose record for the date has the given status."""
        pass
