"""Unit of Work port (interface).

Groups the order and meal selection writes of one reconciliation step so
they commit together or not at all. It is the only path through which
``daily_statuses`` and ``daily_selections`` are written.
"""

from abc import ABC, abstractmethod
from types import TracebackType
from typing import Optional, Type

from domain.meal_selection.core.ports.meal_selection_repository import (
    IMealSelectionRepository,
)
from domain.order.core.ports.order_repository import IOrderRepository


class IUnitOfWork(ABC):
    """Transaction boundary over the order and meal selection repositories.

    Leaving the context without ``commit`` rolls back every staged write.

    Example:
        >>> async with uow_factory() as uow:
        ...     order = await uow.orders.get("O1")
        ...     order.ensure_daily_status("2025-03-10", now)
        ...     await uow.orders.save(order)
        ...     await uow.commit()
    """

    orders: IOrderRepository
    meal_selections: IMealSelectionRepository

    async def __aenter__(self) -> "IUnitOfWork":
        return self

    async def __aexit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        await self.rollback()

    @abstractmethod
    async def commit(self) -> None:
        """Make staged writes durable.

        Raises:
            TransactionConflictError: If a document read in this unit of
                work was modified concurrently
        """
        pass

    @abstractmethod
    async def rollback(self) -> None:
        """Discard staged writes; a no-op after commit."""
        pass
