"""MongoDB implementation of IUnitOfWork (multi-document transactions).

Requires a replica set or sharded cluster: standalone servers do not
support transactions.
"""

from types import TracebackType
from typing import Optional, Type
import logging

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorClientSession
from pymongo.errors import PyMongoError

from domain.shared.errors import TransactionConflictError
from domain.shared.ports.unit_of_work import IUnitOfWork

from .base import TRANSIENT_LABELS
from .meal_selection_repository import MongoMealSelectionRepository
from .order_repository import MongoOrderRepository

logger = logging.getLogger(__name__)


class MongoUnitOfWork(IUnitOfWork):
    """One client session and transaction per unit of work.

    Example:
        >>> async with MongoUnitOfWork(client, "meal_delivery") as uow:
        ...     order = await uow.orders.get("O1")
        ...     await uow.commit()
    """

    def __init__(self, client: AsyncIOMotorClient, database_name: str) -> None:
        self._client = client
        self._database_name = database_name
        self._session: Optional[AsyncIOMotorClientSession] = None

    async def __aenter__(self) -> "MongoUnitOfWork":
        self._session = await self._client.start_session()
        self._session.start_transaction()
        database = self._client[self._database_name]
        self.orders = MongoOrderRepository(database, self._session)
        self.meal_selections = MongoMealSelectionRepository(database, self._session)
        return self

    async def __aexit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        try:
            await self.rollback()
        finally:
            if self._session is not None:
                await self._session.end_session()
                self._session = None

    async def commit(self) -> None:
        """
        Commit the transaction.

        Raises:
            TransactionConflictError: On transient transaction errors
        """
        if self._session is None:
            raise RuntimeError("MongoUnitOfWork used outside 'async with'")
        try:
            await self._session.commit_transaction()
        except PyMongoError as e:
            if any(e.has_error_label(label) for label in TRANSIENT_LABELS):
                raise TransactionConflictError(str(e)) from e
            logger.error("Transaction commit failed", extra={"error": str(e)})
            raise

    async def rollback(self) -> None:
        if self._session is not None and self._session.in_transaction:
            await self._session.abort_transaction()
