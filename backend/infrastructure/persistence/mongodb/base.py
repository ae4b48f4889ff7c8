"""Base MongoDB repository with reusable patterns.

Provides common functionality for all MongoDB repositories:
- Session binding (every call joins the unit of work's transaction)
- Document mapping (domain ↔ MongoDB)
- Error handling (transient transaction errors become conflicts)
- Logging

All concrete MongoDB repositories should inherit from MongoBaseRepository.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import TypeVar, Generic, Optional, Dict, Any, List, NoReturn
import logging

from motor.motor_asyncio import (
    AsyncIOMotorClientSession,
    AsyncIOMotorCollection,
    AsyncIOMotorDatabase,
)
from pymongo.errors import DuplicateKeyError, PyMongoError

from domain.shared.errors import TransactionConflictError

TEntity = TypeVar("TEntity")

logger = logging.getLogger(__name__)

TRANSIENT_LABELS = ("TransientTransactionError", "UnknownTransactionCommitResult")

EPOCH = datetime.fromtimestamp(0, tz=timezone.utc)


class MongoBaseRepository(ABC, Generic[TEntity]):
    """
    Abstract base class for MongoDB repositories.

    Subclasses must implement:
    - collection_name: Name of MongoDB collection
    - to_document(): Convert domain entity to MongoDB document
    - from_document(): Convert MongoDB document to domain entity

    Example:
        class MongoOrderRepository(MongoBaseRepository[Order], IOrderRepository):
            @property
            def collection_name(self) -> str:
                return "orders"
            ...
    """

    def __init__(
        self,
        database: AsyncIOMotorDatabase,
        session: Optional[AsyncIOMotorClientSession] = None,
    ):
        """
        Initialize repository.

        Args:
            database: Motor database handle
            session: Client session of the enclosing unit of work, if any
        """
        self._db = database
        self._session = session
        self._collection: AsyncIOMotorCollection = database[self.collection_name]

    @property
    @abstractmethod
    def collection_name(self) -> str:
        """MongoDB collection name."""
        pass

    @abstractmethod
    def to_document(self, entity: TEntity) -> Dict[str, Any]:
        """Convert domain entity to MongoDB document."""
        pass

    @abstractmethod
    def from_document(self, doc: Dict[str, Any]) -> TEntity:
        """
        Convert MongoDB document to domain entity.

        Raises:
            ValueError: If document is invalid or missing required fields
        """
        pass

    @property
    def collection(self) -> AsyncIOMotorCollection:
        """Get MongoDB collection handle."""
        return self._collection

    @staticmethod
    def datetime_to_iso(dt: Optional[datetime]) -> Optional[str]:
        """
        Convert datetime to ISO string for MongoDB storage.

        Raises:
            ValueError: If the datetime is naive
        """
        if dt is None:
            return None
        if dt.tzinfo is None:
            raise ValueError("Datetime must be timezone-aware")
        return dt.isoformat()

    @staticmethod
    def to_datetime(value: Any) -> Optional[datetime]:
        """Read a stored timestamp (ISO string or BSON date); naive means UTC."""
        if value is None or value == "":
            return None
        dt = value if isinstance(value, datetime) else datetime.fromisoformat(str(value))
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        return dt

    async def _find_one(self, filter_dict: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Find single document with error handling."""
        try:
            return await self._collection.find_one(filter_dict, session=self._session)
        except PyMongoError as e:
            self._raise(e, "find_one", filter_dict)

    async def _find_many(self, filter_dict: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Find multiple documents with error handling."""
        try:
            cursor = self._collection.find(filter_dict, session=self._session)
            return await cursor.to_list(length=None)
        except PyMongoError as e:
            self._raise(e, "find_many", filter_dict)

    async def _save_versioned(self, doc_id: str, document: Dict[str, Any], version: int) -> None:
        """
        Write a document if its stored version still equals ``version``.

        The stored version becomes ``version + 1``. Version 0 also matches
        documents that predate versioning, and creates missing ones.

        Raises:
            TransactionConflictError: If the stored version moved on
        """
        body = {key: value for key, value in document.items() if key != "_id"}
        body["version"] = version + 1
        if version == 0:
            filter_dict: Dict[str, Any] = {"_id": doc_id, "version": {"$in": [0, None]}}
        else:
            filter_dict = {"_id": doc_id, "version": version}

        try:
            result = await self._collection.update_one(
                filter_dict,
                {"$set": body},
                upsert=version == 0,
                session=self._session,
            )
        except DuplicateKeyError as e:
            raise TransactionConflictError(
                f"{self.collection_name}/{doc_id} was created concurrently"
            ) from e
        except PyMongoError as e:
            self._raise(e, "update_one", filter_dict)

        if result.matched_count == 0 and result.upserted_id is None:
            raise TransactionConflictError(
                f"{self.collection_name}/{doc_id} version {version} is stale"
            )

    def _raise(self, error: PyMongoError, operation: str, filter_dict: Dict[str, Any]) -> NoReturn:
        """Log a driver error and re-raise it, as a conflict when transient."""
        if any(error.has_error_label(label) for label in TRANSIENT_LABELS):
            logger.info(
                "Transient transaction error",
                extra={"collection": self.collection_name, "operation": operation},
            )
            raise TransactionConflictError(str(error)) from error

        logger.error(
            f"Error in {operation}: collection={self.collection_name}, "
            f"filter={filter_dict}, error={error}"
        )
        raise error
