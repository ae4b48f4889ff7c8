"""Repository Factory for Persistence Layer.

Environment-based selection of the unit of work and catalog repositories.
Strategy:
- .env (runtime): REPOSITORY_BACKEND=mongodb (production persistence)
- .env.test (pytest): REPOSITORY_BACKEND=inmemory (fast, isolated tests)
- Default: inmemory (safe fallback if env vars not set)

Usage:
    from infrastructure.persistence.factory import get_unit_of_work_factory

    uow_factory = get_unit_of_work_factory()
    async with uow_factory() as uow:
        order = await uow.orders.get("O1")
"""

from typing import Optional

from application.shared.transaction import UnitOfWorkFactory
from domain.catalog.core.ports.allergy_repository import IAllergyRepository
from infrastructure.config import (
    get_mongodb_database,
    get_mongodb_uri,
    get_repository_backend,
)
from infrastructure.persistence.in_memory import (
    InMemoryAllergyRepository,
    InMemoryDocumentStore,
    InMemoryUnitOfWork,
)


def _require_mongodb_uri() -> str:
    uri = get_mongodb_uri()
    if not uri:
        raise ValueError(
            "REPOSITORY_BACKEND=mongodb but MONGODB_URI not set. "
            "Set MONGODB_URI in .env or use REPOSITORY_BACKEND=inmemory"
        )
    return uri


def create_unit_of_work_factory() -> UnitOfWorkFactory:
    """Create a unit of work factory based on REPOSITORY_BACKEND.

    Values:
        - "inmemory": Units of work over the process-wide in-memory store
        - "mongodb": Motor sessions with multi-document transactions

    Raises:
        ValueError: If mongodb selected but MONGODB_URI not set
    """
    if get_repository_backend() == "mongodb":
        from infrastructure.persistence.mongodb import MongoUnitOfWork, create_mongo_client

        client = create_mongo_client(_require_mongodb_uri())
        database_name = get_mongodb_database()
        return lambda: MongoUnitOfWork(client, database_name)

    store = get_in_memory_store()
    return lambda: InMemoryUnitOfWork(store)


def create_allergy_repository() -> IAllergyRepository:
    """Create allergy repository based on REPOSITORY_BACKEND."""
    if get_repository_backend() == "mongodb":
        from infrastructure.persistence.mongodb import (
            MongoAllergyRepository,
            create_mongo_client,
        )

        client = create_mongo_client(_require_mongodb_uri())
        return MongoAllergyRepository(client[get_mongodb_database()])

    return InMemoryAllergyRepository(get_in_memory_store())


# Singleton instances (lazy initialization)
_in_memory_store: Optional[InMemoryDocumentStore] = None
_unit_of_work_factory: Optional[UnitOfWorkFactory] = None
_allergy_repository: Optional[IAllergyRepository] = None


def get_in_memory_store() -> InMemoryDocumentStore:
    """Process-wide store backing the inmemory backend."""
    global _in_memory_store
    if _in_memory_store is None:
        _in_memory_store = InMemoryDocumentStore()
    return _in_memory_store


def get_unit_of_work_factory() -> UnitOfWorkFactory:
    global _unit_of_work_factory
    if _unit_of_work_factory is None:
        _unit_of_work_factory = create_unit_of_work_factory()
    return _unit_of_work_factory


def get_allergy_repository() -> IAllergyRepository:
    global _allergy_repository
    if _allergy_repository is None:
        _allergy_repository = create_allergy_repository()
    return _allergy_repository


def reset_repositories() -> None:
    """Reset singleton instances.

    Useful for testing to force re-creation with different env vars.
    """
    global _in_memory_store, _unit_of_work_factory, _allergy_repository
    _in_memory_store = None
    _unit_of_work_factory = None
    _allergy_repository = None
