"""Unit tests for the persistence factory.

Tests environment-based backend selection with in-memory fallback.
"""

import pytest

from infrastructure.persistence.factory import (
    create_allergy_repository,
    create_unit_of_work_factory,
    get_allergy_repository,
    get_in_memory_store,
    get_unit_of_work_factory,
    reset_repositories,
)
from infrastructure.persistence.in_memory import (
    InMemoryAllergyRepository,
    InMemoryUnitOfWork,
)


@pytest.fixture(autouse=True)
def _reset():
    reset_repositories()
    yield
    reset_repositories()


class TestCreateUnitOfWorkFactory:
    def test_default_to_inmemory_when_env_not_set(self, monkeypatch):
        """Should build in-memory units of work when REPOSITORY_BACKEND not set."""
        monkeypatch.delenv("REPOSITORY_BACKEND", raising=False)

        factory = create_unit_of_work_factory()

        assert isinstance(factory(), InMemoryUnitOfWork)

    def test_inmemory_units_share_the_store(self, monkeypatch):
        monkeypatch.setenv("REPOSITORY_BACKEND", "InMemory")

        factory = create_unit_of_work_factory()

        assert factory()._store is get_in_memory_store()
        assert factory() is not factory()

    def test_mongodb_creates_mongo_unit_of_work(self, monkeypatch):
        """Should create MongoUnitOfWork when mongodb mode (no I/O until entered)."""
        from infrastructure.persistence.mongodb import MongoUnitOfWork

        monkeypatch.setenv("REPOSITORY_BACKEND", "mongodb")
        monkeypatch.setenv("MONGODB_URI", "mongodb://localhost:27017")

        factory = create_unit_of_work_factory()

        assert isinstance(factory(), MongoUnitOfWork)

    def test_mongodb_without_uri_raises_error(self, monkeypatch):
        """Should raise ValueError when mongodb but no MONGODB_URI."""
        monkeypatch.setenv("REPOSITORY_BACKEND", "mongodb")
        monkeypatch.delenv("MONGODB_URI", raising=False)

        with pytest.raises(ValueError, match="MONGODB_URI not set"):
            create_unit_of_work_factory()

        with pytest.raises(ValueError, match="MONGODB_URI not set"):
            create_allergy_repository()


class TestSingletonGetters:
    def test_same_instance(self, monkeypatch):
        monkeypatch.setenv("REPOSITORY_BACKEND", "inmemory")

        assert get_unit_of_work_factory() is get_unit_of_work_factory()
        assert get_allergy_repository() is get_allergy_repository()
        assert isinstance(get_allergy_repository(), InMemoryAllergyRepository)

    def test_reset_clears_cached_instances(self, monkeypatch):
        monkeypatch.setenv("REPOSITORY_BACKEND", "inmemory")
        store = get_in_memory_store()
        factory = get_unit_of_work_factory()

        reset_repositories()

        assert get_in_memory_store() is not store
        assert get_unit_of_work_factory() is not factory
