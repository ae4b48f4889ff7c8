"""In-memory implementation of IAllergyRepository for testing."""

from typing import List

from domain.catalog.core.entities.allergy import Allergy
from domain.catalog.core.ports.allergy_repository import IAllergyRepository
from infrastructure.persistence.in_memory.unit_of_work import InMemoryDocumentStore


class InMemoryAllergyRepository(IAllergyRepository):
    """Allergies read from the shared in-memory document store."""

    def __init__(self, store: InMemoryDocumentStore) -> None:
        self._store = store

    async def list_all(self) -> List[Allergy]:
        return sorted(self._store.allergies.values(), key=lambda allergy: allergy.name)
