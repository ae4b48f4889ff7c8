"""In-memory persistence implementations."""

from infrastructure.persistence.in_memory.allergy_repository import (
    InMemoryAllergyRepository,
)
from infrastructure.persistence.in_memory.unit_of_work import (
    InMemoryDocumentStore,
    InMemoryMealSelectionRepository,
    InMemoryOrderRepository,
    InMemoryUnitOfWork,
)

__all__ = [
    "InMemoryAllergyRepository",
    "InMemoryDocumentStore",
    "InMemoryMealSelectionRepository",
    "InMemoryOrderRepository",
    "InMemoryUnitOfWork",
]
