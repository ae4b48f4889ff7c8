"""MongoDB implementation of IAllergyRepository."""

from typing import Any, Dict, List

from domain.catalog.core.entities.allergy import Allergy
from domain.catalog.core.ports.allergy_repository import IAllergyRepository

from .base import MongoBaseRepository


class MongoAllergyRepository(MongoBaseRepository[Allergy], IAllergyRepository):
    """Read-only access to the ``allergies`` collection."""

    @property
    def collection_name(self) -> str:
        return "allergies"

    def to_document(self, entity: Allergy) -> Dict[str, Any]:
        return {"_id": entity.allergy_id, "name": entity.name, "description": entity.description}

    def from_document(self, doc: Dict[str, Any]) -> Allergy:
        return Allergy(
            allergy_id=str(doc["_id"]),
            name=doc.get("name") or str(doc["_id"]),
            description=doc.get("description"),
        )

    async def list_all(self) -> List[Allergy]:
        return [self.from_document(doc) for doc in await self._find_many({})]
