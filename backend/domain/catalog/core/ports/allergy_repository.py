"""Allergy repository port (interface)."""

from abc import ABC, abstractmethod
from typing import List

from domain.catalog.core.entities.allergy import Allergy


class IAllergyRepository(ABC):
    """Read access to the allergies collection."""

    @abstractmethod
    async def list_all(self) -> List[Allergy]:
        """Every allergy in the catalog."""
        pass
