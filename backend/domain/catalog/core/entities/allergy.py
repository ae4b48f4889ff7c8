"""Allergy entity."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Allergy:
    """Allergy or dietary restriction referenced by id from customer profiles."""

    allergy_id: str
    name: str
    description: Optional[str] = None
