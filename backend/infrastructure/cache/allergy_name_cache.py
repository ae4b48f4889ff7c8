"""
Allergy name cache.

Allergy ids are resolved to display names on every order row of the
kitchen dashboard; the catalog changes rarely, so it is loaded once per
TTL window.
"""

import logging
from typing import Dict, List, Sequence

from cachetools import TTLCache

from domain.catalog.core.entities.allergy import Allergy
from domain.catalog.core.ports.allergy_repository import IAllergyRepository
from domain.shared.ports.clock import IClock

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 300

_CATALOG_KEY = "allergies"


class AllergyNameCache:
    """TTL cache over IAllergyRepository.list_all().

    A failed reload keeps serving the previous entries (or nothing, if the
    cache was never loaded) and is retried on the next call.
    """

    def __init__(
        self,
        repository: IAllergyRepository,
        clock: IClock,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
    ) -> None:
        self._repository = repository
        self._clock = clock
        # Expiry only; the last loaded catalog outlives it for stale reads.
        self._fresh: TTLCache[str, bool] = TTLCache(
            maxsize=1, ttl=ttl_seconds, timer=lambda: clock.now().timestamp()
        )
        self._allergies: List[Allergy] = []
        self._names: Dict[str, str] = {}

    async def get_all(self) -> List[Allergy]:
        """Every allergy, reloading the catalog when the TTL has elapsed."""
        if _CATALOG_KEY in self._fresh:
            return list(self._allergies)

        try:
            allergies = await self._repository.list_all()
        except Exception as e:
            logger.error(
                "Allergy catalog reload failed, serving stale entries",
                extra={"cached": len(self._allergies), "error": str(e)},
                exc_info=True,
            )
            return list(self._allergies)

        self._allergies = list(allergies)
        self._names = {allergy.allergy_id: allergy.name for allergy in self._allergies}
        self._fresh[_CATALOG_KEY] = True
        logger.debug(f"Allergy cache loaded: {len(self._allergies)} entries")
        return list(self._allergies)

    async def get_names(self, allergy_ids: Sequence[str]) -> List[str]:
        """Display names in input order; unknown ids render as ``Unknown (<id>)``."""
        await self.get_all()
        return [self._names.get(allergy_id, f"Unknown ({allergy_id})") for allergy_id in allergy_ids]

    def clear(self) -> None:
        self._allergies = []
        self._names = {}
        self._fresh.clear()
