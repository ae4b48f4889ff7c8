"""Cache implementations."""

from infrastructure.cache.allergy_name_cache import AllergyNameCache

__all__ = [
    "AllergyNameCache",
]
