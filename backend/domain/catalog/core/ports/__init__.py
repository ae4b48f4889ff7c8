"""Catalog ports."""

from domain.catalog.core.ports.allergy_repository import IAllergyRepository

__all__ = ["IAllergyRepository"]
