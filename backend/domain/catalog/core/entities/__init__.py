"""Catalog entities."""

from domain.catalog.core.entities.allergy import Allergy

__all__ = ["Allergy"]
