"""Meal selection ports."""

from domain.meal_selection.core.ports.meal_selection_repository import (
    IMealSelectionRepository,
)

__all__ = ["IMealSelectionRepository"]
