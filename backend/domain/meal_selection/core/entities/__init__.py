"""Meal selection entities."""

from domain.meal_selection.core.entities.daily_selection import DailySelection
from domain.meal_selection.core.entities.meal_selection import (
    CONSISTENCY_SYNC_REASON,
    DEFAULT_USER_SKIP_REASON,
    MealSelection,
)

__all__ = [
    "DailySelection",
    "MealSelection",
    "DEFAULT_USER_SKIP_REASON",
    "CONSISTENCY_SYNC_REASON",
]
