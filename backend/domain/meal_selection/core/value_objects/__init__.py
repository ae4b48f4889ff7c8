"""Meal selection value objects."""

from domain.meal_selection.core.value_objects.skip_request import (
    SkipAction,
    SkipRequestStatus,
    SkipState,
)

__all__ = ["SkipAction", "SkipRequestStatus", "SkipState"]
