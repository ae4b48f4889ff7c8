"""Meal selection domain events."""

from domain.meal_selection.core.events.skip_events import (
    SkipRequested,
    SkipRequestResolved,
)

__all__ = ["SkipRequested", "SkipRequestResolved"]
