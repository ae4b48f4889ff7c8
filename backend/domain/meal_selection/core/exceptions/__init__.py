"""Domain exceptions for the meal selection bounded context."""

from domain.meal_selection.core.exceptions.domain_errors import (
    MealSelectionNotFoundError,
    MissingRejectionNoteError,
    OrderSelectionMismatchError,
    SkipRequestStateError,
)

__all__ = [
    "MealSelectionNotFoundError",
    "OrderSelectionMismatchError",
    "SkipRequestStateError",
    "MissingRejectionNoteError",
]
