"""Domain exceptions for the Order bounded context."""

from domain.order.core.exceptions.domain_errors import (
    InvalidStatusError,
    InvalidTransitionError,
    MissingSkipNoteError,
    OrderDomainError,
    OrderNotFoundError,
)

__all__ = [
    "OrderDomainError",
    "InvalidStatusError",
    "InvalidTransitionError",
    "OrderNotFoundError",
    "MissingSkipNoteError",
]
