"""Domain exceptions for the Order bounded context.

All order domain exceptions inherit from OrderDomainError so the
application layer can handle them uniformly.
"""

from domain.shared.errors import DomainError


class OrderDomainError(DomainError):
    """Base exception for order domain errors."""

    pass


class InvalidStatusError(OrderDomainError, ValueError):
    """Raised when a status string is not part of the vocabulary."""

    def __init__(self, status: object):
        self.status = status
        super().__init__(f"Invalid status: {status!r}")


class InvalidTransitionError(OrderDomainError):
    """Raised when the requested status is not reachable from the current one.

    The write is rejected and no state changes.
    """

    def __init__(self, order_id: str, date_key: str, current: str, requested: str):
        self.order_id = order_id
        self.date_key = date_key
        self.current = current
        self.requested = requested
        super().__init__(
            f"Cannot change status from {current} to {requested} "
            f"(order {order_id}, {date_key})"
        )


class OrderNotFoundError(OrderDomainError):
    """Raised when the referenced order document does not exist."""

    def __init__(self, order_id: str):
        self.order_id = order_id
        super().__init__(f"Order not found: {order_id}")


class MissingSkipNoteError(OrderDomainError, ValueError):
    """Raised when the 'other' skip reason is used without a free-text note."""

    def __init__(self) -> None:
        super().__init__("Skip reason 'other' requires a note describing the reason")
