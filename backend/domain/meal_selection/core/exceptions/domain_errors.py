"""Domain exceptions for meal selections and skip requests.

They share the OrderDomainError base: a skip request is one half of the
order/selection reconciliation and callers handle both uniformly.
"""

from typing import Optional

from domain.order.core.exceptions.domain_errors import OrderDomainError


class MealSelectionNotFoundError(OrderDomainError):
    """Raised when the referenced meal selection document does not exist."""

    def __init__(self, selection_id: Optional[str] = None, order_id: Optional[str] = None):
        self.selection_id = selection_id
        self.order_id = order_id
        if selection_id is not None:
            message = f"Meal selection not found: {selection_id}"
        else:
            message = f"Meal selection not found for order: {order_id}"
        super().__init__(message)


class OrderSelectionMismatchError(OrderDomainError):
    """Raised when a meal selection does not belong to the given order."""

    def __init__(self, selection_id: str, order_id: str, linked_order_id: str):
        self.selection_id = selection_id
        self.order_id = order_id
        self.linked_order_id = linked_order_id
        super().__init__(
            f"Meal selection {selection_id} belongs to order {linked_order_id}, not {order_id}"
        )


class SkipRequestStateError(OrderDomainError):
    """Raised when a skip operation is not legal in the current skip state.

    Examples:
    - approving or rejecting when no request is pending
    - direct skip over an already approved customer request
    """

    def __init__(self, date_key: str, state: str, operation: str):
        self.date_key = date_key
        self.state = state
        self.operation = operation
        super().__init__(f"Cannot {operation} on {date_key}: skip state is {state}")


class MissingRejectionNoteError(OrderDomainError, ValueError):
    """Raised when a skip request is rejected without a note for the customer."""

    def __init__(self) -> None:
        super().__init__("Rejecting a skip request requires a rejection note")
