"""Order domain events."""

from domain.order.core.events.order_status_changed import OrderStatusChanged

__all__ = ["OrderStatusChanged"]
