"""Order ports."""

from domain.order.core.ports.order_repository import IOrderRepository

__all__ = ["IOrderRepository"]
