"""Event bus port.

Command handlers publish the events returned by their transactional work
only after the unit of work committed. Subscribers (customer emails,
admin alerts) therefore never see a change that was rolled back, and a
subscriber failure never undoes a committed change.
"""

from typing import Awaitable, Callable, Protocol, Type, TypeVar

from domain.shared.events.base import DomainEvent

TEvent = TypeVar("TEvent", bound=DomainEvent)

EventHandler = Callable[[TEvent], Awaitable[None]]


class IEventBus(Protocol):
    """Publish/subscribe for committed domain events.

    Example:
        >>> bus.subscribe(OrderStatusChanged, notify_customer)
        >>> await bus.publish(OrderStatusChanged(order_id="O1", ...))
    """

    def subscribe(self, event_type: Type[TEvent], handler: EventHandler[TEvent]) -> None:
        """Register ``handler`` for ``event_type`` and its subclasses."""
        ...

    async def publish(self, event: DomainEvent) -> None:
        """Run every matching handler in subscription order.

        Handler errors are logged by the implementation, not raised.
        """
        ...
