"""In-memory event bus implementation.

Handlers run in-process, in subscription order, after the publishing
command has committed. A handler subscribed to a base event class also
receives its subclasses.
"""

import logging
from typing import Any, Awaitable, Callable, Dict, List, Type, TypeVar

from domain.shared.events.base import DomainEvent

logger = logging.getLogger(__name__)

TEvent = TypeVar("TEvent", bound=DomainEvent)

Handler = Callable[[Any], Awaitable[None]]


def _handler_name(handler: Handler) -> str:
    return getattr(handler, "__qualname__", repr(handler))


class InMemoryEventBus:
    """
    In-memory implementation of IEventBus port.

    Failed handlers are logged and never raised to the publisher, so a
    notification outage cannot fail an already committed status change.

    Example:
        >>> bus = InMemoryEventBus()
        >>> async def log_event(event: SkipRequested) -> None:
        ...     print(f"Skip requested for {event.date_key}")
        >>> bus.subscribe(SkipRequested, log_event)
        >>> await bus.publish(event)
    """

    def __init__(self) -> None:
        self._handlers: Dict[Type[DomainEvent], List[Handler]] = {}

    def subscribe(
        self,
        event_type: Type[TEvent],
        handler: Callable[[TEvent], Awaitable[None]],
    ) -> None:
        self._handlers.setdefault(event_type, []).append(handler)
        logger.debug(
            "Handler subscribed",
            extra={"event_type": event_type.__name__, "handler": _handler_name(handler)},
        )

    def _handlers_for(self, event_type: Type[DomainEvent]) -> List[Handler]:
        handlers: List[Handler] = []
        for klass in event_type.__mro__:
            handlers.extend(self._handlers.get(klass, []))
        return handlers

    async def publish(self, event: DomainEvent) -> None:
        """Deliver ``event`` to every matching handler."""
        event_type = type(event)
        handlers = self._handlers_for(event_type)

        if not handlers:
            logger.debug("No handlers for event", extra={"event_type": event_type.__name__})
            return

        logger.info(
            "Publishing event",
            extra={
                "event_type": event_type.__name__,
                "event_id": str(event.event_id),
                "handler_count": len(handlers),
            },
        )

        for handler in handlers:
            try:
                await handler(event)
            except Exception as e:
                logger.error(
                    "Event handler failed",
                    extra={
                        "event_type": event_type.__name__,
                        "event_id": str(event.event_id),
                        "handler": _handler_name(handler),
                        "error": str(e),
                    },
                    exc_info=True,
                )

    def unsubscribe(
        self,
        event_type: Type[TEvent],
        handler: Callable[[TEvent], Awaitable[None]],
    ) -> bool:
        """Remove the first registration of ``handler``; False if absent."""
        handlers = self._handlers.get(event_type)
        if not handlers or handler not in handlers:
            return False
        handlers.remove(handler)
        return True

    def clear(self) -> None:
        self._handlers.clear()

    def get_handler_count(self, event_type: Type[DomainEvent]) -> int:
        """Handlers registered directly on ``event_type`` (testing aid)."""
        return len(self._handlers.get(event_type, []))
