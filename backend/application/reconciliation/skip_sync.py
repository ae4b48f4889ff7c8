"""Shared steps of the skip workflow run inside a unit of work."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, List, Optional, Tuple, Union
import logging

from domain.meal_selection.core.entities.meal_selection import MealSelection
from domain.meal_selection.core.exceptions.domain_errors import (
    MealSelectionNotFoundError,
    OrderSelectionMismatchError,
)
from domain.order.core.entities.order import Order
from domain.order.core.entities.status_record import StatusRecord
from domain.order.core.exceptions.domain_errors import (
    MissingSkipNoteError,
    OrderNotFoundError,
)
from domain.order.core.value_objects.order_status import OrderStatus
from domain.order.core.value_objects.skip_reason import SkipReason
from domain.shared.ports.unit_of_work import IUnitOfWork

logger = logging.getLogger(__name__)


@dataclass
class DirectSkipOutcome:
    """Result of a direct skip staged in a unit of work."""

    record: StatusRecord
    selection_updated: bool
    events: List[Any] = field(default_factory=list)


def resolve_skip_type(
    skip_type: Optional[Union[SkipReason, str]], reason: str
) -> SkipReason:
    """Pick the skip reason for a direct skip.

    An explicit type (stored value or display label) always wins. Without
    one the type is guessed from the reason text, which is only a fallback
    and is logged as such. Either way ``other`` needs a non-blank reason.

    Raises:
        MissingSkipNoteError: If the result is ``other`` and the reason is blank
        ValueError: If ``skip_type`` is not a known skip reason
    """
    if skip_type is None:
        resolved = SkipReason.infer_from_text(reason)
        logger.info(
            "Skip type inferred from reason text",
            extra={"reason": reason, "skip_type": resolved.value},
        )
    else:
        found = SkipReason.lookup(skip_type)
        if found is None:
            raise ValueError(f"Unknown skip reason: {skip_type!r}")
        resolved = found

    if resolved.requires_note and not (reason or "").strip():
        raise MissingSkipNoteError()
    return resolved


async def load_order(uow: IUnitOfWork, order_id: str) -> Order:
    """Read the order or raise OrderNotFoundError."""
    order = await uow.orders.get(order_id)
    if order is None:
        raise OrderNotFoundError(order_id)
    return order


async def load_order_and_selection(
    uow: IUnitOfWork,
    order_id: str,
    selection_id: Optional[str],
    require_selection: bool = True,
) -> Tuple[Order, Optional[MealSelection]]:
    """Read an order and its linked meal selection.

    With ``selection_id=None`` the selection is looked up by order id.

    Raises:
        OrderNotFoundError: If the order does not exist
        MealSelectionNotFoundError: If a required selection does not exist
        OrderSelectionMismatchError: If the selection belongs to another order
    """
    order = await load_order(uow, order_id)

    if selection_id is None:
        selection = await uow.meal_selections.get_by_order_id(order_id)
        if selection is None and require_selection:
            raise MealSelectionNotFoundError(order_id=order_id)
        return order, selection

    selection = await uow.meal_selections.get(selection_id)
    if selection is None:
        raise MealSelectionNotFoundError(selection_id=selection_id)
    if selection.order_id != order_id:
        raise OrderSelectionMismatchError(selection_id, order_id, selection.order_id)
    return order, selection


async def stage_direct_skip(
    uow: IUnitOfWork,
    order: Order,
    selection: Optional[MealSelection],
    date_key: str,
    actor_id: str,
    skip_type: SkipReason,
    reason: str,
    now: datetime,
    notify_customer: bool = False,
) -> DirectSkipOutcome:
    """Skip the date on both documents and stage the writes.

    The selection is checked first so an approved customer request is
    reported as a skip state error rather than a status no-op.
    """
    if selection is not None:
        selection.apply_direct_skip(date_key, actor_id, now, skip_type, reason)

    record = order.change_daily_status(
        date_key,
        OrderStatus.DELIVERY_SKIPPED,
        actor_id,
        now,
        notes=reason,
        skip_reason=skip_type.label,
        notify_customer=notify_customer,
    )

    await uow.orders.save(order)
    events = order.collect_events()
    if selection is not None:
        await uow.meal_selections.save(selection)
        events.extend(selection.collect_events())
    else:
        logger.warning(
            "Meal selection not written, skip applied to order only",
            extra={"order_id": order.order_id, "date": date_key},
        )

    return DirectSkipOutcome(
        record=record,
        selection_updated=selection is not None,
        events=events,
    )
