"""Complete orders query - orders joined with their meal selection for a date.

Feeds the kitchen's daily preparation list.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional
import logging

from application.shared.transaction import UnitOfWorkFactory
from domain.meal_selection.core.entities.daily_selection import DailySelection
from domain.order.core.entities.order import Order
from domain.order.core.entities.status_record import StatusRecord
from domain.order.core.value_objects.order_status import OrderStatus
from domain.shared.value_objects.date_key import DateLike, date_key_for, weekday_name

logger = logging.getLogger(__name__)


class PreparationStatus(str, Enum):
    SKIPPED = "skipped"
    USER_SELECTED = "user_selected"
    CHEF_SELECTION_NEEDED = "chef_selection_needed"


@dataclass(frozen=True)
class PreparationInfo:
    """What the kitchen has to do for an order on the date."""

    status: PreparationStatus
    source: str
    message: str


@dataclass(frozen=True)
class CompleteOrder:
    order: Order
    date_key: str
    status_record: Optional[StatusRecord]
    selection_id: Optional[str]
    daily_selection: Optional[DailySelection]
    preparation: PreparationInfo


def determine_preparation(
    order_status: OrderStatus, daily_selection: Optional[DailySelection]
) -> PreparationInfo:
    """Order status wins over the selection; a skipped selection wins over meals."""
    if order_status is OrderStatus.DELIVERY_SKIPPED:
        return PreparationInfo(PreparationStatus.SKIPPED, "order_status", "Delivery skipped")
    if daily_selection is not None and daily_selection.is_skipped:
        return PreparationInfo(
            PreparationStatus.SKIPPED, "meal_selection", "Customer skipped this day"
        )
    if daily_selection is not None and daily_selection.has_meals:
        return PreparationInfo(
            PreparationStatus.USER_SELECTED, "meal_selection", "Customer selected meals"
        )
    return PreparationInfo(
        PreparationStatus.CHEF_SELECTION_NEEDED, "meal_selection", "Chef selection required"
    )


@dataclass(frozen=True)
class GetCompleteOrdersQuery:
    """Query: active orders delivering on a date, with selection data."""

    date: DateLike


class GetCompleteOrdersQueryHandler:
    """Handler for GetCompleteOrdersQuery."""

    def __init__(self, uow_factory: UnitOfWorkFactory):
        self._uow_factory = uow_factory

    async def handle(self, query: GetCompleteOrdersQuery) -> List[CompleteOrder]:
        date_key = date_key_for(query.date)
        async with self._uow_factory() as uow:
            orders = await uow.orders.list_active_for_weekday(weekday_name(date_key))
            selections = await uow.meal_selections.list_by_order_ids(
                [order.order_id for order in orders]
            )

        complete: List[CompleteOrder] = []
        for order in orders:
            selection = selections.get(order.order_id)
            daily = selection.daily_selection(date_key) if selection else None
            complete.append(
                CompleteOrder(
                    order=order,
                    date_key=date_key,
                    status_record=order.status_record(date_key),
                    selection_id=selection.selection_id if selection else None,
                    daily_selection=daily,
                    preparation=determine_preparation(order.current_status(date_key), daily),
                )
            )

        logger.debug(
            "Complete orders loaded",
            extra={"date": date_key, "count": len(complete)},
        )
        return complete
