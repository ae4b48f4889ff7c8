"""Allowed next statuses query."""

from dataclasses import dataclass
from typing import FrozenSet

from application.reconciliation.skip_sync import load_order
from application.shared.transaction import UnitOfWorkFactory
from domain.order.core.value_objects.order_status import OrderStatus
from domain.order.services.status_workflow import get_allowed_next_statuses
from domain.shared.value_objects.date_key import DateLike, date_key_for


@dataclass(frozen=True)
class GetAllowedNextStatusesQuery:
    """Query: statuses an admin may pick next for an order/date."""

    order_id: str
    date: DateLike


class GetAllowedNextStatusesQueryHandler:
    """Handler for GetAllowedNextStatusesQuery.

    An empty result means the date is final.
    """

    def __init__(self, uow_factory: UnitOfWorkFactory):
        self._uow_factory = uow_factory

    async def handle(self, query: GetAllowedNextStatusesQuery) -> FrozenSet[OrderStatus]:
        async with self._uow_factory() as uow:
            order = await load_order(uow, query.order_id)
        return get_allowed_next_statuses(order, date_key_for(query.date))
