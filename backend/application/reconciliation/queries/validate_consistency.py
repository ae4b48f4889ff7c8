"""Data consistency validation between orders and meal selections."""

from dataclasses import dataclass, field
from typing import List, Sequence
import logging

from application.shared.transaction import UnitOfWorkFactory
from domain.order.core.value_objects.order_status import OrderStatus
from domain.shared.value_objects.date_key import DateLike, date_key_for

logger = logging.getLogger(__name__)

SKIP_MISMATCH_ISSUE = "Order marked as delivery_skipped but meal selection not marked as skipped"


@dataclass(frozen=True)
class Inconsistency:
    """An order/date whose two documents disagree."""

    order_id: str
    selection_id: str
    date_key: str
    issue: str
    order_status: OrderStatus
    selection_skipped: bool


@dataclass
class ConsistencyReport:
    """Result of a consistency check over a set of dates."""

    total_checked: int
    inconsistencies: List[Inconsistency] = field(default_factory=list)

    @property
    def inconsistencies_found(self) -> int:
        return len(self.inconsistencies)


@dataclass(frozen=True)
class ValidateDataConsistencyQuery:
    """Query: find skipped orders whose selection is not skipped.

    Orders without a linked selection are not reported.
    """

    dates: Sequence[DateLike]


class ValidateDataConsistencyQueryHandler:
    """Handler for ValidateDataConsistencyQuery."""

    def __init__(self, uow_factory: UnitOfWorkFactory):
        self._uow_factory = uow_factory

    async def handle(self, query: ValidateDataConsistencyQuery) -> ConsistencyReport:
        report = ConsistencyReport(total_checked=len(query.dates))

        async with self._uow_factory() as uow:
            for date in query.dates:
                date_key = date_key_for(date)
                orders = await uow.orders.list_with_status_on(
                    date_key, OrderStatus.DELIVERY_SKIPPED
                )
                selections = await uow.meal_selections.list_by_order_ids(
                    [order.order_id for order in orders]
                )
                for order in orders:
                    selection = selections.get(order.order_id)
                    if selection is None:
                        continue
                    entry = selection.daily_selection(date_key)
                    if entry is not None and entry.is_skipped:
                        continue
                    report.inconsistencies.append(
                        Inconsistency(
                            order_id=order.order_id,
                            selection_id=selection.selection_id,
                            date_key=date_key,
                            issue=SKIP_MISMATCH_ISSUE,
                            order_status=OrderStatus.DELIVERY_SKIPPED,
                            selection_skipped=False,
                        )
                    )

        if report.inconsistencies:
            logger.warning(
                "Data inconsistencies found",
                extra={"count": report.inconsistencies_found, "dates": report.total_checked},
            )
        return report
