"""Status statistics query - per-status breakdown for a delivery date."""

from dataclasses import dataclass
import logging

from application.shared.transaction import UnitOfWorkFactory
from domain.order.services.status_workflow import StatusStatistics, get_status_statistics
from domain.shared.value_objects.date_key import DateLike, date_key_for, weekday_name

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GetStatusStatisticsQuery:
    """
    Query: status counts for active orders delivering on a date.

    Attributes:
        date: Delivery date
    """

    date: DateLike


class GetStatusStatisticsQueryHandler:
    """Handler for GetStatusStatisticsQuery."""

    def __init__(self, uow_factory: UnitOfWorkFactory):
        self._uow_factory = uow_factory

    async def handle(self, query: GetStatusStatisticsQuery) -> StatusStatistics:
        date_key = date_key_for(query.date)
        async with self._uow_factory() as uow:
            orders = await uow.orders.list_active_for_weekday(weekday_name(date_key))

        stats = get_status_statistics(orders, date_key)
        logger.debug(
            "Status statistics computed",
            extra={"date": date_key, "total": stats.total},
        )
        return stats
