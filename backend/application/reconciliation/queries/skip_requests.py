"""Skip request read models and queries.

Combined view of an order's status and its selection's skip fields for
one date, as shown on the admin skip request panel and the client app.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional
import logging

from application.reconciliation.skip_sync import load_order
from application.shared.transaction import UnitOfWorkFactory
from domain.meal_selection.core.entities.daily_selection import DailySelection
from domain.meal_selection.core.value_objects.skip_request import (
    SkipRequestStatus,
    SkipState,
)
from domain.order.core.entities.status_record import StatusRecord
from domain.order.core.value_objects.order_status import OrderStatus
from domain.order.core.value_objects.skip_reason import SkipReason
from domain.shared.value_objects.date_key import DateLike, date_key_for

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SkipRequestDetails:
    """Order status and skip request state of one order on one date."""

    order_id: str
    date_key: str
    order_status: OrderStatus
    status_record: Optional[StatusRecord]
    selection_id: Optional[str]
    daily_selection: Optional[DailySelection]

    @property
    def skip_state(self) -> SkipState:
        if self.daily_selection is None:
            return SkipState.ACTIVE
        return self.daily_selection.skip_state

    @property
    def has_skip_request(self) -> bool:
        return self.daily_selection is not None and self.daily_selection.is_skipped

    @property
    def source(self) -> str:
        """``user``, ``admin`` or ``none``."""
        if not self.has_skip_request:
            return "none"
        if self.daily_selection.skip_request_type is SkipReason.USER_REQUEST:
            return "user"
        return "admin"

    @property
    def client_reason(self) -> Optional[str]:
        """Message the client app shows for a skipped date."""
        if not self.has_skip_request:
            return None
        skip_type = self.daily_selection.skip_request_type or SkipReason.OTHER
        return skip_type.client_message(self.daily_selection.skip_reason)

    @property
    def can_modify(self) -> bool:
        """The customer may still withdraw or change a pending request."""
        return self.skip_state is SkipState.USER_REQUESTED_PENDING or not self.has_skip_request


@dataclass(frozen=True)
class SkipRequestStats:
    """Dashboard counters for skip requests on a date."""

    total: int
    skipped: int
    user_requested: int
    admin_skipped: int
    pending: int
    approved: int
    rejected: int


def get_skip_request_stats(details: Iterable[SkipRequestDetails]) -> SkipRequestStats:
    """Count skip requests by origin and status.

    Rejected requests are no longer skipped but still counted as rejected.
    """
    total = skipped = user_requested = admin_skipped = 0
    pending = approved = rejected = 0

    for item in details:
        total += 1
        entry = item.daily_selection
        if entry is None:
            continue
        if entry.skip_request_status is SkipRequestStatus.REJECTED:
            rejected += 1
        if not entry.is_skipped:
            continue

        skipped += 1
        if entry.skip_request_type is SkipReason.USER_REQUEST:
            user_requested += 1
        else:
            admin_skipped += 1
        if entry.skip_request_status is SkipRequestStatus.PENDING:
            pending += 1
        elif entry.skip_request_status is SkipRequestStatus.APPROVED:
            approved += 1

    return SkipRequestStats(
        total=total,
        skipped=skipped,
        user_requested=user_requested,
        admin_skipped=admin_skipped,
        pending=pending,
        approved=approved,
        rejected=rejected,
    )


@dataclass(frozen=True)
class GetSkipRequestDetailsQuery:
    """Query: skip request details for one order and date."""

    order_id: str
    date: DateLike


class GetSkipRequestDetailsQueryHandler:
    """Handler for GetSkipRequestDetailsQuery."""

    def __init__(self, uow_factory: UnitOfWorkFactory):
        self._uow_factory = uow_factory

    async def handle(self, query: GetSkipRequestDetailsQuery) -> SkipRequestDetails:
        """
        Raises:
            OrderNotFoundError: If the order does not exist
        """
        date_key = date_key_for(query.date)
        async with self._uow_factory() as uow:
            order = await load_order(uow, query.order_id)
            selection = await uow.meal_selections.get_by_order_id(query.order_id)

        return SkipRequestDetails(
            order_id=order.order_id,
            date_key=date_key,
            order_status=order.current_status(date_key),
            status_record=order.status_record(date_key),
            selection_id=selection.selection_id if selection else None,
            daily_selection=selection.daily_selection(date_key) if selection else None,
        )


@dataclass(frozen=True)
class GetPendingSkipRequestsQuery:
    """Query: customer skip requests awaiting an admin decision on a date."""

    date: DateLike


class GetPendingSkipRequestsQueryHandler:
    """Handler for GetPendingSkipRequestsQuery."""

    def __init__(self, uow_factory: UnitOfWorkFactory):
        self._uow_factory = uow_factory

    async def handle(self, query: GetPendingSkipRequestsQuery) -> List[SkipRequestDetails]:
        date_key = date_key_for(query.date)
        async with self._uow_factory() as uow:
            selections = await uow.meal_selections.list_with_pending_skip(date_key)
            orders = {
                order.order_id: order
                for order in await uow.orders.list_by_ids([s.order_id for s in selections])
            }

        pending: List[SkipRequestDetails] = []
        for selection in selections:
            order = orders.get(selection.order_id)
            if order is None:
                logger.warning(
                    "Pending skip request references missing order",
                    extra={"selection_id": selection.selection_id, "order_id": selection.order_id},
                )
                continue
            pending.append(
                SkipRequestDetails(
                    order_id=order.order_id,
                    date_key=date_key,
                    order_status=order.current_status(date_key),
                    status_record=order.status_record(date_key),
                    selection_id=selection.selection_id,
                    daily_selection=selection.daily_selection(date_key),
                )
            )

        logger.debug(
            "Pending skip requests retrieved",
            extra={"date": date_key, "count": len(pending)},
        )
        return pending
