"""MongoDB implementation of IOrderRepository."""

from typing import Any, Dict, List, Optional, Sequence
import logging

from domain.order.core.entities.order import Order
from domain.order.core.entities.status_record import SYSTEM_ACTOR, StatusRecord
from domain.order.core.ports.order_repository import IOrderRepository
from domain.order.core.value_objects.order_status import LEGACY_STATUS_MAP, OrderStatus

from .base import EPOCH, MongoBaseRepository

logger = logging.getLogger(__name__)


class MongoOrderRepository(MongoBaseRepository[Order], IOrderRepository):
    """Orders collection; ``dailyStatuses.<YYYY-MM-DD>`` holds the records."""

    @property
    def collection_name(self) -> str:
        return "orders"

    def to_document(self, entity: Order) -> Dict[str, Any]:
        return {
            "_id": entity.order_id,
            "customerId": entity.customer_id,
            "selectedDays": list(entity.selected_days),
            "isActive": entity.is_active,
            "packageId": entity.package_id,
            "dailyStatuses": {
                date_key: self._record_to_document(record)
                for date_key, record in entity.daily_statuses.items()
            },
            "createdAt": self.datetime_to_iso(entity.created_at),
            "updatedAt": self.datetime_to_iso(entity.updated_at),
        }

    def from_document(self, doc: Dict[str, Any]) -> Order:
        """
        Raises:
            InvalidStatusError: If a stored status is outside the vocabulary
        """
        return Order(
            order_id=str(doc["_id"]),
            customer_id=doc.get("customerId", ""),
            selected_days=list(doc.get("selectedDays") or []),
            is_active=doc.get("isActive", True),
            package_id=doc.get("packageId"),
            daily_statuses={
                date_key: self._record_from_document(raw)
                for date_key, raw in (doc.get("dailyStatuses") or {}).items()
            },
            created_at=self.to_datetime(doc.get("createdAt")),
            updated_at=self.to_datetime(doc.get("updatedAt")),
            version=doc.get("version") or 0,
        )

    def _record_to_document(self, record: StatusRecord) -> Dict[str, Any]:
        doc: Dict[str, Any] = {
            "status": record.stored_status,
            "updatedAt": self.datetime_to_iso(record.updated_at),
            "updatedBy": record.updated_by,
            "notes": record.notes,
        }
        if record.skip_reason:
            doc["skipReason"] = record.skip_reason
        if record.skip_request_approved_at:
            doc["skipRequestApprovedAt"] = self.datetime_to_iso(record.skip_request_approved_at)
        return doc

    def _record_from_document(self, raw: Dict[str, Any]) -> StatusRecord:
        status, legacy = OrderStatus.parse_stored(raw.get("status"))
        skip_reason = raw.get("skipReason") or None
        return StatusRecord(
            status=status,
            updated_at=self.to_datetime(raw.get("updatedAt")) or EPOCH,
            updated_by=raw.get("updatedBy") or SYSTEM_ACTOR,
            notes=raw.get("notes") or "",
            skip_reason=skip_reason if status is OrderStatus.DELIVERY_SKIPPED else None,
            skip_request_approved_at=self.to_datetime(raw.get("skipRequestApprovedAt")),
            legacy_status=legacy,
        )

    async def get(self, order_id: str) -> Optional[Order]:
        doc = await self._find_one({"_id": order_id})
        return self.from_document(doc) if doc else None

    async def save(self, order: Order) -> None:
        await self._save_versioned(order.order_id, self.to_document(order), order.version)
        logger.debug("Order staged", extra={"order_id": order.order_id})

    async def list_by_ids(self, order_ids: Sequence[str]) -> List[Order]:
        if not order_ids:
            return []
        docs = await self._find_many({"_id": {"$in": list(order_ids)}})
        return [self.from_document(doc) for doc in docs]

    async def list_all(self) -> List[Order]:
        return [self.from_document(doc) for doc in await self._find_many({})]

    async def list_active_for_weekday(self, weekday: str) -> List[Order]:
        docs = await self._find_many({"selectedDays": weekday, "isActive": True})
        return [self.from_document(doc) for doc in docs]

    async def list_with_status_on(self, date_key: str, status: OrderStatus) -> List[Order]:
        stored_values = [status.value] + [
            legacy for legacy, mapped in LEGACY_STATUS_MAP.items() if mapped is status
        ]
        docs = await self._find_many({f"dailyStatuses.{date_key}.status": {"$in": stored_values}})
        return [self.from_document(doc) for doc in docs]
