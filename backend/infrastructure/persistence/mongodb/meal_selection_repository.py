"""MongoDB implementation of IMealSelectionRepository."""

from typing import Any, Dict, List, Optional, Sequence
import logging

from domain.meal_selection.core.entities.daily_selection import DailySelection
from domain.meal_selection.core.entities.meal_selection import MealSelection
from domain.meal_selection.core.ports.meal_selection_repository import (
    IMealSelectionRepository,
)
from domain.meal_selection.core.value_objects.skip_request import SkipRequestStatus
from domain.order.core.value_objects.skip_reason import SkipReason

from .base import MongoBaseRepository

logger = logging.getLogger(__name__)

_DATETIME_FIELDS = {
    "skip_requested_at": "skipRequestedAt",
    "skip_applied_at": "skipAppliedAt",
    "skip_approved_at": "skipApprovedAt",
    "skip_rejected_at": "skipRejectedAt",
}

_TEXT_FIELDS = {
    "chef_selection_note": "chefSelectionNote",
    "skip_requested_by": "skipRequestedBy",
    "skip_applied_by": "skipAppliedBy",
    "skip_approved_by": "skipApprovedBy",
    "skip_rejected_by": "skipRejectedBy",
    "rejection_reason": "rejectionReason",
    "admin_notes": "adminNotes",
    "skip_reason": "skipReason",
}


class MongoMealSelectionRepository(MongoBaseRepository[MealSelection], IMealSelectionRepository):
    """``userMealSelections`` collection, linked to orders through ``orderId``."""

    @property
    def collection_name(self) -> str:
        return "userMealSelections"

    def to_document(self, entity: MealSelection) -> Dict[str, Any]:
        return {
            "_id": entity.selection_id,
            "orderId": entity.order_id,
            "userId": entity.user_id,
            "startDate": entity.start_date,
            "endDate": entity.end_date,
            "isActive": entity.is_active,
            "dailySelections": {
                date_key: self._daily_to_document(entry)
                for date_key, entry in entity.daily_selections.items()
            },
            "updatedAt": self.datetime_to_iso(entity.updated_at),
        }

    def from_document(self, doc: Dict[str, Any]) -> MealSelection:
        return MealSelection(
            selection_id=str(doc["_id"]),
            order_id=doc["orderId"],
            user_id=doc.get("userId", ""),
            start_date=doc.get("startDate"),
            end_date=doc.get("endDate"),
            is_active=doc.get("isActive", True),
            daily_selections={
                date_key: self._daily_from_document(date_key, raw)
                for date_key, raw in (doc.get("dailySelections") or {}).items()
            },
            updated_at=self.to_datetime(doc.get("updatedAt")),
            version=doc.get("version") or 0,
        )

    def _daily_to_document(self, entry: DailySelection) -> Dict[str, Any]:
        doc: Dict[str, Any] = {
            "meals": {meal_type: list(ids) for meal_type, ids in entry.meals.items()},
            "isSkipped": entry.is_skipped,
            "adminActionRequired": entry.admin_action_required,
            "adminNotified": entry.admin_notified,
        }
        if entry.skip_request_type is not None:
            doc["skipRequestType"] = entry.skip_request_type.value
        if entry.skip_request_status is not None:
            doc["skipRequestStatus"] = entry.skip_request_status.value
        for attr, key in _TEXT_FIELDS.items():
            value = getattr(entry, attr)
            if value is not None:
                doc[key] = value
        for attr, key in _DATETIME_FIELDS.items():
            value = getattr(entry, attr)
            if value is not None:
                doc[key] = self.datetime_to_iso(value)
        return doc

    def _daily_from_document(self, date_key: str, raw: Dict[str, Any]) -> DailySelection:
        status_raw = raw.get("skipRequestStatus")
        status = SkipRequestStatus(status_raw) if status_raw else None
        is_skipped = bool(raw.get("isSkipped", False))
        admin_action_required = bool(raw.get("adminActionRequired", False))

        if is_skipped and status is SkipRequestStatus.PENDING and not admin_action_required:
            logger.warning(
                "Pending skip request without admin flag, flag restored",
                extra={"date": date_key},
            )
            admin_action_required = True

        fields: Dict[str, Any] = {
            attr: raw.get(key) for attr, key in _TEXT_FIELDS.items()
        }
        fields.update(
            {attr: self.to_datetime(raw.get(key)) for attr, key in _DATETIME_FIELDS.items()}
        )
        return DailySelection(
            meals={meal_type: list(ids or []) for meal_type, ids in (raw.get("meals") or {}).items()},
            is_skipped=is_skipped,
            skip_request_type=SkipReason.parse(raw.get("skipRequestType")),
            skip_request_status=status,
            admin_action_required=admin_action_required,
            admin_notified=bool(raw.get("adminNotified", False)),
            **fields,
        )

    async def get(self, selection_id: str) -> Optional[MealSelection]:
        doc = await self._find_one({"_id": selection_id})
        return self.from_document(doc) if doc else None

    async def get_by_order_id(self, order_id: str) -> Optional[MealSelection]:
        doc = await self._find_one({"orderId": order_id})
        return self.from_document(doc) if doc else None

    async def list_by_order_ids(self, order_ids: Sequence[str]) -> Dict[str, MealSelection]:
        if not order_ids:
            return {}
        found: Dict[str, MealSelection] = {}
        for doc in await self._find_many({"orderId": {"$in": list(order_ids)}}):
            selection = self.from_document(doc)
            found.setdefault(selection.order_id, selection)
        return found

    async def list_with_pending_skip(self, date_key: str) -> List[MealSelection]:
        docs = await self._find_many(
            {
                f"dailySelections.{date_key}.isSkipped": True,
                f"dailySelections.{date_key}.skipRequestStatus": SkipRequestStatus.PENDING.value,
            }
        )
        return [self.from_document(doc) for doc in docs]

    async def save(self, selection: MealSelection) -> None:
        await self._save_versioned(
            selection.selection_id, self.to_document(selection), selection.version
        )
        logger.debug("Meal selection staged", extra={"selection_id": selection.selection_id})
