"""Unit tests for the MongoDB repositories with a mocked Motor collection.

Covers document mapping and the versioned write; for real round trips
against a server see tests/integration/infrastructure/persistence.
"""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from pymongo.errors import DuplicateKeyError, PyMongoError

from domain.meal_selection.core.entities.daily_selection import DailySelection
from domain.meal_selection.core.entities.meal_selection import MealSelection
from domain.meal_selection.core.value_objects.skip_request import SkipRequestStatus
from domain.order.core.entities.order import Order
from domain.order.core.entities.status_record import StatusRecord
from domain.order.core.exceptions.domain_errors import InvalidStatusError
from domain.order.core.value_objects.order_status import OrderStatus
from domain.order.core.value_objects.skip_reason import SkipReason
from domain.shared.errors import TransactionConflictError
from infrastructure.persistence.mongodb import (
    MongoAllergyRepository,
    MongoMealSelectionRepository,
    MongoOrderRepository,
)

NOW = datetime(2025, 3, 9, 8, 0, tzinfo=timezone.utc)


@pytest.fixture
def database() -> MagicMock:
    return MagicMock()


@pytest.fixture
def order_repo(database) -> MongoOrderRepository:
    repo = MongoOrderRepository(database)
    repo._collection = MagicMock()
    repo._collection.update_one = AsyncMock(
        return_value=MagicMock(matched_count=1, upserted_id=None)
    )
    repo._collection.find_one = AsyncMock()
    return repo


def _order_doc(**overrides):
    doc = {
        "_id": "O1",
        "customerId": "C1",
        "selectedDays": ["Mon", "Wed"],
        "isActive": True,
        "dailyStatuses": {
            "2025-03-10": {
                "status": "delivery_skipped",
                "updatedAt": "2025-03-09T08:00:00+00:00",
                "updatedBy": "admin1",
                "notes": "Eid",
                "skipReason": "Public Holiday",
            },
            "2025-03-11": {"status": "in_preparation", "updatedAt": "2025-03-09T08:00:00"},
        },
        "version": 3,
    }
    doc.update(overrides)
    return doc


class TestOrderMapping:
    def test_from_document(self, order_repo):
        order = order_repo.from_document(_order_doc())

        assert order.order_id == "O1"
        assert order.version == 3
        skipped = order.status_record("2025-03-10")
        assert skipped.status is OrderStatus.DELIVERY_SKIPPED
        assert skipped.skip_reason == "Public Holiday"
        assert skipped.updated_at == NOW

    def test_legacy_status_read_normalized(self, order_repo):
        record = order_repo.from_document(_order_doc()).status_record("2025-03-11")

        assert record.status is OrderStatus.PENDING
        assert record.legacy_status == "in_preparation"
        assert record.updated_by == "system"
        assert record.updated_at.tzinfo is not None

    def test_legacy_value_kept_on_write(self, order_repo):
        order = order_repo.from_document(_order_doc())

        doc = order_repo.to_document(order)

        assert doc["dailyStatuses"]["2025-03-11"]["status"] == "in_preparation"
        assert doc["dailyStatuses"]["2025-03-10"]["skipReason"] == "Public Holiday"
        assert "skipReason" not in doc["dailyStatuses"]["2025-03-11"]

    def test_unknown_status_rejected(self, order_repo):
        doc = _order_doc(dailyStatuses={"2025-03-10": {"status": "lost"}})

        with pytest.raises(InvalidStatusError):
            order_repo.from_document(doc)

    def test_unversioned_document_reads_as_zero(self, order_repo):
        doc = _order_doc()
        del doc["version"]

        assert order_repo.from_document(doc).version == 0

    @pytest.mark.asyncio
    async def test_get_missing(self, order_repo):
        order_repo._collection.find_one.return_value = None

        assert await order_repo.get("O1") is None


class TestVersionedSave:
    @pytest.mark.asyncio
    async def test_filters_on_version(self, order_repo):
        order = Order("O1", "C1", version=3, created_at=NOW, updated_at=NOW)

        await order_repo.save(order)

        filter_dict, update = order_repo._collection.update_one.call_args[0]
        assert filter_dict == {"_id": "O1", "version": 3}
        assert update["$set"]["version"] == 4
        assert "_id" not in update["$set"]
        assert order_repo._collection.update_one.call_args[1]["upsert"] is False

    @pytest.mark.asyncio
    async def test_version_zero_upserts(self, order_repo):
        await order_repo.save(Order("O1", "C1", created_at=NOW, updated_at=NOW))

        filter_dict, _ = order_repo._collection.update_one.call_args[0]
        assert filter_dict["version"] == {"$in": [0, None]}
        assert order_repo._collection.update_one.call_args[1]["upsert"] is True

    @pytest.mark.asyncio
    async def test_stale_version_conflicts(self, order_repo):
        order_repo._collection.update_one.return_value = MagicMock(
            matched_count=0, upserted_id=None
        )

        with pytest.raises(TransactionConflictError):
            await order_repo.save(Order("O1", "C1", version=2, created_at=NOW, updated_at=NOW))

    @pytest.mark.asyncio
    async def test_duplicate_key_conflicts(self, order_repo):
        order_repo._collection.update_one.side_effect = DuplicateKeyError("dup")

        with pytest.raises(TransactionConflictError):
            await order_repo.save(Order("O1", "C1", created_at=NOW, updated_at=NOW))

    @pytest.mark.asyncio
    async def test_transient_error_conflicts(self, order_repo):
        order_repo._collection.update_one.side_effect = PyMongoError(
            "write conflict", error_labels=["TransientTransactionError"]
        )

        with pytest.raises(TransactionConflictError):
            await order_repo.save(Order("O1", "C1", version=1, created_at=NOW, updated_at=NOW))

    @pytest.mark.asyncio
    async def test_other_driver_errors_propagate(self, order_repo):
        order_repo._collection.update_one.side_effect = PyMongoError("network down")

        with pytest.raises(PyMongoError):
            await order_repo.save(Order("O1", "C1", version=1, created_at=NOW, updated_at=NOW))

    @pytest.mark.asyncio
    async def test_naive_datetime_rejected(self, order_repo):
        order = Order("O1", "C1", created_at=datetime(2025, 3, 9), updated_at=NOW)

        with pytest.raises(ValueError):
            await order_repo.save(order)


class TestMealSelectionMapping:
    def test_round_trip_of_skip_metadata(self, database):
        repo = MongoMealSelectionRepository(database)
        selection = MealSelection(
            selection_id="S2",
            order_id="O2",
            user_id="user42",
            daily_selections={
                "2025-03-11": DailySelection(
                    meals={"lunch": ["m1"]},
                    is_skipped=True,
                    skip_request_type=SkipReason.USER_REQUEST,
                    skip_request_status=SkipRequestStatus.PENDING,
                    skip_requested_by="user42",
                    skip_requested_at=NOW,
                    skip_reason="traveling",
                    admin_action_required=True,
                )
            },
            updated_at=NOW,
            version=2,
        )

        doc = repo.to_document(selection)
        entry_doc = doc["dailySelections"]["2025-03-11"]
        assert entry_doc["skipRequestType"] == "user_request"
        assert entry_doc["skipRequestStatus"] == "pending"
        assert entry_doc["skipRequestedAt"] == "2025-03-09T08:00:00+00:00"
        assert "skipApprovedBy" not in entry_doc

        restored = repo.from_document({**doc, "version": 2})
        assert restored.daily_selection("2025-03-11") == selection.daily_selection("2025-03-11")

    def test_pending_without_admin_flag_is_repaired(self, database):
        repo = MongoMealSelectionRepository(database)
        doc = {
            "_id": "S1",
            "orderId": "O1",
            "dailySelections": {
                "2025-03-11": {
                    "isSkipped": True,
                    "skipRequestStatus": "pending",
                    "skipRequestType": "admin_action",
                }
            },
        }

        entry = repo.from_document(doc).daily_selection("2025-03-11")

        assert entry.admin_action_required is True
        assert entry.skip_request_type is SkipReason.OTHER

    @pytest.mark.asyncio
    async def test_pending_query_uses_dotted_paths(self, database):
        repo = MongoMealSelectionRepository(database)
        cursor = MagicMock()
        cursor.to_list = AsyncMock(return_value=[])
        repo._collection = MagicMock()
        repo._collection.find.return_value = cursor

        await repo.list_with_pending_skip("2025-03-11")

        query = repo._collection.find.call_args[0][0]
        assert query == {
            "dailySelections.2025-03-11.isSkipped": True,
            "dailySelections.2025-03-11.skipRequestStatus": "pending",
        }


def test_allergy_mapping(database):
    repo = MongoAllergyRepository(database)

    allergy = repo.from_document({"_id": "a1", "name": "Gluten"})

    assert allergy.allergy_id == "a1"
    assert allergy.description is None
    assert repo.to_document(allergy)["name"] == "Gluten"
