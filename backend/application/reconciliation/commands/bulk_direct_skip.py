"""Bulk direct skip command and handler.

Applies the direct skip to many orders for one date ("holiday, skip
all"). Each order is its own transaction; failures are collected so an
operator can retry just those.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union
import asyncio
import logging

from application.reconciliation.commands.admin_direct_skip import (
    AdminDirectSkipCommand,
    AdminDirectSkipCommandHandler,
)
from domain.order.core.value_objects.skip_reason import SkipReason
from domain.shared.errors import DomainError
from domain.shared.value_objects.date_key import DateLike, date_key_for

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BulkDirectSkipCommand:
    """
    Command: Skip the same date for many orders.

    Attributes:
        order_ids: Orders to skip
        date: Delivery date
        admin_id: Acting admin
        skip_type: Reason type; guessed from ``reason`` when None
        reason: Free text stored as notes
    """

    order_ids: Tuple[str, ...]
    date: DateLike
    admin_id: str
    skip_type: Optional[Union[SkipReason, str]] = None
    reason: str = ""


@dataclass(frozen=True)
class BulkItemFailure:
    """One order that could not be processed."""

    order_id: str
    error: str


@dataclass
class BulkOperationResult:
    """Per-order outcome of a bulk operation."""

    succeeded: List[str] = field(default_factory=list)
    failed: List[BulkItemFailure] = field(default_factory=list)

    @property
    def all_succeeded(self) -> bool:
        return not self.failed


class BulkDirectSkipCommandHandler:
    """Handler for BulkDirectSkipCommand."""

    def __init__(self, direct_skip_handler: AdminDirectSkipCommandHandler):
        self._direct_skip = direct_skip_handler

    async def handle(self, command: BulkDirectSkipCommand) -> BulkOperationResult:
        """
        Fan out one direct skip per order concurrently.

        Never raises for an individual order: domain errors, exhausted
        transaction retries and driver or connection errors are all
        reported in ``failed``.
        """
        date_key = date_key_for(command.date)

        async def skip_one(order_id: str) -> Optional[BulkItemFailure]:
            try:
                await self._direct_skip.handle(
                    AdminDirectSkipCommand(
                        order_id=order_id,
                        selection_id=None,
                        date=date_key,
                        admin_id=command.admin_id,
                        skip_type=command.skip_type,
                        reason=command.reason,
                    )
                )
            except (DomainError, ValueError) as e:
                logger.warning(
                    "Bulk direct skip failed for order",
                    extra={"order_id": order_id, "date": date_key, "error": str(e)},
                )
                return BulkItemFailure(order_id=order_id, error=str(e))
            except Exception as e:
                logger.error(
                    "Bulk direct skip crashed for order",
                    extra={"order_id": order_id, "date": date_key, "error": str(e)},
                    exc_info=True,
                )
                return BulkItemFailure(order_id=order_id, error=f"{type(e).__name__}: {e}")
            return None

        outcomes = await asyncio.gather(*(skip_one(order_id) for order_id in command.order_ids))

        result = BulkOperationResult()
        for order_id, failure in zip(command.order_ids, outcomes):
            if failure is None:
                result.succeeded.append(order_id)
            else:
                result.failed.append(failure)

        logger.info(
            "Bulk direct skip completed",
            extra={
                "date": date_key,
                "succeeded": len(result.succeeded),
                "failed": len(result.failed),
            },
        )
        return result
