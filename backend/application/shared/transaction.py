"""Transactional execution with bounded retry on write conflicts.

A unit of work that loses an optimistic concurrency race is re-run from
scratch (fresh reads) up to ``max_attempts`` times before the conflict is
surfaced to the caller.
"""

import logging
from typing import Awaitable, Callable, TypeVar

from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from domain.shared.errors import TransactionConflictError
from domain.shared.ports.unit_of_work import IUnitOfWork

logger = logging.getLogger(__name__)

T = TypeVar("T")

UnitOfWorkFactory = Callable[[], IUnitOfWork]

DEFAULT_MAX_ATTEMPTS = 5


async def run_in_transaction(
    uow_factory: UnitOfWorkFactory,
    work: Callable[[IUnitOfWork], Awaitable[T]],
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> T:
    """Run ``work`` in a fresh unit of work and commit it.

    ``work`` must do all its reads through the given unit of work and must
    not commit; anything it raises aborts the transaction unchanged.

    Args:
        uow_factory: Builds a new unit of work per attempt
        work: Coroutine function doing the reads and staged writes
        max_attempts: Attempts before a conflict is surfaced

    Returns:
        Whatever ``work`` returned on the committed attempt

    Raises:
        TransactionConflictError: If every attempt lost a write race
    """
    async for attempt in AsyncRetrying(
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(multiplier=0.01, max=0.5),
        retry=retry_if_exception_type(TransactionConflictError),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    ):
        with attempt:
            async with uow_factory() as uow:
                result = await work(uow)
                await uow.commit()

    return result
