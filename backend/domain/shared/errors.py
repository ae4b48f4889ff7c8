"""
Shared domain exceptions.

Errors that are not owned by a single bounded context: persistence
contention and out-of-band notification delivery.
"""

from __future__ import annotations


class DomainError(Exception):
    """
    Base exception for all domain errors.

    All domain-specific exceptions inherit from this.
    Allows catching all domain errors with single except clause.
    """

    pass


class InvalidDateKeyError(DomainError, ValueError):
    """
    Date key is not a valid ISO calendar date.

    Example:
        >>> raise InvalidDateKeyError("2025-13-40")
    """

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"Invalid date key (expected YYYY-MM-DD): {value!r}")


class TransactionConflictError(DomainError):
    """
    Concurrent modification detected while committing a unit of work.

    Raised by unit of work implementations when a document read inside the
    transaction was changed by another writer before commit. Retried
    automatically a bounded number of times; surfaced once retries exhaust.
    """

    pass


class NotificationFailureError(DomainError):
    """
    Customer notification could not be dispatched.

    Never propagated as a failure of the status update that triggered it.

    Example:
        >>> raise NotificationFailureError("Email endpoint returned 503")
    """

    pass
