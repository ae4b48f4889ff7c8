"""Clock port.

Injected wherever the domain stamps ``updated_at``/``*_at`` fields or
evaluates an expiry, so tests can control time deterministically.
"""

from datetime import datetime
from typing import Protocol


class IClock(Protocol):
    """Source of the current time.

    Implementations must return timezone-aware UTC datetimes.

    Example:
        >>> class FixedClock:
        ...     def __init__(self, at: datetime) -> None:
        ...         self.at = at
        ...     def now(self) -> datetime:
        ...         return self.at
    """

    def now(self) -> datetime:
        """Return the current timezone-aware UTC datetime."""
        ...
