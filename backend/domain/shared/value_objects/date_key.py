"""ISO date keys.

Daily statuses and daily selections are stored in maps keyed by the
calendar date in ``YYYY-MM-DD`` form. These helpers normalize caller input
to that form so the two documents always agree on the key.
"""

from datetime import date, datetime, timedelta
from typing import Tuple, Union
from zoneinfo import ZoneInfo

from domain.shared.errors import InvalidDateKeyError

DateLike = Union[str, date]

WEEKDAY_NAMES = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


def date_key_for(value: DateLike) -> str:
    """Normalize a date or ISO string to a ``YYYY-MM-DD`` key.

    Args:
        value: ``datetime.date`` (or datetime) or ISO date string

    Returns:
        Canonical date key

    Raises:
        InvalidDateKeyError: If the value is not a valid calendar date

    Examples:
        >>> date_key_for(date(2025, 3, 10))
        '2025-03-10'
        >>> date_key_for("2025-03-10")
        '2025-03-10'
    """
    return parse_date_key(value).isoformat()


def parse_date_key(value: DateLike) -> date:
    """Parse a date key into a ``datetime.date``.

    Raises:
        InvalidDateKeyError: If the value is not a valid calendar date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or len(value) != 10:
        raise InvalidDateKeyError(value)
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise InvalidDateKeyError(value) from e


def weekday_name(value: DateLike) -> str:
    """Short weekday name (``Mon``..``Sun``) used in order delivery days.

    Examples:
        >>> weekday_name("2025-03-10")
        'Mon'
    """
    return WEEKDAY_NAMES[parse_date_key(value).weekday()]


def operational_dates(now: datetime, timezone_name: str) -> Tuple[str, str]:
    """Today and tomorrow as date keys in the business timezone.

    Examples:
        >>> operational_dates(datetime(2025, 3, 9, 21, 0, tzinfo=timezone.utc), "Asia/Dubai")
        ('2025-03-10', '2025-03-11')
    """
    today = now.astimezone(ZoneInfo(timezone_name)).date()
    return today.isoformat(), (today + timedelta(days=1)).isoformat()
