"""Unit tests for date key helpers."""

from datetime import date, datetime, timezone

import pytest

from domain.shared.errors import InvalidDateKeyError
from domain.shared.value_objects.date_key import (
    date_key_for,
    operational_dates,
    parse_date_key,
    weekday_name,
)


def test_date_key_for_accepts_dates_and_strings():
    assert date_key_for(date(2025, 3, 10)) == "2025-03-10"
    assert date_key_for(datetime(2025, 3, 10, 23, 59)) == "2025-03-10"
    assert date_key_for("2025-03-10") == "2025-03-10"


@pytest.mark.parametrize("raw", ["2025-3-10", "2025-02-30", "10/03/2025", "", None, 20250310])
def test_invalid_date_keys(raw):
    with pytest.raises(InvalidDateKeyError):
        parse_date_key(raw)


def test_invalid_date_key_is_value_error():
    with pytest.raises(ValueError):
        date_key_for("not-a-date")


def test_weekday_name():
    assert weekday_name("2025-03-10") == "Mon"
    assert weekday_name(date(2025, 3, 16)) == "Sun"


def test_operational_dates_use_business_timezone():
    # 21:00 UTC on the 9th is already the 10th in Dubai (UTC+4).
    now = datetime(2025, 3, 9, 21, 0, tzinfo=timezone.utc)

    assert operational_dates(now, "Asia/Dubai") == ("2025-03-10", "2025-03-11")
    assert operational_dates(now, "UTC") == ("2025-03-09", "2025-03-10")


def test_operational_dates_cross_month():
    now = datetime(2025, 2, 28, 12, 0, tzinfo=timezone.utc)
    assert operational_dates(now, "UTC") == ("2025-02-28", "2025-03-01")
