"""Shared value objects."""

from domain.shared.value_objects.date_key import (
    date_key_for,
    operational_dates,
    parse_date_key,
    weekday_name,
)

__all__ = ["date_key_for", "operational_dates", "parse_date_key", "weekday_name"]
