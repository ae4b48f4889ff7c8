"""SkipReason value object - why a delivery day was skipped."""

from enum import Enum
from typing import Optional, Union


class SkipReason(str, Enum):
    """Closed set of reasons for a skipped delivery.

    Stored on the meal selection as the skip request type and rendered on
    the order status record through its label.
    """

    HOLIDAY = "holiday"
    USER_REQUEST = "user_request"
    WEATHER = "weather_conditions"
    DELIVERY_ISSUES = "delivery_issues"
    OTHER = "other"

    @property
    def label(self) -> str:
        """Human readable label written to ``StatusRecord.skip_reason``.

        Example:
            >>> SkipReason.USER_REQUEST.label
            'User Request'
        """
        return _LABELS[self]

    @property
    def requires_note(self) -> bool:
        """'other' must be accompanied by a caller supplied note."""
        return self is SkipReason.OTHER

    def client_message(self, note: Optional[str] = None) -> str:
        """Customer facing explanation shown in the client app."""
        if self is SkipReason.OTHER:
            return note or "Delivery unavailable"
        return _CLIENT_MESSAGES[self]

    @classmethod
    def parse(cls, raw: Optional[str]) -> Optional["SkipReason"]:
        """Parse a stored skip type.

        Older documents carry ``admin_action`` for admin initiated skips,
        which has no counterpart in the closed set and reads as OTHER.
        """
        if raw is None:
            return None
        try:
            return cls(raw)
        except ValueError:
            return cls.OTHER

    @classmethod
    def lookup(cls, raw: Union["SkipReason", str]) -> Optional["SkipReason"]:
        """Match a stored value or a display label; None when neither fits.

        Example:
            >>> SkipReason.lookup("Public Holiday")
            <SkipReason.HOLIDAY: 'holiday'>
        """
        if isinstance(raw, SkipReason):
            return raw
        text = (raw or "").strip()
        try:
            return cls(text)
        except ValueError:
            pass
        folded = text.casefold()
        for reason, label in _LABELS.items():
            if label.casefold() == folded:
                return reason
        return None

    @classmethod
    def infer_from_text(cls, text: Optional[str]) -> "SkipReason":
        """Keyword heuristic for free-text reasons.

        Only a fallback for callers that do not pass an explicit reason;
        English keywords only.

        Examples:
            >>> SkipReason.infer_from_text("Eid holiday")
            <SkipReason.HOLIDAY: 'holiday'>
            >>> SkipReason.infer_from_text("sandstorm")
            <SkipReason.OTHER: 'other'>
        """
        if not text:
            return cls.OTHER

        lowered = text.lower()
        if "holiday" in lowered:
            return cls.HOLIDAY
        if "weather" in lowered:
            return cls.WEATHER
        if "delivery" in lowered:
            return cls.DELIVERY_ISSUES
        if "user" in lowered or "customer" in lowered:
            return cls.USER_REQUEST
        return cls.OTHER


_LABELS = {
    SkipReason.HOLIDAY: "Public Holiday",
    SkipReason.USER_REQUEST: "User Request",
    SkipReason.WEATHER: "Weather Conditions",
    SkipReason.DELIVERY_ISSUES: "Delivery Issues",
    SkipReason.OTHER: "Other Reason",
}

_CLIENT_MESSAGES = {
    SkipReason.HOLIDAY: "Service unavailable due to holiday",
    SkipReason.USER_REQUEST: "You requested to skip this day",
    SkipReason.WEATHER: "Delivery suspended due to weather conditions",
    SkipReason.DELIVERY_ISSUES: "Delivery temporarily unavailable",
}
