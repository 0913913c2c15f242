"""Date helpers for day-granularity comparisons.

Scheduling rules compare calendar days, never instants, so everything
here reduces values to :class:`datetime.date`.
"""

from datetime import date, datetime, timezone


def utcnow() -> datetime:
    """Return current UTC time with timezone info."""
    return datetime.now(timezone.utc)


def today_utc() -> date:
    """Return today's calendar date in UTC.

    Used as the default "today" provider; callers that need a fixed
    reference day pass their own.
    """
    return utcnow().date()


def to_date(value: date | datetime | str) -> date:
    """Reduce a date, datetime or ISO string to a calendar date.

    Time-of-day is discarded. Strings may be a plain ``YYYY-MM-DD`` or a
    full ISO-8601 timestamp (a trailing ``Z`` is accepted).

    Raises:
        ValueError: If the string is not an ISO date or timestamp.
        TypeError: If the value is not a date, datetime or string.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if len(text) == 10:
            return date.fromisoformat(text)
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        return datetime.fromisoformat(text).date()
    raise TypeError(f"Cannot interpret {type(value).__name__} as a date")


__all__ = [
    "to_date",
    "today_utc",
    "utcnow",
]
