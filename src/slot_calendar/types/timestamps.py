"""
Wall-clock helpers.

Every instant handled by the calendar is a timezone-aware `datetime`.
Durations are whole milliseconds, the unit slot lengths are expressed in.
"""

from datetime import datetime, timedelta, timezone

ONE_MILLISECOND = timedelta(milliseconds=1)


def as_utc(time: datetime) -> datetime:
    """Return `time` as an aware datetime, reading a naive value as UTC."""
    if time.tzinfo is None:
        return time.replace(tzinfo=timezone.utc)
    return time


def milliseconds_between(start: datetime, end: datetime) -> int:
    """Whole milliseconds from `start` to `end`, rounded towards the past."""
    return (end - start) // ONE_MILLISECOND


def shift_milliseconds(time: datetime, milliseconds: int) -> datetime:
    """Move `time` by the given number of milliseconds."""
    return time + timedelta(milliseconds=milliseconds)
