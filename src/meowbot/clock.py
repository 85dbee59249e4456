"""Wall-clock helpers pinned to a fixed UTC offset."""

from datetime import date, datetime, timedelta, timezone


def local_now(offset_hours: float, now: datetime | None = None) -> datetime:
    """Return the current time shifted to a fixed UTC offset.

    Args:
        offset_hours: Offset from UTC, e.g. 5.5 for IST.
        now: Reference instant; naive values are taken as UTC.

    Returns:
        An aware datetime in the fixed-offset zone.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(timezone(timedelta(hours=offset_hours)))


def local_today(offset_hours: float, now: datetime | None = None) -> date:
    """Return the calendar date at a fixed UTC offset."""
    return local_now(offset_hours, now).date()


def day_number(start: date, today: date) -> int:
    """Return the 1-based programme day for ``today``; the start date is day 1."""
    return max(1, (today - start).days + 1)
