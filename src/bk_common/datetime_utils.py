"""UTC datetime utilities."""

from datetime import date, datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo


def utc_now() -> datetime:
    """Return timezone-aware UTC now."""
    return datetime.now(timezone.utc)


def day_bounds(day: date, tz_name: str) -> tuple[datetime, datetime]:
    """Return [start, end) of a calendar day in ``tz_name``, expressed in UTC."""
    tz = ZoneInfo(tz_name)
    start = datetime.combine(day, time.min, tzinfo=tz)
    end = start + timedelta(days=1)
    return start.astimezone(timezone.utc), end.astimezone(timezone.utc)


def month_bounds(year: int, month: int, tz_name: str) -> tuple[datetime, datetime]:
    """Return [start, end) of a calendar month in ``tz_name``, expressed in UTC."""
    if not 1 <= month <= 12:
        raise ValueError(f"Month must be between 1 and 12, got {month}")
    tz = ZoneInfo(tz_name)
    start = datetime(year, month, 1, tzinfo=tz)
    end = datetime(year + 1, 1, 1, tzinfo=tz) if month == 12 else datetime(year, month + 1, 1, tzinfo=tz)
    return start.astimezone(timezone.utc), end.astimezone(timezone.utc)


def local_today(tz_name: str, now: datetime | None = None) -> date:
    """Calendar date of ``now`` (default: current time) in ``tz_name``."""
    return (now or utc_now()).astimezone(ZoneInfo(tz_name)).date()
