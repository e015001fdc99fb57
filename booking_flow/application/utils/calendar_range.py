from __future__ import annotations

from datetime import MAXYEAR, date, datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


def resolve_time_zone(candidate: str | None, default: str) -> str:
    """Return the first valid IANA zone name of (candidate, default), else UTC."""
    for name in (candidate, default):
        if not name:
            continue
        try:
            ZoneInfo(name)
            return name
        except (ZoneInfoNotFoundError, ValueError):
            continue
    return "UTC"


def today_in(time_zone: str) -> date:
    return datetime.now(ZoneInfo(time_zone)).date()


def month_anchor(year: int, month: int, base: int = 0) -> date:
    """
    First day of the month; months outside the year roll over (base 0: 12 -> next January).
    Raises ValueError when the month, or the first day of the month after it, is not a valid date.
    """
    year_offset, month_index = divmod(month - base, 12)
    anchor = date(year + year_offset, month_index + 1, 1)
    if anchor.year == MAXYEAR and anchor.month == 12:
        raise ValueError(f"month range after {anchor.isoformat()} is out of range")
    return anchor


def month_range(anchor: date, time_zone: str) -> tuple[datetime, datetime]:
    """Half-open [first of month, first of next month) at local midnight in time_zone."""
    tz = ZoneInfo(time_zone)
    start = datetime(anchor.year, anchor.month, 1, tzinfo=tz)
    if anchor.month == 12:
        end = datetime(anchor.year + 1, 1, 1, tzinfo=tz)
    else:
        end = datetime(anchor.year, anchor.month + 1, 1, tzinfo=tz)
    return start, end
