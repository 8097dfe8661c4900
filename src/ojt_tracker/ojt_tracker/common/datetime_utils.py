from __future__ import annotations

import calendar
from datetime import date, datetime, time
from typing import Optional
from zoneinfo import ZoneInfo

from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid date: {value!r} (expected YYYY-MM-DD)")


def parse_hhmm(value: str) -> time:
    """Parse an HH:MM string into time."""
    try:
        return datetime.strptime(value.strip(), "%H:%M").time()
    except (AttributeError, ValueError):
        raise ValidationError(f"Invalid time: {value!r} (expected HH:MM)")


def now_local(tz_name: Optional[str] = None) -> datetime:
    """Current wall-clock time in the deployment timezone, as a naive datetime.

    Note: Wrapped so tests can patch/mock easier.
    """
    if tz_name:
        return datetime.now(ZoneInfo(tz_name)).replace(tzinfo=None)
    return datetime.now()


def to_local_naive(value: datetime, tz_name: Optional[str] = None) -> datetime:
    """Wall-clock time in the deployment timezone for a possibly aware datetime.

    Naive values are taken as already local. Aware values are converted first,
    to ``tz_name`` or to the system zone when none is configured.
    """
    if value.tzinfo is None:
        return value
    target = value.astimezone(ZoneInfo(tz_name)) if tz_name else value.astimezone()
    return target.replace(tzinfo=None)


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """First and last day of a calendar month."""
    if not 1 <= int(month) <= 12:
        raise ValidationError("Month must be between 1 and 12")
    last_day = calendar.monthrange(int(year), int(month))[1]
    return date(int(year), int(month), 1), date(int(year), int(month), last_day)


def format_clock(value: Optional[datetime]) -> str:
    """12-hour clock label used on the DTR (e.g. '08:00 AM')."""
    if value is None:
        return ""
    return value.strftime("%I:%M %p")
