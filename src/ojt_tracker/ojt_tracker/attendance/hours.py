"""Time accounting over a day's record: worked hours and undertime."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from ..core.constants import HOURS_DECIMALS
from ..core.enums import ShiftPair
from ..shifts.model import ShiftConfig
from .model import AttendanceRecord

_QUANTUM = Decimal(1).scaleb(-HOURS_DECIMALS)


def pair_seconds(record: AttendanceRecord, pair: ShiftPair) -> float:
    """Seconds between in and out of one pair; 0 unless both are recorded.

    Not clamped: an out earlier than its in gives a negative duration.
    """
    clock_in, clock_out = record.pair(pair)
    if clock_in is None or clock_out is None:
        return 0.0
    return (clock_out - clock_in).total_seconds()


def worked_minutes(record: AttendanceRecord) -> float:
    return sum(pair_seconds(record, pair) for pair in ShiftPair) / 60


def total_hours(record: AttendanceRecord) -> float:
    """Worked hours over all completed pairs, rounded half-up to 2 decimals."""
    seconds = Decimal(str(sum(pair_seconds(record, pair) for pair in ShiftPair)))
    return float((seconds / 3600).quantize(_QUANTUM, rounding=ROUND_HALF_UP))


def late_minutes(record: AttendanceRecord, shift: Optional[ShiftConfig]) -> dict[ShiftPair, int]:
    """Minutes after window start for each recorded in."""
    if shift is None:
        return {}
    out: dict[ShiftPair, int] = {}
    for pair, window in shift.windows().items():
        clock_in, _ = record.pair(pair)
        if clock_in is None:
            continue
        start, _ = window.bounds_around(record.work_date, clock_in)
        out[pair] = max(int((clock_in - start).total_seconds() // 60), 0)
    return out


def early_minutes(record: AttendanceRecord, shift: Optional[ShiftConfig]) -> dict[ShiftPair, int]:
    """Minutes before window end for each recorded out."""
    if shift is None:
        return {}
    out: dict[ShiftPair, int] = {}
    for pair, window in shift.windows().items():
        _, clock_out = record.pair(pair)
        if clock_out is None:
            continue
        _, end = window.bounds_around(record.work_date, clock_out)
        out[pair] = max(int((end - clock_out).total_seconds() // 60), 0)
    return out


def undertime_minutes(record: AttendanceRecord, shift: Optional[ShiftConfig]) -> int:
    """Tardiness plus early departures against the shift windows."""
    return sum(late_minutes(record, shift).values()) + sum(early_minutes(record, shift).values())
