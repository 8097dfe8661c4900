from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.constants import DEFAULT_LATE_GRACE_MINUTES
from ..core.enums import ShiftPair
from ..shifts.model import ShiftConfig
from .hours import late_minutes
from .model import AttendanceRecord
from .strategies.base import AttendanceStrategy
from .strategies.half_day_strategy import HalfDayStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.normal_strategy import NormalStrategy

_DAY_HALVES = (ShiftPair.MORNING, ShiftPair.AFTERNOON)


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose the status strategy for a record.

    Precedence: half day, then late, then normal. Decided from the record alone,
    so the same attendance pattern gets the same status whenever it is evaluated.
    """

    grace_minutes: int = DEFAULT_LATE_GRACE_MINUTES

    def for_record(self, *, record: AttendanceRecord, shift: Optional[ShiftConfig], now: datetime) -> AttendanceStrategy:
        if not shift:
            return NormalStrategy()
        if self._is_half_day(record, shift):
            return HalfDayStrategy()
        if any(m > self.grace_minutes for m in late_minutes(record, shift).values()):
            return LateStrategy()
        return NormalStrategy()

    @staticmethod
    def _is_half_day(record: AttendanceRecord, shift: ShiftConfig) -> bool:
        """One day half completed and the other never clocked into.

        Provisional while the day is in progress: a later clock-in for the other
        half recomputes the record and clears it.
        """
        windows = shift.windows()
        if not all(p in windows for p in _DAY_HALVES):
            return False

        completed = [p for p in _DAY_HALVES if all(v is not None for v in record.pair(p))]
        if len(completed) != 1:
            return False

        (missed,) = [p for p in _DAY_HALVES if p not in completed]
        clock_in, _ = record.pair(missed)
        return clock_in is None
