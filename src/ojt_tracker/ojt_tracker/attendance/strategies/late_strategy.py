from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...core.enums import AttendanceStatus
from ...shifts.model import ShiftConfig
from ..hours import late_minutes
from ..model import AttendanceRecord
from .base import AttendanceStrategy, StatusDecision


class LateStrategy(AttendanceStrategy):
    """At least one clock-in past the grace period."""

    def decide(self, *, record: AttendanceRecord, shift: Optional[ShiftConfig], now: datetime) -> StatusDecision:
        worst = max(late_minutes(record, shift).values(), default=0)
        return StatusDecision(status=AttendanceStatus.LATE, note=f"late by {worst} min")
