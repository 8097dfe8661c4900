from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...core.enums import AttendanceStatus
from ...shifts.model import ShiftConfig
from ..model import AttendanceRecord
from .base import AttendanceStrategy, StatusDecision


class NormalStrategy(AttendanceStrategy):
    """On time (or no shift to compare against)."""

    def decide(self, *, record: AttendanceRecord, shift: Optional[ShiftConfig], now: datetime) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.PRESENT)
