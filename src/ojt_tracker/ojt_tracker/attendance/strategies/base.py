from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ...core.enums import AttendanceStatus
from ...shifts.model import ShiftConfig
from ..model import AttendanceRecord


@dataclass(frozen=True)
class StatusDecision:
    status: AttendanceStatus
    note: Optional[str] = None


class AttendanceStrategy(ABC):
    """Strategy Pattern: encapsulate how we decide a day's attendance status."""

    @abstractmethod
    def decide(self, *, record: AttendanceRecord, shift: Optional[ShiftConfig], now: datetime) -> StatusDecision:
        raise NotImplementedError
