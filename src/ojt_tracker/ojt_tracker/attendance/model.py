from __future__ import annotations

from dataclasses import dataclass, fields, replace
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus, RecordShiftType, ShiftPair

TIME_COLUMNS = (
    "morning_in",
    "morning_out",
    "afternoon_in",
    "afternoon_out",
    "evening_in",
    "evening_out",
)
IMAGE_COLUMNS = tuple(f"{c}_image" for c in TIME_COLUMNS)

# Columns an administrative correction may touch.
CORRECTABLE_COLUMNS = frozenset(TIME_COLUMNS + IMAGE_COLUMNS + ("status", "remarks"))


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one student's attendance for one calendar day."""

    attendance_id: int
    student_id: int
    work_date: date
    shift_type: RecordShiftType = RecordShiftType.REGULAR
    morning_in: Optional[datetime] = None
    morning_out: Optional[datetime] = None
    afternoon_in: Optional[datetime] = None
    afternoon_out: Optional[datetime] = None
    evening_in: Optional[datetime] = None
    evening_out: Optional[datetime] = None
    morning_in_image: Optional[str] = None
    morning_out_image: Optional[str] = None
    afternoon_in_image: Optional[str] = None
    afternoon_out_image: Optional[str] = None
    evening_in_image: Optional[str] = None
    evening_out_image: Optional[str] = None
    total_hours: float = 0.0
    undertime_minutes: int = 0
    status: AttendanceStatus = AttendanceStatus.PRESENT
    remarks: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def pair(self, pair: ShiftPair) -> tuple[Optional[datetime], Optional[datetime]]:
        return getattr(self, pair.in_column), getattr(self, pair.out_column)

    def with_changes(self, **changes) -> "AttendanceRecord":
        return replace(self, **changes)

    def to_dict(self, *, include_images: bool = True) -> dict:
        out: dict = {}
        for f in fields(self):
            if not include_images and f.name in IMAGE_COLUMNS:
                continue
            value = getattr(self, f.name)
            if isinstance(value, (datetime, date)):
                value = value.isoformat()
            elif isinstance(value, (AttendanceStatus, RecordShiftType)):
                value = value.value
            out[f.name] = value
        return out


@dataclass(frozen=True)
class DerivedFields:
    """Values recomputed after every mutation of a record."""

    total_hours: float
    undertime_minutes: int
    status: AttendanceStatus
