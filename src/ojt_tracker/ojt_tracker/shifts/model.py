from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Optional

from ..common.datetime_utils import parse_hhmm
from ..core.enums import RecordShiftType, ShiftPair, StudentShiftType
from ..core.exceptions import ValidationError

_WIRE_KEYS = {
    "morning_start": "morningStart",
    "morning_end": "morningEnd",
    "afternoon_start": "afternoonStart",
    "afternoon_end": "afternoonEnd",
    "evening_start": "eveningStart",
    "evening_end": "eveningEnd",
}


@dataclass(frozen=True)
class ShiftWindow:
    """Scheduled start/end of one shift pair.

    An end that is not after the start means the window crosses midnight.
    """

    start: time
    end: time

    def bounds_on(self, work_date: date) -> tuple[datetime, datetime]:
        start = datetime.combine(work_date, self.start)
        end = datetime.combine(work_date, self.end)
        if end <= start:
            end += timedelta(days=1)
        return start, end

    def bounds_around(self, work_date: date, moment: datetime) -> tuple[datetime, datetime]:
        """Bounds of the occurrence a timestamp belongs to.

        For a window crossing midnight, a moment early on ``work_date`` (before the
        end time) belongs to the occurrence that started the previous evening.
        """
        start, end = self.bounds_on(work_date)
        if end.date() > start.date() and moment < start and moment <= datetime.combine(work_date, self.end):
            return start - timedelta(days=1), end - timedelta(days=1)
        return start, end


@dataclass(frozen=True)
class ShiftConfig:
    """Domain value: the student's active shift (which windows, at what times)."""

    type: StudentShiftType
    morning_start: Optional[time] = None
    morning_end: Optional[time] = None
    afternoon_start: Optional[time] = None
    afternoon_end: Optional[time] = None
    evening_start: Optional[time] = None
    evening_end: Optional[time] = None
    description: Optional[str] = None

    def __post_init__(self):
        for pair in ShiftPair:
            start = getattr(self, f"{pair.value}_start")
            end = getattr(self, f"{pair.value}_end")
            if (start is None) != (end is None):
                raise ValidationError(f"{pair.value.capitalize()} shift needs both a start and an end")

    def windows(self) -> dict[ShiftPair, ShiftWindow]:
        out: dict[ShiftPair, ShiftWindow] = {}
        for pair in ShiftPair:
            start = getattr(self, f"{pair.value}_start")
            end = getattr(self, f"{pair.value}_end")
            if start is not None:
                out[pair] = ShiftWindow(start=start, end=end)
        return out

    def record_shift_type(self) -> RecordShiftType:
        if self.type == StudentShiftType.GRAVEYARD:
            return RecordShiftType.GRAVEYARD
        if set(self.windows()) == {ShiftPair.EVENING}:
            return RecordShiftType.GRAVEYARD
        return RecordShiftType.REGULAR

    @classmethod
    def from_dict(cls, data: dict, *, default_type: StudentShiftType = StudentShiftType.CUSTOM) -> "ShiftConfig":
        """Build from the wire shape (``{"type": ..., "morningStart": "08:00", ...}``)."""
        if not isinstance(data, dict):
            raise ValidationError("Shift configuration must be an object")

        raw_type = data.get("type") or default_type.value
        try:
            shift_type = StudentShiftType(raw_type)
        except ValueError:
            raise ValidationError(f"Unknown shift type: {raw_type!r}")

        times = {}
        for attr, key in _WIRE_KEYS.items():
            value = data.get(key)
            times[attr] = parse_hhmm(value) if value else None

        return cls(type=shift_type, description=data.get("description") or None, **times)

    def to_dict(self) -> dict:
        out: dict = {"type": self.type.value}
        for attr, key in _WIRE_KEYS.items():
            value = getattr(self, attr)
            if value is not None:
                out[key] = value.strftime("%H:%M")
        if self.description:
            out["description"] = self.description
        return out


def default_shift_config(shift_type: StudentShiftType) -> Optional[ShiftConfig]:
    """Shift used when a student has no explicit configuration."""
    if shift_type in (StudentShiftType.REGULAR, StudentShiftType.REGULAR_SPLIT):
        return ShiftConfig(
            type=shift_type,
            morning_start=time(8, 0),
            morning_end=time(12, 0),
            afternoon_start=time(13, 0),
            afternoon_end=time(17, 0),
            description="8:00 AM - 12:00 PM, 1:00 PM - 5:00 PM",
        )
    if shift_type == StudentShiftType.GRAVEYARD:
        return ShiftConfig(
            type=shift_type,
            evening_start=time(19, 0),
            evening_end=time(7, 0),
            description="7:00 PM - 7:00 AM",
        )
    return None
