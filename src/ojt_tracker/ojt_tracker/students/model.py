from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import RecordShiftType, StudentShiftType
from ..shifts.model import ShiftConfig, default_shift_config


@dataclass(frozen=True)
class Student:
    """Domain entity: a student on OJT placement.

    Note: Plain data object, no DB access here.
    """

    student_id: int
    user_id: int
    student_number: str
    first_name: str
    last_name: str
    course: str
    department: str
    host_establishment: str
    middle_name: Optional[str] = None
    shift_type: StudentShiftType = StudentShiftType.REGULAR
    shift_config: Optional[ShiftConfig] = None
    ojt_advisor_id: Optional[int] = None
    is_accepted: bool = False
    is_active: bool = True

    @property
    def full_name(self) -> str:
        parts = [self.first_name, self.middle_name, self.last_name]
        return " ".join(p for p in parts if p)

    def active_shift(self) -> Optional[ShiftConfig]:
        return self.shift_config or default_shift_config(self.shift_type)

    def record_shift_type(self) -> RecordShiftType:
        shift = self.active_shift()
        if shift is not None:
            return shift.record_shift_type()
        if self.shift_type == StudentShiftType.GRAVEYARD:
            return RecordShiftType.GRAVEYARD
        return RecordShiftType.REGULAR

    def to_dict(self) -> dict:
        return {
            "student_id": self.student_id,
            "user_id": self.user_id,
            "student_number": self.student_number,
            "first_name": self.first_name,
            "middle_name": self.middle_name,
            "last_name": self.last_name,
            "full_name": self.full_name,
            "course": self.course,
            "department": self.department,
            "host_establishment": self.host_establishment,
            "shift_type": self.shift_type.value,
            "shift_config": self.shift_config.to_dict() if self.shift_config else None,
            "ojt_advisor_id": self.ojt_advisor_id,
            "is_accepted": self.is_accepted,
            "is_active": self.is_active,
        }


@dataclass(frozen=True)
class NewStudent:
    """Registration form payload."""

    email: str
    password: str
    student_number: str
    first_name: str
    last_name: str
    course: str
    department: str
    host_establishment: str
    middle_name: Optional[str] = None
    shift_type: StudentShiftType = StudentShiftType.REGULAR
