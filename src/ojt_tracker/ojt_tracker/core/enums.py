from __future__ import annotations

from enum import Enum

from .exceptions import InvalidActionError


class Role(str, Enum):
    """User roles used for authorization."""

    STUDENT = "student"
    DEPARTMENT = "department"
    ADMIN = "admin"
    SUPERADMIN = "superadmin"


# Roles allowed to approve students, review requests and correct attendance.
REVIEWER_ROLES = frozenset({Role.DEPARTMENT, Role.ADMIN, Role.SUPERADMIN})


class ShiftPair(str, Enum):
    """One of the three in/out pairs of a day's record."""

    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"

    @property
    def in_column(self) -> str:
        return f"{self.value}_in"

    @property
    def out_column(self) -> str:
        return f"{self.value}_out"


class ClockAction(str, Enum):
    """Clock actions accepted by the attendance ledger."""

    MORNING_IN = "morningIn"
    MORNING_OUT = "morningOut"
    AFTERNOON_IN = "afternoonIn"
    AFTERNOON_OUT = "afternoonOut"
    EVENING_IN = "eveningIn"
    EVENING_OUT = "eveningOut"

    @classmethod
    def parse(cls, value) -> "ClockAction":
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise InvalidActionError("Invalid action")

    @property
    def pair(self) -> ShiftPair:
        return ShiftPair(self.value[:-2] if self.is_in else self.value[:-3])

    @property
    def is_in(self) -> bool:
        return self.value.endswith("In")

    @property
    def column(self) -> str:
        return self.pair.in_column if self.is_in else self.pair.out_column

    @property
    def image_column(self) -> str:
        return f"{self.column}_image"


class RecordShiftType(str, Enum):
    """Shift type stamped on an attendance record at creation."""

    REGULAR = "regular"
    GRAVEYARD = "graveyard"


class StudentShiftType(str, Enum):
    """Shift type assigned to a student."""

    REGULAR = "regular"
    REGULAR_SPLIT = "regular-split"
    GRAVEYARD = "graveyard"
    CUSTOM = "custom"


class AttendanceStatus(str, Enum):
    """Normalized attendance status stored with each record."""

    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"
    HALF_DAY = "half_day"


class RequestStatus(str, Enum):
    """Review state of a schedule-change request."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
