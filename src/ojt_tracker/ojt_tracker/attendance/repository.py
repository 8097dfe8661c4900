from __future__ import annotations

from datetime import date, datetime
from typing import Any, Callable, Mapping, Optional, Protocol, Sequence

from ..core.enums import RecordShiftType
from .model import AttendanceRecord, DerivedFields

Deriver = Callable[[AttendanceRecord], DerivedFields]


class AttendanceRepository(Protocol):
    """Persistence port for the attendance ledger.

    Mutating methods take a ``derive`` callback and apply it to the freshly
    written row inside the same transaction, so derived columns never lag
    behind the timestamps they are computed from.
    """

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_for_student_and_date(self, student_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_for_period(
        self,
        *,
        start_date: date,
        end_date: date,
        student_id: Optional[int] = None,
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def upsert_clock_event(
        self,
        *,
        student_id: int,
        work_date: date,
        shift_type: RecordShiftType,
        column: str,
        image_column: str,
        timestamp: datetime,
        image: Optional[str],
        derive: Deriver,
    ) -> AttendanceRecord:
        """Create the (student, day) row if missing, set one timestamp/image pair."""

        raise NotImplementedError

    def update_fields(
        self,
        *,
        attendance_id: int,
        changes: Mapping[str, Any],
        derive: Deriver,
    ) -> Optional[AttendanceRecord]:
        """Admin correction; returns None when the record does not exist."""

        raise NotImplementedError

    def delete_before(self, cutoff: date) -> int:
        raise NotImplementedError
