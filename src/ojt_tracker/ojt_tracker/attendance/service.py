from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Any, Callable, Mapping, Optional, Sequence

from ..common.datetime_utils import month_bounds, now_local, to_local_naive
from ..core.enums import AttendanceStatus, ClockAction, RecordShiftType
from ..core.exceptions import NotFoundError, ValidationError
from ..shifts.model import ShiftConfig
from .factory import AttendanceStrategyFactory
from .hours import total_hours, undertime_minutes
from .model import CORRECTABLE_COLUMNS, IMAGE_COLUMNS, TIME_COLUMNS, AttendanceRecord, DerivedFields
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

ShiftLookup = Callable[[int], Optional[ShiftConfig]]


class AttendanceLedger:
    """Use case: record clock events and keep each day's totals current.

    The ledger performs no authorization; callers check that the student exists
    and has been accepted before calling ``record_clock_event``.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        *,
        strategy_factory: AttendanceStrategyFactory | None = None,
        shift_lookup: ShiftLookup | None = None,
        clock: Callable[[], datetime] | None = None,
        timezone: Optional[str] = None,
    ):
        self._attendance = attendance
        self._factory = strategy_factory or AttendanceStrategyFactory()
        self._shift_lookup = shift_lookup
        self._timezone = timezone
        self._clock = clock or (lambda: now_local(timezone))

    def _shift_for(self, student_id: int) -> Optional[ShiftConfig]:
        return self._shift_lookup(student_id) if self._shift_lookup else None

    def derive(
        self,
        record: AttendanceRecord,
        shift: Optional[ShiftConfig],
        *,
        now: datetime,
        keep_status: bool = False,
    ) -> DerivedFields:
        if keep_status:
            status = record.status
        else:
            strategy = self._factory.for_record(record=record, shift=shift, now=now)
            status = strategy.decide(record=record, shift=shift, now=now).status
        return DerivedFields(
            total_hours=total_hours(record),
            undertime_minutes=undertime_minutes(record, shift),
            status=status,
        )

    def record_clock_event(
        self,
        *,
        student_id: int,
        action: ClockAction | str,
        proof_image: Optional[str] = None,
        shift_type: RecordShiftType = RecordShiftType.REGULAR,
        shift: Optional[ShiftConfig] = None,
        timestamp: Optional[datetime] = None,
    ) -> AttendanceRecord:
        action = ClockAction.parse(action)
        timestamp = timestamp or self._clock()
        if shift is None:
            shift = self._shift_for(int(student_id))

        record = self._attendance.upsert_clock_event(
            student_id=int(student_id),
            work_date=timestamp.date(),
            shift_type=RecordShiftType(shift_type),
            column=action.column,
            image_column=action.image_column,
            timestamp=timestamp,
            image=proof_image,
            derive=lambda r: self.derive(r, shift, now=timestamp),
        )
        logger.info(
            "Recorded %s for student %s on %s (total_hours=%.2f, status=%s)",
            action.value,
            student_id,
            record.work_date,
            record.total_hours,
            record.status.value,
        )
        return record

    def get_record_for_day(self, student_id: int, work_date: date) -> Optional[AttendanceRecord]:
        return self._attendance.get_for_student_and_date(int(student_id), work_date)

    def get_records_for_period(
        self,
        *,
        start: date,
        end: date,
        student_id: Optional[int] = None,
    ) -> Sequence[AttendanceRecord]:
        if end < start:
            raise ValidationError("End date must not be before start date")
        return self._attendance.list_for_period(
            start_date=start,
            end_date=end,
            student_id=int(student_id) if student_id is not None else None,
        )

    def get_records_for_month(self, *, year: int, month: int, student_id: Optional[int] = None) -> Sequence[AttendanceRecord]:
        start, end = month_bounds(year, month)
        return self.get_records_for_period(start=start, end=end, student_id=student_id)

    def update_record_fields(self, attendance_id: int, fields: Mapping[str, Any]) -> AttendanceRecord:
        """Administrative correction; re-triggers the totals recompute."""
        changes = self._clean_changes(fields)
        now = self._clock()
        keep_status = "status" in changes

        record = self._attendance.update_fields(
            attendance_id=int(attendance_id),
            changes=changes,
            derive=lambda r: self.derive(r, self._shift_for(r.student_id), now=now, keep_status=keep_status),
        )
        if record is None:
            raise NotFoundError("Attendance record not found")

        logger.info("Corrected attendance %s fields=%s", attendance_id, sorted(changes))
        return record

    def purge_older_than(self, days: int, *, today: Optional[date] = None) -> int:
        """Retention cleanup: delete records older than ``days`` days."""
        if int(days) <= 0:
            raise ValidationError("Retention days must be positive")
        cutoff = (today or self._clock().date()) - timedelta(days=int(days))
        deleted = self._attendance.delete_before(cutoff)
        logger.info("Purged %s attendance records before %s", deleted, cutoff)
        return deleted

    def _clean_changes(self, fields: Mapping[str, Any]) -> dict[str, Any]:
        if not fields:
            raise ValidationError("No fields to update")

        unknown = sorted(set(fields) - CORRECTABLE_COLUMNS)
        if unknown:
            raise ValidationError(f"Fields cannot be updated: {', '.join(unknown)}")

        changes: dict[str, Any] = {}
        for name, value in fields.items():
            if name in TIME_COLUMNS:
                changes[name] = _coerce_timestamp(name, value, self._timezone)
            elif name == "status":
                try:
                    changes[name] = AttendanceStatus(value)
                except ValueError:
                    raise ValidationError(f"Unknown status: {value!r}")
            elif name in IMAGE_COLUMNS or name == "remarks":
                changes[name] = None if value in (None, "") else str(value)
        return changes


def _coerce_timestamp(name: str, value: Any, tz_name: Optional[str]) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if not isinstance(value, datetime):
        try:
            value = datetime.fromisoformat(str(value))
        except ValueError:
            raise ValidationError(f"{name} must be an ISO timestamp")
    # Stored wall-clock time is naive local time.
    return to_local_naive(value, tz_name)
