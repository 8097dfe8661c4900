from __future__ import annotations

from datetime import date, datetime
from typing import Any, Mapping, Optional, Sequence

from ..core.enums import AttendanceStatus, RecordShiftType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import CORRECTABLE_COLUMNS, IMAGE_COLUMNS, TIME_COLUMNS, AttendanceRecord, DerivedFields
from .repository import AttendanceRepository, Deriver

_COLUMNS = ", ".join(
    ("attendance_id", "student_id", "work_date", "shift_type")
    + TIME_COLUMNS
    + IMAGE_COLUMNS
    + ("total_hours", "undertime_minutes", "status", "remarks", "created_at", "updated_at")
)


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        student_id=int(r["student_id"]),
        work_date=r["work_date"],
        shift_type=RecordShiftType(r["shift_type"]),
        total_hours=float(r.get("total_hours") or 0),
        undertime_minutes=int(r.get("undertime_minutes") or 0),
        status=AttendanceStatus(r.get("status") or AttendanceStatus.PRESENT.value),
        remarks=r.get("remarks"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
        **{c: r.get(c) for c in TIME_COLUMNS + IMAGE_COLUMNS},
    )


def _db_value(value: Any) -> Any:
    if isinstance(value, (AttendanceStatus, RecordShiftType)):
        return value.value
    return value


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_records WHERE attendance_id=%s", (int(attendance_id),))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_for_student_and_date(self, student_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE student_id=%s AND work_date=%s",
                (int(student_id), work_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def list_for_period(
        self,
        *,
        start_date: date,
        end_date: date,
        student_id: Optional[int] = None,
    ) -> Sequence[AttendanceRecord]:
        clauses = ["work_date BETWEEN %s AND %s"]
        params: list[object] = [start_date, end_date]
        if student_id is not None:
            clauses.append("student_id=%s")
            params.append(int(student_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE {" AND ".join(clauses)}
                ORDER BY work_date DESC, student_id ASC
                """,
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]

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
        if column not in TIME_COLUMNS or image_column not in IMAGE_COLUMNS:
            raise ValueError(f"Not a clock column: {column!r}/{image_column!r}")

        with db_cursor(self._conn_factory) as (_, cur):
            # The unique key (student_id, work_date) turns a concurrent first
            # clock-in into an update instead of a duplicate row.
            cur.execute(
                f"""
                INSERT INTO attendance_records (student_id, work_date, shift_type, {column}, {image_column})
                VALUES (%s, %s, %s, %s, %s)
                ON DUPLICATE KEY UPDATE {column}=%s, {image_column}=%s
                """,
                (int(student_id), work_date, shift_type.value, timestamp, image, timestamp, image),
            )
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE student_id=%s AND work_date=%s FOR UPDATE",
                (int(student_id), work_date),
            )
            record = _to_record(fetchone(cur))
            return self._write_derived(cur, record, derive(record))

    def update_fields(
        self,
        *,
        attendance_id: int,
        changes: Mapping[str, Any],
        derive: Deriver,
    ) -> Optional[AttendanceRecord]:
        bad = set(changes) - CORRECTABLE_COLUMNS
        if bad:
            raise ValueError(f"Not correctable: {sorted(bad)}")

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE attendance_id=%s FOR UPDATE",
                (int(attendance_id),),
            )
            r = fetchone(cur)
            if not r:
                return None

            record = _to_record(r).with_changes(**changes)
            names = sorted(changes)
            cur.execute(
                f"UPDATE attendance_records SET {', '.join(f'{n}=%s' for n in names)} WHERE attendance_id=%s",
                tuple(_db_value(changes[n]) for n in names) + (int(attendance_id),),
            )
            return self._write_derived(cur, record, derive(record))

    @staticmethod
    def _write_derived(cur, record: AttendanceRecord, derived: DerivedFields) -> AttendanceRecord:
        cur.execute(
            """
            UPDATE attendance_records
            SET total_hours=%s, undertime_minutes=%s, status=%s
            WHERE attendance_id=%s
            """,
            (derived.total_hours, derived.undertime_minutes, derived.status.value, record.attendance_id),
        )
        return record.with_changes(
            total_hours=derived.total_hours,
            undertime_minutes=derived.undertime_minutes,
            status=derived.status,
        )

    def delete_before(self, cutoff: date) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance_records WHERE work_date < %s", (cutoff,))
            return int(cur.rowcount)
