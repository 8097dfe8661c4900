from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import RequestStatus, StudentShiftType
from ..core.exceptions import NotFoundError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_json, fetchall, fetchone, load_json
from ..shifts.model import ShiftConfig
from .model import ScheduleChangeRequest
from .repository import RequestRepository

_SELECT = """
    SELECT request_id, student_id, department, current_shift_type, requested_shift_type,
           requested_shift_config, reason, status, requested_at, reviewed_at, reviewed_by, comments
    FROM schedule_change_requests
"""


def _to_request(r: dict) -> ScheduleChangeRequest:
    requested = StudentShiftType(r["requested_shift_type"])
    config = load_json(r.get("requested_shift_config"))
    return ScheduleChangeRequest(
        request_id=int(r["request_id"]),
        student_id=int(r["student_id"]),
        department=r["department"],
        current_shift_type=StudentShiftType(r["current_shift_type"]),
        requested_shift_type=requested,
        requested_shift_config=ShiftConfig.from_dict(config, default_type=requested) if config else None,
        reason=r["reason"],
        status=RequestStatus(r["status"]),
        requested_at=r["requested_at"],
        reviewed_at=r.get("reviewed_at"),
        reviewed_by=int(r["reviewed_by"]) if r.get("reviewed_by") else None,
        comments=r.get("comments"),
    )


class MySQLRequestRepository(RequestRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create_schedule_change(
        self,
        *,
        student_id: int,
        department: str,
        current_shift_type: StudentShiftType,
        requested_shift_type: StudentShiftType,
        requested_shift_config: Optional[ShiftConfig],
        reason: str,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO schedule_change_requests(
                    student_id, department, current_shift_type, requested_shift_type,
                    requested_shift_config, reason, status
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(student_id),
                    department,
                    current_shift_type.value,
                    requested_shift_type.value,
                    dump_json(requested_shift_config.to_dict()) if requested_shift_config else None,
                    reason,
                    RequestStatus.PENDING.value,
                ),
            )
            return int(cur.lastrowid)

    def get_schedule_change(self, *, request_id: int) -> Optional[ScheduleChangeRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE request_id=%s", (int(request_id),))
            r = fetchone(cur)
            return _to_request(r) if r else None

    def list_schedule_changes(
        self,
        *,
        student_id: Optional[int] = None,
        department: Optional[str] = None,
        status: Optional[RequestStatus] = None,
        limit: int = 200,
    ) -> Sequence[ScheduleChangeRequest]:
        clauses = ["1=1"]
        params: list[object] = []

        if student_id is not None:
            clauses.append("student_id=%s")
            params.append(int(student_id))
        if department:
            clauses.append("department=%s")
            params.append(department)
        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"{_SELECT} WHERE {' AND '.join(clauses)} ORDER BY requested_at DESC LIMIT %s",
                tuple(params + [int(limit)]),
            )
            return [_to_request(r) for r in fetchall(cur)]

    def decide_schedule_change(
        self,
        *,
        request_id: int,
        status: RequestStatus,
        reviewed_by: int,
        comments: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE schedule_change_requests
                SET status=%s, reviewed_by=%s, reviewed_at=NOW(), comments=%s
                WHERE request_id=%s AND status=%s
                """,
                (
                    status.value,
                    int(reviewed_by),
                    comments,
                    int(request_id),
                    RequestStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0

    def approve_schedule_change(
        self,
        *,
        request_id: int,
        reviewed_by: int,
        comments: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE request_id=%s FOR UPDATE", (int(request_id),))
            r = fetchone(cur)
            if not r or r["status"] != RequestStatus.PENDING.value:
                return False
            req = _to_request(r)

            cur.execute(
                """
                UPDATE schedule_change_requests
                SET status=%s, reviewed_by=%s, reviewed_at=NOW(), comments=%s
                WHERE request_id=%s
                """,
                (RequestStatus.APPROVED.value, int(reviewed_by), comments, req.request_id),
            )
            cur.execute(
                "UPDATE students SET shift_type=%s, shift_config=%s WHERE student_id=%s",
                (
                    req.requested_shift_type.value,
                    dump_json(req.requested_shift_config.to_dict()) if req.requested_shift_config else None,
                    req.student_id,
                ),
            )
            if cur.rowcount == 0:
                # Rolls back the approval above.
                raise NotFoundError("Student not found")
            return True
