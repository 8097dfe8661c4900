from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Role, StudentShiftType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, load_json
from ..shifts.model import ShiftConfig
from .model import Student
from .repository import StudentRepository

_SELECT = """
    SELECT student_id, user_id, student_number, first_name, middle_name, last_name,
           course, department, host_establishment, shift_type, shift_config,
           ojt_advisor_id, is_accepted, is_active
    FROM students
"""


def _to_student(r: dict) -> Student:
    shift_type = StudentShiftType(r.get("shift_type") or StudentShiftType.REGULAR.value)
    config = load_json(r.get("shift_config"))
    return Student(
        student_id=int(r["student_id"]),
        user_id=int(r["user_id"]),
        student_number=r["student_number"],
        first_name=r["first_name"],
        middle_name=r.get("middle_name"),
        last_name=r["last_name"],
        course=r["course"],
        department=r["department"],
        host_establishment=r["host_establishment"],
        shift_type=shift_type,
        shift_config=ShiftConfig.from_dict(config, default_type=shift_type) if config else None,
        ojt_advisor_id=int(r["ojt_advisor_id"]) if r.get("ojt_advisor_id") else None,
        is_accepted=bool(r.get("is_accepted")),
        is_active=bool(r.get("is_active")),
    )


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _get_one(self, where: str, params: tuple) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE {where}", params)
            r = fetchone(cur)
            return _to_student(r) if r else None

    def get_by_id(self, student_id: int) -> Optional[Student]:
        return self._get_one("student_id=%s", (int(student_id),))

    def get_by_user_id(self, user_id: int) -> Optional[Student]:
        return self._get_one("user_id=%s", (int(user_id),))

    def get_by_student_number(self, student_number: str) -> Optional[Student]:
        return self._get_one("student_number=%s", (student_number,))

    def create_with_user(
        self,
        *,
        email: str,
        password_hash: str,
        student_number: str,
        first_name: str,
        middle_name: Optional[str],
        last_name: str,
        course: str,
        department: str,
        host_establishment: str,
        shift_type: StudentShiftType,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO users (email, password_hash, role) VALUES (%s, %s, %s)",
                (email, password_hash, Role.STUDENT.value),
            )
            user_id = int(cur.lastrowid)
            cur.execute(
                """
                INSERT INTO students (
                    user_id, student_number, first_name, middle_name, last_name,
                    course, department, host_establishment, shift_type
                )
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s)
                """,
                (
                    user_id,
                    student_number,
                    first_name,
                    middle_name,
                    last_name,
                    course,
                    department,
                    host_establishment,
                    shift_type.value,
                ),
            )
            return int(cur.lastrowid)

    def set_accepted(self, student_id: int, *, ojt_advisor_id: Optional[int] = None) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE students
                SET is_accepted=1, ojt_advisor_id=COALESCE(%s, ojt_advisor_id)
                WHERE student_id=%s
                """,
                (ojt_advisor_id, int(student_id)),
            )
            return cur.rowcount > 0

    def list_students(
        self,
        *,
        department: Optional[str] = None,
        is_accepted: Optional[bool] = None,
        is_active: Optional[bool] = None,
    ) -> Sequence[Student]:
        clauses: list[str] = []
        params: list[object] = []
        if department:
            clauses.append("department=%s")
            params.append(department)
        if is_accepted is not None:
            clauses.append("is_accepted=%s")
            params.append(1 if is_accepted else 0)
        if is_active is not None:
            clauses.append("is_active=%s")
            params.append(1 if is_active else 0)

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} {where} ORDER BY last_name, first_name", tuple(params))
            return [_to_student(r) for r in fetchall(cur)]
