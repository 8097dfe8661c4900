from __future__ import annotations

from dataclasses import dataclass

from .attendance.factory import AttendanceStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceLedger
from .core.constants import DEFAULT_LATE_GRACE_MINUTES
from .database.connection import DBConfig, DatabaseConnection
from .reports.service import DtrService
from .requests.mysql_request_repository import MySQLRequestRepository
from .requests.service import RequestService
from .students.mysql_student_repository import MySQLStudentRepository
from .students.service import StudentService
from .users.mysql_user_repository import MySQLUserRepository
from .users.service import AuthService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    users_repo: MySQLUserRepository
    students_repo: MySQLStudentRepository
    attendance_repo: MySQLAttendanceRepository
    requests_repo: MySQLRequestRepository

    auth_service: AuthService
    student_service: StudentService
    ledger: AttendanceLedger
    request_service: RequestService
    dtr_service: DtrService


def build_container(
    *,
    db_config: dict,
    timezone: str | None = None,
    late_grace_minutes: int = DEFAULT_LATE_GRACE_MINUTES,
) -> Container:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
        pool_size=int(db_config.get("pool_size", 5)),
    )
    conn = DatabaseConnection.get_instance(config)

    users_repo = MySQLUserRepository(conn)
    students_repo = MySQLStudentRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    requests_repo = MySQLRequestRepository(conn)

    auth_service = AuthService(users_repo, students_repo)
    student_service = StudentService(students_repo, users_repo)
    ledger = AttendanceLedger(
        attendance_repo,
        strategy_factory=AttendanceStrategyFactory(grace_minutes=int(late_grace_minutes)),
        shift_lookup=student_service.active_shift,
        timezone=timezone,
    )
    request_service = RequestService(requests_repo, student_service)
    dtr_service = DtrService(ledger)

    return Container(
        conn=conn,
        users_repo=users_repo,
        students_repo=students_repo,
        attendance_repo=attendance_repo,
        requests_repo=requests_repo,
        auth_service=auth_service,
        student_service=student_service,
        ledger=ledger,
        request_service=request_service,
        dtr_service=dtr_service,
    )
