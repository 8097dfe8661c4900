from __future__ import annotations

from dataclasses import replace
from datetime import datetime

import pytest
from werkzeug.security import generate_password_hash

from src.ojt_tracker.ojt_tracker.attendance.model import AttendanceRecord
from src.ojt_tracker.ojt_tracker.attendance.service import AttendanceLedger
from src.ojt_tracker.ojt_tracker.core.enums import RequestStatus, Role, StudentShiftType
from src.ojt_tracker.ojt_tracker.core.exceptions import NotFoundError
from src.ojt_tracker.ojt_tracker.requests.model import ScheduleChangeRequest
from src.ojt_tracker.ojt_tracker.students.model import Student
from src.ojt_tracker.ojt_tracker.users.model import User


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


class InMemoryAttendanceRepo:
    def __init__(self):
        self._next_id = 1
        self.records: dict[int, AttendanceRecord] = {}

    def _apply_derived(self, record, derive):
        derived = derive(record)
        record = record.with_changes(
            total_hours=derived.total_hours,
            undertime_minutes=derived.undertime_minutes,
            status=derived.status,
        )
        self.records[record.attendance_id] = record
        return record

    def get_by_id(self, attendance_id):
        return self.records.get(int(attendance_id))

    def get_for_student_and_date(self, student_id, work_date):
        for r in self.records.values():
            if r.student_id == student_id and r.work_date == work_date:
                return r
        return None

    def list_for_period(self, *, start_date, end_date, student_id=None):
        rows = [
            r
            for r in self.records.values()
            if start_date <= r.work_date <= end_date and (student_id is None or r.student_id == student_id)
        ]
        return sorted(rows, key=lambda r: (r.work_date, r.student_id), reverse=True)

    def upsert_clock_event(self, *, student_id, work_date, shift_type, column, image_column, timestamp, image, derive):
        record = self.get_for_student_and_date(student_id, work_date)
        if record is None:
            record = AttendanceRecord(
                attendance_id=self._next_id,
                student_id=student_id,
                work_date=work_date,
                shift_type=shift_type,
            )
            self._next_id += 1
        record = record.with_changes(**{column: timestamp, image_column: image})
        return self._apply_derived(record, derive)

    def update_fields(self, *, attendance_id, changes, derive):
        record = self.records.get(int(attendance_id))
        if record is None:
            return None
        return self._apply_derived(record.with_changes(**changes), derive)

    def delete_before(self, cutoff):
        doomed = [k for k, r in self.records.items() if r.work_date < cutoff]
        for k in doomed:
            del self.records[k]
        return len(doomed)


class FakeUserRepo:
    def __init__(self):
        self._next_id = 1
        self.users: dict[int, User] = {}

    def add(self, email, password, role=Role.STUDENT, is_active=True) -> User:
        user = User(
            user_id=self._next_id,
            email=email,
            password_hash=generate_password_hash(password),
            role=role,
            is_active=is_active,
        )
        self._next_id += 1
        self.users[user.user_id] = user
        return user

    def get_by_id(self, user_id):
        return self.users.get(int(user_id))

    def get_by_email(self, email):
        for u in self.users.values():
            if u.email == email:
                return u
        return None


class FakeStudentRepo:
    def __init__(self, users: FakeUserRepo):
        self._users = users
        self._next_id = 1
        self.students: dict[int, Student] = {}

    def add(self, *, is_accepted=True, is_active=True, shift_type=StudentShiftType.REGULAR, shift_config=None) -> Student:
        n = self._next_id
        user = self._users.add(f"student{n}@school.edu", "secret123")
        student = Student(
            student_id=n,
            user_id=user.user_id,
            student_number=f"2024-{n:05d}",
            first_name="Juan",
            middle_name="Santos",
            last_name="Dela Cruz",
            course="BSIT",
            department="College of Computing",
            host_establishment="City Hall",
            shift_type=shift_type,
            shift_config=shift_config,
            is_accepted=is_accepted,
            is_active=is_active,
        )
        self._next_id += 1
        self.students[n] = student
        return student

    def get_by_id(self, student_id):
        return self.students.get(int(student_id))

    def get_by_user_id(self, user_id):
        for s in self.students.values():
            if s.user_id == user_id:
                return s
        return None

    def get_by_student_number(self, student_number):
        for s in self.students.values():
            if s.student_number == student_number:
                return s
        return None

    def create_with_user(self, *, email, password_hash, student_number, first_name, middle_name, last_name, course, department, host_establishment, shift_type):
        user = User(user_id=self._users._next_id, email=email, password_hash=password_hash, role=Role.STUDENT)
        self._users._next_id += 1
        self._users.users[user.user_id] = user

        n = self._next_id
        self._next_id += 1
        self.students[n] = Student(
            student_id=n,
            user_id=user.user_id,
            student_number=student_number,
            first_name=first_name,
            middle_name=middle_name,
            last_name=last_name,
            course=course,
            department=department,
            host_establishment=host_establishment,
            shift_type=shift_type,
        )
        return n

    def _replace(self, student_id, **changes) -> bool:
        student = self.students.get(int(student_id))
        if not student:
            return False
        self.students[student.student_id] = replace(student, **changes)
        return True

    def set_accepted(self, student_id, *, ojt_advisor_id=None):
        student = self.students.get(int(student_id))
        if not student:
            return False
        return self._replace(student_id, is_accepted=True, ojt_advisor_id=ojt_advisor_id or student.ojt_advisor_id)

    def list_students(self, *, department=None, is_accepted=None, is_active=None):
        return [
            s
            for s in self.students.values()
            if (department is None or s.department == department)
            and (is_accepted is None or s.is_accepted == is_accepted)
            and (is_active is None or s.is_active == is_active)
        ]


class FakeRequestRepo:
    def __init__(self, students: FakeStudentRepo):
        self._students = students
        self._next_id = 1
        self.requests: dict[int, ScheduleChangeRequest] = {}

    def create_schedule_change(self, *, student_id, department, current_shift_type, requested_shift_type, requested_shift_config, reason):
        rid = self._next_id
        self._next_id += 1
        self.requests[rid] = ScheduleChangeRequest(
            request_id=rid,
            student_id=student_id,
            department=department,
            current_shift_type=current_shift_type,
            requested_shift_type=requested_shift_type,
            requested_shift_config=requested_shift_config,
            reason=reason,
            status=RequestStatus.PENDING,
            requested_at=datetime(2025, 1, 6, 9, 0),
        )
        return rid

    def get_schedule_change(self, *, request_id):
        return self.requests.get(int(request_id))

    def list_schedule_changes(self, *, student_id=None, department=None, status=None, limit=200):
        rows = [
            r
            for r in self.requests.values()
            if (student_id is None or r.student_id == student_id)
            and (department is None or r.department == department)
            and (status is None or r.status == status)
        ]
        return rows[:limit]

    def decide_schedule_change(self, *, request_id, status, reviewed_by, comments=None):
        req = self.requests.get(int(request_id))
        if not req or req.status != RequestStatus.PENDING:
            return False
        self.requests[req.request_id] = replace(
            req,
            status=status,
            reviewed_by=reviewed_by,
            reviewed_at=datetime(2025, 1, 6, 10, 0),
            comments=comments,
        )
        return True

    def approve_schedule_change(self, *, request_id, reviewed_by, comments=None):
        req = self.requests.get(int(request_id))
        if not req or req.status != RequestStatus.PENDING:
            return False
        if not self._students._replace(
            req.student_id, shift_type=req.requested_shift_type, shift_config=req.requested_shift_config
        ):
            raise NotFoundError("Student not found")
        return self.decide_schedule_change(
            request_id=request_id, status=RequestStatus.APPROVED, reviewed_by=reviewed_by, comments=comments
        )


@pytest.fixture
def clock():
    return FakeClock(datetime(2025, 1, 6, 8, 0))


@pytest.fixture
def attendance_repo():
    return InMemoryAttendanceRepo()


@pytest.fixture
def ledger(attendance_repo, clock):
    return AttendanceLedger(attendance_repo, clock=clock)


@pytest.fixture
def users_repo():
    return FakeUserRepo()


@pytest.fixture
def students_repo(users_repo):
    return FakeStudentRepo(users_repo)


@pytest.fixture
def requests_repo(students_repo):
    return FakeRequestRepo(students_repo)
