from __future__ import annotations

import logging
from typing import Optional, Sequence

from werkzeug.security import generate_password_hash

from ..common.validators import require_email, require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import REVIEWER_ROLES, Role, StudentShiftType
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..shifts.model import ShiftConfig
from ..users.repository import UserRepository
from .model import NewStudent, Student
from .repository import StudentRepository

logger = logging.getLogger(__name__)


class StudentService:
    """Use cases: registration, approval and the clock-in gate."""

    def __init__(self, students: StudentRepository, users: UserRepository):
        self._students = students
        self._users = users

    def get(self, student_id: int) -> Student:
        student = self._students.get_by_id(int(student_id))
        if not student:
            raise NotFoundError("Student not found")
        return student

    def register(self, form: NewStudent) -> int:
        email = require_email(form.email)
        require_min_length(form.password, "Password", MIN_PASSWORD_LENGTH)
        student_number = require_non_empty(form.student_number, "Student ID")
        first_name = require_non_empty(form.first_name, "First name")
        last_name = require_non_empty(form.last_name, "Last name")
        course = require_non_empty(form.course, "Course")
        department = require_non_empty(form.department, "Department")
        host = require_non_empty(form.host_establishment, "Host establishment")
        try:
            shift_type = StudentShiftType(form.shift_type)
        except ValueError:
            raise ValidationError(f"Unknown shift type: {form.shift_type!r}")

        if self._users.get_by_email(email):
            raise ValidationError("Email is already registered")
        if self._students.get_by_student_number(student_number):
            raise ValidationError("Student ID is already registered")

        student_id = self._students.create_with_user(
            email=email,
            password_hash=generate_password_hash(form.password),
            student_number=student_number,
            first_name=first_name,
            middle_name=(form.middle_name or "").strip() or None,
            last_name=last_name,
            course=course,
            department=department,
            host_establishment=host,
            shift_type=shift_type,
        )
        logger.info("Registered student %s (%s), pending approval", student_id, student_number)
        return student_id

    def accept(self, *, current_role: Role, student_id: int, ojt_advisor_id: Optional[int] = None) -> Student:
        if current_role not in REVIEWER_ROLES:
            raise AuthorizationError("You are not allowed to approve students")

        student = self.get(student_id)
        if not self._students.set_accepted(student.student_id, ojt_advisor_id=ojt_advisor_id):
            raise ValidationError("Approving the student failed")

        logger.info("Student %s accepted by %s", student.student_id, current_role.value)
        return self.get(student.student_id)

    def require_clock_eligible(self, student_id: int) -> Student:
        """Gate for clock actions: the student must exist, be active and accepted."""
        student = self.get(student_id)
        if not student.is_active:
            raise AuthorizationError("Student account is inactive")
        if not student.is_accepted:
            raise AuthorizationError("Your registration is still pending approval")
        return student

    def active_shift(self, student_id: int) -> Optional[ShiftConfig]:
        student = self._students.get_by_id(int(student_id))
        return student.active_shift() if student else None

    def list_students(
        self,
        *,
        department: Optional[str] = None,
        is_accepted: Optional[bool] = None,
        is_active: Optional[bool] = None,
    ) -> Sequence[Student]:
        return self._students.list_students(department=department, is_accepted=is_accepted, is_active=is_active)
