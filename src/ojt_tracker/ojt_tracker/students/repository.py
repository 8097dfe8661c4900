from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import StudentShiftType
from .model import Student


class StudentRepository(Protocol):
    """Repository interface for Student.

    Note (DIP): services depend on this interface, not on a concrete DB.
    """

    def get_by_id(self, student_id: int) -> Optional[Student]:
        raise NotImplementedError

    def get_by_user_id(self, user_id: int) -> Optional[Student]:
        raise NotImplementedError

    def get_by_student_number(self, student_number: str) -> Optional[Student]:
        raise NotImplementedError

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
        """Insert the login user and the student in one transaction; returns student_id."""

        raise NotImplementedError

    def set_accepted(self, student_id: int, *, ojt_advisor_id: Optional[int] = None) -> bool:
        raise NotImplementedError

    def list_students(
        self,
        *,
        department: Optional[str] = None,
        is_accepted: Optional[bool] = None,
        is_active: Optional[bool] = None,
    ) -> Sequence[Student]:
        raise NotImplementedError
