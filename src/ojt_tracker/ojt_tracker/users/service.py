from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from werkzeug.security import check_password_hash

from ..core.enums import Role
from ..core.exceptions import AuthenticationError
from ..students.repository import StudentRepository
from .repository import UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """What we store into the Flask session after login."""

    user_id: int
    email: str
    role: Role
    student_id: Optional[int] = None


class AuthService:
    """Use case: authenticate user (login)."""

    def __init__(self, users: UserRepository, students: StudentRepository):
        self._users = users
        self._students = students

    def authenticate(self, email: str, password: str) -> SessionUser:
        user = self._users.get_by_email((email or "").strip().lower())
        if not user or not user.is_active:
            raise AuthenticationError("Invalid email or password")

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False

        if not ok:
            logger.info("Failed login for %s", user.email)
            raise AuthenticationError("Invalid email or password")

        student_id = None
        if user.role == Role.STUDENT:
            student = self._students.get_by_user_id(user.user_id)
            student_id = student.student_id if student else None

        return SessionUser(user_id=user.user_id, email=user.email, role=user.role, student_id=student_id)
