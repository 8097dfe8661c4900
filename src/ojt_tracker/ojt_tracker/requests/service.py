from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..common.validators import require_non_empty
from ..core.constants import DEFAULT_LIST_LIMIT
from ..core.enums import REVIEWER_ROLES, RequestStatus, Role, StudentShiftType
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..shifts.model import ShiftConfig
from ..students.service import StudentService
from .model import ScheduleChangeRequest
from .repository import RequestRepository

logger = logging.getLogger(__name__)


class RequestService:
    """Use cases: students ask for a different shift, reviewers decide."""

    def __init__(self, requests: RequestRepository, students: StudentService):
        self._requests = requests
        self._students = students

    def create_schedule_change(
        self,
        *,
        current_role: Role,
        student_id: int,
        requested_shift_type: str,
        requested_shift_config: Optional[dict],
        reason: str,
    ) -> int:
        if current_role != Role.STUDENT:
            raise AuthorizationError("Only students can request a schedule change")

        reason = require_non_empty(reason, "Reason")
        try:
            shift_type = StudentShiftType(requested_shift_type)
        except ValueError:
            raise ValidationError(f"Unknown shift type: {requested_shift_type!r}")

        config = None
        if requested_shift_config:
            config = ShiftConfig.from_dict(requested_shift_config, default_type=shift_type)
        if shift_type == StudentShiftType.CUSTOM and (config is None or not config.windows()):
            raise ValidationError("A custom shift needs at least one start/end pair")

        student = self._students.get(student_id)
        request_id = self._requests.create_schedule_change(
            student_id=student.student_id,
            department=student.department,
            current_shift_type=student.shift_type,
            requested_shift_type=shift_type,
            requested_shift_config=config,
            reason=reason,
        )
        logger.info("Schedule change request %s from student %s -> %s", request_id, student.student_id, shift_type.value)
        return request_id

    def list_requests(
        self,
        *,
        student_id: Optional[int] = None,
        department: Optional[str] = None,
        status: Optional[str] = None,
        limit: int = DEFAULT_LIST_LIMIT,
    ) -> Sequence[ScheduleChangeRequest]:
        status_enum = None
        if status:
            try:
                status_enum = RequestStatus(status)
            except ValueError:
                raise ValidationError(f"Unknown status: {status!r}")
        return self._requests.list_schedule_changes(
            student_id=int(student_id) if student_id is not None else None,
            department=department,
            status=status_enum,
            limit=limit,
        )

    def _get_pending(self, request_id: int) -> ScheduleChangeRequest:
        req = self._requests.get_schedule_change(request_id=int(request_id))
        if not req:
            raise NotFoundError("Request not found")
        if req.status != RequestStatus.PENDING:
            raise ValidationError("Request has already been reviewed")
        return req

    def approve_schedule_change(
        self,
        *,
        current_role: Role,
        reviewer_user_id: int,
        request_id: int,
        comments: str = "",
    ) -> None:
        if current_role not in REVIEWER_ROLES:
            raise AuthorizationError("You are not allowed to review requests")

        req = self._get_pending(request_id)
        student = self._students.get(req.student_id)
        approved = self._requests.approve_schedule_change(
            request_id=req.request_id,
            reviewed_by=int(reviewer_user_id),
            comments=(comments or "").strip() or None,
        )
        if not approved:
            raise ValidationError("Request has already been reviewed")

        logger.info(
            "Schedule change request %s approved by user %s; student %s now on %s",
            req.request_id,
            reviewer_user_id,
            student.student_id,
            req.requested_shift_type.value,
        )

    def reject_schedule_change(
        self,
        *,
        current_role: Role,
        reviewer_user_id: int,
        request_id: int,
        comments: str = "",
    ) -> None:
        if current_role not in REVIEWER_ROLES:
            raise AuthorizationError("You are not allowed to review requests")

        req = self._get_pending(request_id)
        decided = self._requests.decide_schedule_change(
            request_id=req.request_id,
            status=RequestStatus.REJECTED,
            reviewed_by=int(reviewer_user_id),
            comments=(comments or "").strip() or None,
        )
        if not decided:
            raise ValidationError("Request has already been reviewed")
        logger.info("Schedule change request %s rejected by user %s", req.request_id, reviewer_user_id)
