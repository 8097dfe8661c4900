from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import RequestStatus, StudentShiftType
from ..shifts.model import ShiftConfig
from .model import ScheduleChangeRequest


class RequestRepository(Protocol):
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
        raise NotImplementedError

    def get_schedule_change(self, *, request_id: int) -> Optional[ScheduleChangeRequest]:
        raise NotImplementedError

    def list_schedule_changes(
        self,
        *,
        student_id: Optional[int] = None,
        department: Optional[str] = None,
        status: Optional[RequestStatus] = None,
        limit: int = 200,
    ) -> Sequence[ScheduleChangeRequest]:
        raise NotImplementedError

    def decide_schedule_change(
        self,
        *,
        request_id: int,
        status: RequestStatus,
        reviewed_by: int,
        comments: Optional[str] = None,
    ) -> bool:
        """Move a PENDING request to ``status``; False when it is not pending."""

        raise NotImplementedError

    def approve_schedule_change(
        self,
        *,
        request_id: int,
        reviewed_by: int,
        comments: Optional[str] = None,
    ) -> bool:
        """Approve a PENDING request and give the student its shift, in one transaction.

        False when the request is not pending; raises ``NotFoundError`` (nothing
        written) when the student no longer exists.
        """

        raise NotImplementedError
