from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import RequestStatus, StudentShiftType
from ..shifts.model import ShiftConfig


@dataclass(frozen=True)
class ScheduleChangeRequest:
    request_id: int
    student_id: int
    department: str
    current_shift_type: StudentShiftType
    requested_shift_type: StudentShiftType
    requested_shift_config: Optional[ShiftConfig]
    reason: str
    status: RequestStatus
    requested_at: datetime
    reviewed_at: Optional[datetime] = None
    reviewed_by: Optional[int] = None
    comments: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "request_id": self.request_id,
            "student_id": self.student_id,
            "department": self.department,
            "current_shift_type": self.current_shift_type.value,
            "requested_shift_type": self.requested_shift_type.value,
            "requested_shift_config": self.requested_shift_config.to_dict() if self.requested_shift_config else None,
            "reason": self.reason,
            "status": self.status.value,
            "requested_at": self.requested_at.isoformat() if self.requested_at else None,
            "reviewed_at": self.reviewed_at.isoformat() if self.reviewed_at else None,
            "reviewed_by": self.reviewed_by,
            "comments": self.comments,
        }
