from __future__ import annotations

from datetime import time

import pytest

from src.ojt_tracker.ojt_tracker.core.enums import RequestStatus, Role, StudentShiftType
from src.ojt_tracker.ojt_tracker.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from src.ojt_tracker.ojt_tracker.requests.service import RequestService
from src.ojt_tracker.ojt_tracker.students.service import StudentService


@pytest.fixture
def setup(students_repo, users_repo, requests_repo):
    student = students_repo.add()
    service = RequestService(requests_repo, StudentService(students_repo, users_repo))
    return service, student


def test_student_requests_graveyard_and_reviewer_approves(setup, students_repo, requests_repo):
    service, student = setup

    rid = service.create_schedule_change(
        current_role=Role.STUDENT,
        student_id=student.student_id,
        requested_shift_type="graveyard",
        requested_shift_config=None,
        reason="Assigned to the night operations team",
    )
    req = requests_repo.get_schedule_change(request_id=rid)
    assert req.status == RequestStatus.PENDING
    assert req.current_shift_type == StudentShiftType.REGULAR
    assert req.department == student.department

    service.approve_schedule_change(current_role=Role.ADMIN, reviewer_user_id=99, request_id=rid, comments=" ok ")

    req = requests_repo.get_schedule_change(request_id=rid)
    assert req.status == RequestStatus.APPROVED
    assert req.reviewed_by == 99
    assert req.comments == "ok"
    assert students_repo.get_by_id(student.student_id).shift_type == StudentShiftType.GRAVEYARD


def test_approved_custom_shift_becomes_active(setup, students_repo):
    service, student = setup

    rid = service.create_schedule_change(
        current_role=Role.STUDENT,
        student_id=student.student_id,
        requested_shift_type="custom",
        requested_shift_config={"morningStart": "07:00", "morningEnd": "11:00"},
        reason="Class schedule conflict",
    )
    service.approve_schedule_change(current_role=Role.DEPARTMENT, reviewer_user_id=5, request_id=rid)

    updated = students_repo.get_by_id(student.student_id)
    assert updated.shift_type == StudentShiftType.CUSTOM
    assert updated.active_shift().morning_start == time(7)
    assert updated.active_shift().afternoon_start is None


def test_reject_leaves_shift_untouched(setup, students_repo, requests_repo):
    service, student = setup
    rid = service.create_schedule_change(
        current_role=Role.STUDENT,
        student_id=student.student_id,
        requested_shift_type="graveyard",
        requested_shift_config=None,
        reason="Night shift",
    )

    service.reject_schedule_change(current_role=Role.DEPARTMENT, reviewer_user_id=5, request_id=rid, comments="No slots")

    assert requests_repo.get_schedule_change(request_id=rid).status == RequestStatus.REJECTED
    assert students_repo.get_by_id(student.student_id).shift_type == StudentShiftType.REGULAR


def test_request_can_only_be_reviewed_once(setup):
    service, student = setup
    rid = service.create_schedule_change(
        current_role=Role.STUDENT,
        student_id=student.student_id,
        requested_shift_type="graveyard",
        requested_shift_config=None,
        reason="Night shift",
    )
    service.reject_schedule_change(current_role=Role.ADMIN, reviewer_user_id=1, request_id=rid)

    with pytest.raises(ValidationError):
        service.approve_schedule_change(current_role=Role.ADMIN, reviewer_user_id=1, request_id=rid)
    with pytest.raises(NotFoundError):
        service.approve_schedule_change(current_role=Role.ADMIN, reviewer_user_id=1, request_id=404)


def test_create_validation(setup):
    service, student = setup
    base = dict(student_id=student.student_id, requested_shift_config=None, reason="Because")

    with pytest.raises(AuthorizationError):
        service.create_schedule_change(current_role=Role.ADMIN, requested_shift_type="graveyard", **base)
    with pytest.raises(ValidationError):
        service.create_schedule_change(current_role=Role.STUDENT, requested_shift_type="weekend", **base)
    with pytest.raises(ValidationError):
        service.create_schedule_change(current_role=Role.STUDENT, requested_shift_type="custom", **base)
    with pytest.raises(ValidationError):
        service.create_schedule_change(
            current_role=Role.STUDENT,
            student_id=student.student_id,
            requested_shift_type="graveyard",
            requested_shift_config=None,
            reason="   ",
        )


def test_students_cannot_review(setup):
    service, student = setup
    rid = service.create_schedule_change(
        current_role=Role.STUDENT,
        student_id=student.student_id,
        requested_shift_type="graveyard",
        requested_shift_config=None,
        reason="Night shift",
    )

    with pytest.raises(AuthorizationError):
        service.approve_schedule_change(current_role=Role.STUDENT, reviewer_user_id=1, request_id=rid)


def test_list_requests_filters_by_status(setup):
    service, student = setup
    for _ in range(2):
        service.create_schedule_change(
            current_role=Role.STUDENT,
            student_id=student.student_id,
            requested_shift_type="graveyard",
            requested_shift_config=None,
            reason="Night shift",
        )
    service.approve_schedule_change(current_role=Role.ADMIN, reviewer_user_id=1, request_id=1)

    assert len(service.list_requests(student_id=student.student_id)) == 2
    assert [r.request_id for r in service.list_requests(status="pending")] == [2]
    with pytest.raises(ValidationError):
        service.list_requests(status="maybe")


def test_approving_the_current_shift_still_succeeds(setup, students_repo, requests_repo):
    service, student = setup
    rid = service.create_schedule_change(
        current_role=Role.STUDENT,
        student_id=student.student_id,
        requested_shift_type="regular",
        requested_shift_config=None,
        reason="Confirm regular hours",
    )

    service.approve_schedule_change(current_role=Role.ADMIN, reviewer_user_id=1, request_id=rid)

    assert requests_repo.get_schedule_change(request_id=rid).status == RequestStatus.APPROVED
    assert students_repo.get_by_id(student.student_id).shift_type == StudentShiftType.REGULAR


def test_approval_for_missing_student_leaves_request_pending(setup, students_repo, requests_repo):
    service, student = setup
    rid = service.create_schedule_change(
        current_role=Role.STUDENT,
        student_id=student.student_id,
        requested_shift_type="graveyard",
        requested_shift_config=None,
        reason="Night shift",
    )
    del students_repo.students[student.student_id]

    with pytest.raises(NotFoundError):
        service.approve_schedule_change(current_role=Role.ADMIN, reviewer_user_id=1, request_id=rid)

    assert requests_repo.get_schedule_change(request_id=rid).status == RequestStatus.PENDING
