from __future__ import annotations

from flask import Flask, jsonify, request, session

from ..common.web import api_view, current_role, int_arg, login_required, reviewer_required, student_required
from ..container import Container
from ..core.enums import RequestStatus, Role
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    @app.route("/api/schedule-requests", methods=["GET"], endpoint="schedule_requests_list")
    @login_required
    @api_view("Failed to fetch requests")
    def schedule_requests_list():
        student_id = int_arg("studentId")
        if current_role() == Role.STUDENT:
            student_id = int(session["student_id"])

        requests_ = container.request_service.list_requests(
            student_id=student_id,
            department=request.args.get("department") or None,
            status=request.args.get("status") or None,
        )
        return jsonify({"success": True, "requests": [r.to_dict() for r in requests_]})

    @app.route("/api/schedule-requests", methods=["POST"], endpoint="schedule_request_create")
    @student_required
    @api_view("Failed to create request")
    def schedule_request_create():
        body = request.get_json(silent=True) or {}
        request_id = container.request_service.create_schedule_change(
            current_role=current_role(),
            student_id=int(session["student_id"]),
            requested_shift_type=body.get("requestedShiftType", ""),
            requested_shift_config=body.get("requestedShiftConfig"),
            reason=body.get("reason", ""),
        )
        return (
            jsonify({"success": True, "message": "Schedule change request submitted successfully", "request_id": request_id}),
            201,
        )

    @app.route("/api/schedule-requests/<int:request_id>", methods=["PUT"], endpoint="schedule_request_review")
    @reviewer_required
    @api_view("Failed to update request")
    def schedule_request_review(request_id: int):
        body = request.get_json(silent=True) or {}
        status = body.get("status")
        kwargs = dict(
            current_role=current_role(),
            reviewer_user_id=int(session["user_id"]),
            request_id=request_id,
            comments=body.get("comments") or "",
        )
        if status == RequestStatus.APPROVED.value:
            container.request_service.approve_schedule_change(**kwargs)
        elif status == RequestStatus.REJECTED.value:
            container.request_service.reject_schedule_change(**kwargs)
        else:
            raise ValidationError("Status must be 'approved' or 'rejected'")
        return jsonify({"success": True, "message": f"Schedule change request {status}"})
