from __future__ import annotations

import logging

from flask import Flask, jsonify, request, session

from ..common.datetime_utils import month_bounds, now_local
from ..common.web import (
    api_view,
    current_role,
    date_arg,
    ensure_can_view_student,
    int_arg,
    login_required,
    reviewer_required,
    student_required,
)
from ..core.enums import ClockAction, Role
from ..core.exceptions import ValidationError
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance", methods=["POST"], endpoint="clock_event")
    @student_required
    @api_view("Failed to record attendance")
    def clock_event():
        body = request.get_json(silent=True) or {}
        student = container.student_service.require_clock_eligible(int(session["student_id"]))

        if "timestamp" in body:
            # Server time is authoritative.
            logger.debug("Ignoring client timestamp from student %s", student.student_id)

        action = ClockAction.parse(body.get("action"))
        record = container.ledger.record_clock_event(
            student_id=student.student_id,
            action=action,
            proof_image=body.get("imageData"),
            shift_type=student.record_shift_type(),
            shift=student.active_shift(),
        )
        server_time = getattr(record, action.column)
        return jsonify(
            {
                "success": True,
                "attendance": record.to_dict(include_images=False),
                "serverTime": server_time.isoformat() if server_time else None,
            }
        )

    @app.route("/api/attendance", methods=["GET"], endpoint="attendance_list")
    @login_required
    @api_view("Failed to get attendance")
    def attendance_list():
        student_id = int_arg("studentId")
        if current_role() == Role.STUDENT:
            student_id = int(session["student_id"])
        elif student_id is not None:
            ensure_can_view_student(student_id)

        day = date_arg("date")
        start, end = date_arg("start"), date_arg("end")
        month, year = int_arg("month"), int_arg("year")

        if day:
            start = end = day
        elif month and year:
            start, end = month_bounds(year, month)
        elif start or end:
            if not (start and end):
                raise ValidationError("Both start and end are required")
        else:
            today = now_local(app.config.get("TIMEZONE")).date()
            start, end = month_bounds(today.year, today.month)

        records = container.ledger.get_records_for_period(start=start, end=end, student_id=student_id)
        include_images = request.args.get("includeImages") == "true"
        response = jsonify({"attendance": [r.to_dict(include_images=include_images) for r in records]})
        response.headers["Cache-Control"] = "private, max-age=30"
        return response

    @app.route("/api/attendance", methods=["PUT"], endpoint="attendance_update")
    @reviewer_required
    @api_view("Failed to update attendance")
    def attendance_update():
        body = request.get_json(silent=True) or {}
        updates = body.get("updates")
        try:
            attendance_id = int(body["attendanceId"])
        except (KeyError, TypeError, ValueError):
            attendance_id = None
        if attendance_id is None or not isinstance(updates, dict):
            raise ValidationError("attendanceId and updates are required")

        record = container.ledger.update_record_fields(attendance_id, updates)
        return jsonify({"success": True, "attendance": record.to_dict(include_images=False)})
