from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.web import api_view, bool_arg, current_role, reviewer_required
from ..container import Container
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    @app.route("/api/students", methods=["GET"], endpoint="students_list")
    @reviewer_required
    @api_view("Failed to get students")
    def students_list():
        students = container.student_service.list_students(
            department=request.args.get("department") or None,
            is_accepted=bool_arg("isAccepted"),
            is_active=bool_arg("isActive"),
        )
        return jsonify({"students": [s.to_dict() for s in students]})

    @app.route("/api/students/<int:student_id>/accept", methods=["PUT"], endpoint="student_accept")
    @reviewer_required
    @api_view("Failed to update student")
    def student_accept(student_id: int):
        body = request.get_json(silent=True) or {}
        try:
            advisor_id = int(body["ojtAdvisorId"]) if body.get("ojtAdvisorId") else None
        except (TypeError, ValueError):
            raise ValidationError("ojtAdvisorId must be an integer")
        student = container.student_service.accept(
            current_role=current_role(),
            student_id=student_id,
            ojt_advisor_id=advisor_id,
        )
        return jsonify({"success": True, "message": "Student accepted successfully", "student": student.to_dict()})
