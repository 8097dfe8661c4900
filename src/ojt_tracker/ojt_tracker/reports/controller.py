from __future__ import annotations

from flask import Flask, jsonify, render_template

from ..common.datetime_utils import now_local
from ..common.web import api_view, date_arg, ensure_can_view_student, int_arg, login_required
from ..container import Container
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    def _month_args() -> tuple[int, int]:
        today = now_local(app.config.get("TIMEZONE")).date()
        return int_arg("year") or today.year, int_arg("month") or today.month

    def _load_dtr(student_id: int):
        ensure_can_view_student(student_id)
        student = container.student_service.get(student_id)
        year, month = _month_args()
        return container.dtr_service.build_month(student, year=year, month=month)

    @app.route("/students/<int:student_id>/dtr", methods=["GET"], endpoint="dtr_page")
    @login_required
    @api_view("Failed to build DTR")
    def dtr_page(student_id: int):
        return render_template("dtr.html", dtr=_load_dtr(student_id))

    @app.route("/api/students/<int:student_id>/dtr", methods=["GET"], endpoint="dtr_json")
    @login_required
    @api_view("Failed to build DTR")
    def dtr_json(student_id: int):
        return jsonify(_load_dtr(student_id).to_dict())

    @app.route("/students/<int:student_id>/attendance.csv", methods=["GET"], endpoint="attendance_csv")
    @login_required
    @api_view("Failed to export attendance")
    def attendance_csv(student_id: int):
        ensure_can_view_student(student_id)
        start, end = date_arg("start"), date_arg("end")
        if not start or not end:
            raise ValidationError("Missing start/end parameters")

        student = container.student_service.get(student_id)
        csv_bytes = container.dtr_service.export_csv(student, start=start, end=end)
        filename = f"attendance_{student.student_number}_{start.strftime('%Y%m%d')}_{end.strftime('%Y%m%d')}.csv"
        return app.response_class(
            csv_bytes,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )
