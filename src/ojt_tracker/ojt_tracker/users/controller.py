from __future__ import annotations

from flask import Flask, jsonify, request, session

from ..common.web import api_view, login_required
from ..container import Container
from ..students.model import NewStudent


def register(app: Flask, container: Container) -> None:
    @app.route("/api/auth/login", methods=["POST"], endpoint="login")
    @api_view("Login failed")
    def login():
        body = request.get_json(silent=True) or {}
        user = container.auth_service.authenticate(body.get("email", ""), body.get("password", ""))

        session.clear()
        session["user_id"] = user.user_id
        session["email"] = user.email
        session["role"] = user.role.value
        if user.student_id is not None:
            session["student_id"] = user.student_id

        return jsonify(
            {
                "success": True,
                "user": {"user_id": user.user_id, "email": user.email, "role": user.role.value, "student_id": user.student_id},
            }
        )

    @app.route("/api/auth/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return jsonify({"success": True})

    @app.route("/api/auth/me", methods=["GET"], endpoint="me")
    @login_required
    def me():
        return jsonify(
            {
                "user_id": session["user_id"],
                "email": session.get("email"),
                "role": session.get("role"),
                "student_id": session.get("student_id"),
            }
        )

    @app.route("/api/auth/register", methods=["POST"], endpoint="register_student")
    @api_view("Registration failed")
    def register_student():
        body = request.get_json(silent=True) or {}
        form = NewStudent(
            email=body.get("email", ""),
            password=body.get("password", ""),
            student_number=body.get("studentId", ""),
            first_name=body.get("firstName", ""),
            middle_name=body.get("middleName"),
            last_name=body.get("lastName", ""),
            course=body.get("course", ""),
            department=body.get("department", ""),
            host_establishment=body.get("hostEstablishment", ""),
            shift_type=body.get("shiftType") or "regular",
        )
        student_id = container.student_service.register(form)
        return (
            jsonify(
                {
                    "success": True,
                    "message": "Registration submitted. Wait for your OJT advisor to approve your account.",
                    "student_id": student_id,
                }
            ),
            201,
        )
