from __future__ import annotations

from flask import Flask, jsonify, session

from ..common.web import admin_required, current_user_id, json_body, login_required
from ..container import Container
from .model import User


def _user_json(u: User) -> dict:
    return {
        "id": u.user_id,
        "name": u.display_name,
        "email": u.email,
        "role": u.role.value,
        "hourly_rate": u.hourly_rate,
        "avatar_url": u.avatar_url,
        "created_at": u.created_at.isoformat() if u.created_at else None,
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/auth/login", methods=["POST"], endpoint="login")
    def login():
        data = json_body()
        s_user = container.auth_service.authenticate(str(data.get("email", "")), str(data.get("password", "")))

        session.clear()
        session["user_id"] = s_user.user_id
        session["name"] = s_user.name
        session["role"] = s_user.role.value
        return jsonify({"success": True, "user": _user_json(container.employee_service.get_user(s_user.user_id))})

    @app.route("/api/auth/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return jsonify({"success": True})

    @app.route("/api/auth/me", methods=["GET"], endpoint="me")
    @login_required
    def me():
        return jsonify({"success": True, "user": _user_json(container.employee_service.get_user(current_user_id()))})

    @app.route("/api/admin/employees", methods=["GET"], endpoint="list_employees")
    @admin_required
    def list_employees():
        employees = container.employee_service.list_employees()
        return jsonify({"success": True, "employees": [_user_json(u) for u in employees]})

    @app.route("/api/admin/employees", methods=["POST"], endpoint="create_employee")
    @admin_required
    def create_employee():
        data = json_body()
        user = container.employee_service.create_employee(
            email=data.get("email", ""),
            password=data.get("password", ""),
            full_name=data.get("name", ""),
            hourly_rate=data.get("hourly_rate", 0),
        )
        return jsonify({"success": True, "employee": _user_json(user)}), 201

    @app.route("/api/admin/employees/<int:user_id>", methods=["PATCH"], endpoint="update_employee")
    @admin_required
    def update_employee(user_id: int):
        data = json_body()
        user = container.employee_service.update_employee(
            user_id,
            full_name=data.get("name"),
            hourly_rate=data.get("hourly_rate"),
        )
        return jsonify({"success": True, "employee": _user_json(user)})

    @app.route("/api/admin/employees/<int:user_id>", methods=["DELETE"], endpoint="delete_employee")
    @admin_required
    def delete_employee(user_id: int):
        container.employee_service.delete_employee(user_id)
        return jsonify({"success": True})
