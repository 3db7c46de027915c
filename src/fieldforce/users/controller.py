from __future__ import annotations

from datetime import timedelta
from typing import Optional

from flask import Flask, jsonify, session

from ..common.web import admin_required, current_viewer, json_body, login_required
from ..container import Container
from ..core.constants import DEFAULT_SESSION_DAYS
from ..core.enums import Role
from ..core.exceptions import ValidationError


def _role_arg(value, default: Role) -> Role:
    if value in (None, ""):
        return default
    try:
        return Role(str(value))
    except ValueError:
        raise ValidationError("Invalid role") from None


def _branch_arg(value) -> Optional[int]:
    if value in (None, ""):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError("Invalid branch") from None


def register(app: Flask, container: Container) -> None:
    app.permanent_session_lifetime = timedelta(days=DEFAULT_SESSION_DAYS)

    @app.route("/api/login", methods=["POST"], endpoint="login")
    def login():
        data = json_body()
        s_user = container.auth_service.authenticate(data.get("username", ""), data.get("password", ""))

        session.clear()
        session.permanent = bool(data.get("remember"))
        session["user_id"] = s_user.user_id
        session["name"] = s_user.full_name
        session["role"] = s_user.role.value
        session["branch_id"] = s_user.branch_id
        session["branch_name"] = s_user.branch_name

        return jsonify({"success": True, "user": _session_user()})

    @app.route("/api/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return jsonify({"success": True})

    @app.route("/api/me", methods=["GET"], endpoint="me")
    @login_required
    def me():
        return jsonify({"success": True, "user": _session_user()})

    @app.route("/api/register", methods=["POST"], endpoint="register")
    def register_account():
        data = json_body()
        user = container.user_service.register(
            full_name=data.get("full_name", ""),
            username=data.get("username", ""),
            password=data.get("password", ""),
            role=_role_arg(data.get("role"), Role.OFFICER),
            branch_id=_branch_arg(data.get("branch_id")),
        )
        return jsonify({"success": True, "user": user.as_profile()}), 201

    @app.route("/api/me/profile", methods=["GET"], endpoint="profile")
    @login_required
    def profile():
        user = container.users_repo.get_by_id(current_viewer().user_id)
        if not user:
            raise ValidationError("User does not exist")
        return jsonify({"success": True, "user": user.as_profile()})

    @app.route("/api/me/profile", methods=["PUT"], endpoint="profile_update")
    @login_required
    def profile_update():
        data = json_body()
        user = container.user_service.update_profile(
            current_viewer(),
            full_name=data.get("full_name", ""),
            phone_number=data.get("phone_number"),
            bio=data.get("bio"),
            staff_pin=data.get("staff_pin"),
        )
        session["name"] = user.full_name
        return jsonify({"success": True, "user": user.as_profile()})

    @app.route("/api/users", methods=["POST"], endpoint="users_create")
    @admin_required
    def users_create():
        data = json_body()
        user = container.user_service.create_user(
            current_viewer(),
            full_name=data.get("full_name", ""),
            username=data.get("username", ""),
            password=data.get("password", ""),
            role=_role_arg(data.get("role"), Role.OFFICER),
            branch_id=_branch_arg(data.get("branch_id")),
            staff_pin=data.get("staff_pin"),
        )
        return jsonify({"success": True, "user": user.as_profile()}), 201

    @app.route("/api/users/<int:user_id>", methods=["DELETE"], endpoint="users_delete")
    @admin_required
    def users_delete(user_id: int):
        container.user_service.remove_user(current_viewer(), user_id)
        return jsonify({"success": True})

    def _session_user() -> dict:
        viewer = current_viewer()
        return {
            "user_id": viewer.user_id,
            "full_name": session.get("name"),
            "role": viewer.role.value,
            "branch_id": viewer.branch_id,
            "branch_name": session.get("branch_name"),
        }
