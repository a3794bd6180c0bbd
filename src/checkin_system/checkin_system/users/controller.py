from __future__ import annotations

from flask import Flask, jsonify, session

from ..common.web import admin_required, current_user, json_body, login_required
from ..container import Container
from .service import SessionUser


def _start_session(s_user: SessionUser) -> None:
    session.clear()
    session["user_id"] = s_user.user_id
    session["name"] = s_user.name
    session["email"] = s_user.email
    session["role"] = s_user.role.value


def register(app: Flask, container: Container) -> None:
    @app.route("/api/signup", methods=["POST"], endpoint="signup")
    def signup():
        data = json_body()
        s_user = container.user_service.register(
            data.get("name"),
            data.get("email"),
            data.get("password"),
            role=data.get("role") or "user",
            invite_code=data.get("inviteCode"),
        )
        _start_session(s_user)
        return jsonify({"user": s_user.to_dict()}), 201

    @app.route("/api/login", methods=["POST"], endpoint="login")
    def login():
        data = json_body()
        s_user = container.auth_service.authenticate(data.get("email", ""), data.get("password", ""))
        _start_session(s_user)
        return jsonify({"user": s_user.to_dict()})

    @app.route("/api/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return jsonify({"ok": True})

    @app.route("/api/me", methods=["GET"], endpoint="me")
    @login_required
    def me():
        return jsonify({"user": current_user().to_dict()})

    @app.route("/api/admin/users", methods=["GET"], endpoint="admin_users")
    @admin_required
    def admin_users():
        users = container.user_service.list_roster()
        return jsonify({"users": [u.to_public_dict() for u in users]})
