from __future__ import annotations

from flask import Flask, jsonify

from ..common.datetime_utils import now_utc, today_key
from ..common.web import admin_required, current_user, json_body, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance/today", methods=["GET"], endpoint="attendance_today")
    @login_required
    def attendance_today():
        user = current_user()
        now = now_utc()
        items = container.attendance_service.list_today(actor_id=user.user_id, actor_role=user.role, now=now)
        return jsonify({"date": today_key(now), "items": [v.to_dict() for v in items]})

    @app.route("/api/attendance/<date_key>", methods=["GET"], endpoint="attendance_by_date")
    @admin_required
    def attendance_by_date(date_key: str):
        roster = container.report_service.daily_roster(date_key)
        return jsonify({"date": roster.date_key, "items": [v.to_dict() for v in roster.items]})

    @app.route("/api/attendance", methods=["POST"], endpoint="attendance_checkin")
    @login_required
    def attendance_checkin():
        user = current_user()
        data = json_body()
        view = container.attendance_service.check_in(
            user_id=user.user_id,
            user_name=user.name,
            latitude=data.get("latitude"),
            longitude=data.get("longitude"),
            accuracy=data.get("accuracy"),
            location_label=data.get("locationLabel"),
            photo_url=data.get("photoUrl"),
            photo_public_id=data.get("photoPublicId"),
        )
        return jsonify(view.to_dict()), 201

    @app.route("/api/attendance/<int:attendance_id>", methods=["DELETE"], endpoint="attendance_delete")
    @login_required
    def attendance_delete(attendance_id: int):
        user = current_user()
        container.attendance_service.delete_record(attendance_id, actor_id=user.user_id, actor_role=user.role)
        return "", 204

    @app.route("/api/admin/attendance/<int:attendance_id>/flag", methods=["PUT"], endpoint="attendance_flag")
    @admin_required
    def attendance_flag(attendance_id: int):
        data = json_body()
        view = container.attendance_service.set_flag(attendance_id, data.get("comment"))
        return jsonify(view.to_dict())
