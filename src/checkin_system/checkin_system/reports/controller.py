from __future__ import annotations

import io

from flask import Flask, jsonify, request, send_file

from ..common.web import admin_required
from ..container import Container
from ..core.constants import XLSX_MIMETYPE
from .model import ExportFile


def _send_export(export: ExportFile):
    return send_file(
        io.BytesIO(export.content),
        mimetype=XLSX_MIMETYPE,
        as_attachment=True,
        download_name=export.filename,
    )


def register(app: Flask, container: Container) -> None:
    @app.route("/api/admin/attendance", methods=["GET"], endpoint="admin_attendance")
    @admin_required
    def admin_attendance():
        roster = container.report_service.daily_roster(request.args.get("date") or None)
        return jsonify(roster.to_dict())

    @app.route("/api/admin/users/<int:user_id>/attendance", methods=["GET"], endpoint="admin_user_attendance")
    @admin_required
    def admin_user_attendance(user_id: int):
        history = container.report_service.monthly_history(user_id, request.args.get("month") or None)
        return jsonify(history.to_dict())

    @app.route("/api/admin/export", methods=["GET"], endpoint="admin_export")
    @admin_required
    def admin_export():
        export = container.report_service.export_range(
            start=request.args.get("start"),
            end=request.args.get("end"),
            date=request.args.get("date"),
        )
        return _send_export(export)

    @app.route("/api/admin/users/<int:user_id>/export", methods=["GET"], endpoint="admin_user_export")
    @admin_required
    def admin_user_export(user_id: int):
        export = container.report_service.export_user_month(user_id, request.args.get("month") or None)
        return _send_export(export)
