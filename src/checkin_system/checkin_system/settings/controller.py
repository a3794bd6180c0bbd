from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import admin_required, json_body
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/admin/settings", methods=["GET"], endpoint="admin_settings")
    @admin_required
    def admin_settings():
        return jsonify({"cutoffTime": container.cutoff_service.get_cutoff_time()})

    @app.route("/api/admin/settings", methods=["PUT"], endpoint="admin_settings_update")
    @admin_required
    def admin_settings_update():
        data = json_body()
        cutoff_time = container.cutoff_service.set_cutoff_time(data.get("cutoffTime"))
        return jsonify({"cutoffTime": cutoff_time})
