from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/location/ip", methods=["GET"], endpoint="network_location")
    @login_required
    def network_location():
        result = container.network_locator.resolve(None)
        if result is None:
            return jsonify({"error": "Unable to fetch network location"}), 502
        return jsonify(result.to_dict())
