from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import admin_required, json_body, to_json
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/admin/settings", methods=["GET"], endpoint="get_settings")
    @admin_required
    def get_settings():
        return jsonify({"success": True, "settings": to_json(container.settings_service.get_settings())})

    @app.route("/api/admin/settings", methods=["PUT"], endpoint="update_settings")
    @admin_required
    def update_settings():
        saved = container.settings_service.update_settings(json_body())
        return jsonify({"success": True, "settings": to_json(saved)})
