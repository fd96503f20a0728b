from __future__ import annotations

import io
import logging

from flask import Flask, jsonify, send_file

from ..container import Container
from ..core.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    badges = container.badge_service

    @app.route("/api/employees", methods=["GET"], endpoint="api_employees")
    def api_employees():
        try:
            employees = badges.list_employees()
        except Exception:
            logger.exception("Error listing employees")
            return jsonify({"success": False, "message": "Could not load employees"}), 500
        return jsonify({"success": True, "employees": [e.to_dict() for e in employees]}), 200

    @app.route("/api/employees/<employee_id>/badge.png", methods=["GET"], endpoint="api_employee_badge")
    def api_employee_badge(employee_id: str):
        try:
            png = badges.render_badge_png(employee_id)
        except NotFoundError as e:
            return jsonify({"success": False, "message": str(e)}), 404
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except Exception:
            logger.exception("Error rendering badge for %s", employee_id)
            return jsonify({"success": False, "message": "Could not render badge"}), 500
        return send_file(io.BytesIO(png), mimetype="image/png", download_name=f"badge_{employee_id}.png")
