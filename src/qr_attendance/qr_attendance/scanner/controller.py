from __future__ import annotations

from flask import Flask, jsonify

from ..container import Container
from ..core.enums import ScanState


def register(app: Flask, container: Container) -> None:
    """Routes driving the kiosk camera attached to this host."""

    session = container.scan_session

    @app.route("/api/scanner/start", methods=["POST"], endpoint="api_scanner_start")
    def api_scanner_start():
        if session.state != ScanState.IDLE:
            return jsonify({"success": False, "message": "Scanner already running", **session.status()}), 409

        if not session.start():
            if session.state != ScanState.IDLE:
                return jsonify({"success": False, "message": "Scanner already running", **session.status()}), 409
            # Camera failure; the failed outcome carries the user-facing message.
            return jsonify({"success": False, **session.status()}), 503
        return jsonify({"success": True, **session.status()}), 200

    @app.route("/api/scanner/stop", methods=["POST"], endpoint="api_scanner_stop")
    def api_scanner_stop():
        session.stop()
        return jsonify({"success": True, **session.status()}), 200

    @app.route("/api/scanner/status", methods=["GET"], endpoint="api_scanner_status")
    def api_scanner_status():
        return jsonify({"success": True, **session.status()}), 200
