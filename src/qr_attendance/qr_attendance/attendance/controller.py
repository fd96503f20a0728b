from __future__ import annotations

import io
import logging

import pandas as pd
from flask import Flask, jsonify, request, send_file
from PIL import Image, UnidentifiedImageError

from ..common.datetime_utils import format_iso_date
from ..common.validators import optional_iso_date, require_non_empty
from ..container import Container
from ..core.exceptions import ValidationError

logger = logging.getLogger(__name__)

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
EXPORT_COLUMNS = ["date", "id", "name", "department", "status"]


def register(app: Flask, container: Container) -> None:
    recorder = container.recorder

    def _failure(status: int = 500, message: str = "Scan failed, please try again"):
        return jsonify({"success": False, "status": "failed", "message": message}), status

    @app.route("/api/attendance/mark", methods=["POST"], endpoint="api_attendance_mark")
    def api_attendance_mark():
        """Mark attendance for a badge payload decoded on the client."""
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            data = {}
        try:
            employee_id = require_non_empty(data.get("employee_id") or data.get("qr_code"), "employee_id")
            outcome = recorder.mark_attendance(employee_id)
        except ValidationError as e:
            return _failure(400, str(e))
        except Exception:
            logger.exception("Error marking attendance")
            return _failure()
        return jsonify(outcome.to_dict()), 200

    @app.route("/api/attendance/scan-image", methods=["POST"], endpoint="api_attendance_scan_image")
    def api_attendance_scan_image():
        """Decode a QR code from an uploaded photo, then mark attendance."""
        if "image" not in request.files:
            return _failure(400, "Missing image file")

        try:
            img = Image.open(request.files["image"].stream)
            img.load()
        except (UnidentifiedImageError, OSError):
            return _failure(400, "Unreadable image")

        result = container.decoder.decode_image(img)
        if result is None:
            return _failure(400, "No QR code found in image")

        try:
            outcome = recorder.mark_attendance(result.payload)
        except Exception:
            logger.exception("Error marking attendance from image")
            return _failure()
        return jsonify(outcome.to_dict()), 200

    @app.route("/api/attendance/today", methods=["GET"], endpoint="api_attendance_today")
    def api_attendance_today():
        try:
            roster = recorder.fetch_daily_roster(optional_iso_date(request.args.get("date")))
        except ValidationError as e:
            return _failure(400, str(e))
        except Exception:
            logger.exception("Error fetching daily roster")
            return jsonify({"success": False, "message": "Could not load attendance", "present": [], "absent": []}), 500
        return jsonify({"success": True, **roster.to_dict()}), 200

    @app.route("/api/attendance/today/export", methods=["GET"], endpoint="api_attendance_today_export")
    def api_attendance_today_export():
        fmt = (request.args.get("format") or "csv").lower()
        if fmt not in ("csv", "xlsx"):
            return _failure(400, "format must be csv or xlsx")

        try:
            roster = recorder.fetch_daily_roster(optional_iso_date(request.args.get("date")))
        except ValidationError as e:
            return _failure(400, str(e))
        except Exception:
            logger.exception("Error exporting daily roster")
            return _failure(500, "Could not load attendance")

        df = pd.DataFrame(roster.to_rows(), columns=EXPORT_COLUMNS)
        filename = f"attendance_{format_iso_date(roster.work_date)}.{fmt}"
        output = io.BytesIO()

        if fmt == "xlsx":
            with pd.ExcelWriter(output, engine="openpyxl") as writer:
                df.to_excel(writer, index=False, sheet_name="Attendance")
            mimetype = XLSX_MIMETYPE
        else:
            output.write(df.to_csv(index=False).encode("utf-8-sig"))
            mimetype = "text/csv"

        output.seek(0)
        return send_file(output, download_name=filename, as_attachment=True, mimetype=mimetype)
