from datetime import datetime
from io import BytesIO
import logging

import pandas as pd
from flask import Blueprint, Response, current_app, jsonify, request, send_file

from ..analytics import aggregate
from ..analytics.source import load_records
from ..models import STORE_COLUMNS, SurveyResponse

logger = logging.getLogger(__name__)

bp = Blueprint("responses", __name__)

EXPORT_COLUMNS = ["id", *STORE_COLUMNS, "created_at"]


@bp.get("/api/responses")
def get_responses():
    """Dashboard analytics over the mirror, or the local store when the mirror has nothing."""
    try:
        records = load_records(
            current_app.extensions["sheet_mirror"],
            store_available=current_app.extensions.get("store_available", False),
        )
        return jsonify(aggregate(records))
    except Exception as e:
        logger.error(f"Fetch error: {e}")
        return jsonify({"error": "Failed to fetch responses"}), 500


@bp.get("/api/export")
def export_responses():
    """Download the local store as Excel (default) or CSV, newest first."""
    if not current_app.extensions.get("store_available", False):
        return jsonify({"error": "Local store unavailable"}), 503
    fmt = request.args.get("format", "xlsx").lower()
    if fmt not in ("xlsx", "csv"):
        return jsonify({"error": "invalid format"}), 400

    try:
        rows = SurveyResponse.list_recent()
        if not rows:
            return jsonify({"error": "No data to export"}), 404

        df = pd.DataFrame(rows, columns=EXPORT_COLUMNS)
        stamp = datetime.now().strftime("%Y%m%d")

        if fmt == "csv":
            return Response(
                df.to_csv(index=False),
                mimetype="text/csv",
                headers={"Content-Disposition": f"attachment; filename=survey_responses_{stamp}.csv"},
            )

        output = BytesIO()
        with pd.ExcelWriter(output, engine="openpyxl") as writer:
            df.to_excel(writer, sheet_name="Responses", index=False)
        output.seek(0)
        return send_file(
            output,
            mimetype="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            as_attachment=True,
            download_name=f"survey_responses_{stamp}.xlsx",
        )
    except Exception as e:
        logger.error(f"Export error: {e}")
        return jsonify({"error": "Export failed"}), 500
