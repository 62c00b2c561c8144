import logging
from pathlib import Path
from uuid import uuid4

from flask import Blueprint, current_app, jsonify, request

from ..ingest.pipeline import ALLOWED, import_sheet

logger = logging.getLogger(__name__)

bp = Blueprint("ingest", __name__)


@bp.post("/api/upload")
def upload():
    """Bulk-load a CSV/Excel export of the spreadsheet into the local store."""
    if not current_app.extensions.get("store_available", False):
        return jsonify({"error": "Local store unavailable"}), 503
    if "file" not in request.files:
        return jsonify({"error": "no file"}), 400
    f = request.files["file"]
    suffix = Path(f.filename or "").suffix.lower()
    if not f.filename or suffix not in ALLOWED:
        return jsonify({"error": "invalid format"}), 400

    updir = Path(current_app.config["UPLOAD_DIR"])
    updir.mkdir(parents=True, exist_ok=True)
    # the client filename never reaches disk
    p = updir / f"{uuid4().hex}{suffix}"
    f.save(p)

    try:
        rows = import_sheet(p)
        logger.info(f"Upload {f.filename!r} ingested {rows} rows")
        return jsonify({"message": "ingested", "rows": rows})
    except ValueError as e:
        return jsonify({"error": f"ingest failed: {e}"}), 400
    except Exception as e:
        logger.error(f"Upload error: {e}")
        return jsonify({"error": f"ingest failed: {e}"}), 500
    finally:
        p.unlink(missing_ok=True)
