import logging

from flask import Blueprint, current_app, jsonify, request

from ..ingest.pipeline import ingest_submission

logger = logging.getLogger(__name__)

bp = Blueprint("survey", __name__)


@bp.post("/api/survey")
def submit_survey():
    """Accept one survey submission; sink failures never reach the submitter."""
    try:
        # empty body is an empty submission, malformed JSON is an error
        data = request.get_json(force=True) if request.get_data(cache=True).strip() else {}
        logger.info(f"Received survey data for: {data.get('name') if isinstance(data, dict) else None}")

        outcome = ingest_submission(
            data,
            current_app.extensions["sheet_mirror"],
            store_available=current_app.extensions.get("store_available", False),
        )
        logger.debug(f"Survey ingest outcome: {outcome}")
        return jsonify({"success": True})
    except Exception as e:
        logger.error(f"Survey submission error: {e}")
        return jsonify({"error": "Failed to process survey"}), 500
