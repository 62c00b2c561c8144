# watersurvey/__init__.py
import atexit
import logging
import platform

from flask import Flask, jsonify, request
from flask_cors import CORS
from sqlalchemy.exc import SQLAlchemyError

from .extensions import db
from .config import Settings
from .mirror import SheetMirror
from .routes.survey import bp as survey_bp
from .routes.responses import bp as responses_bp
from .routes.ingest import bp as ingest_bp

logger = logging.getLogger(__name__)


def _init_store():
    """Create the responses table; a read-only filesystem only disables the store."""
    try:
        db.create_all()
        return True
    except SQLAlchemyError as e:
        logger.warning(f"Database initialization failed, local store disabled: {e}")
        return False


def create_app(settings=None, mirror=None):
    app = Flask(__name__)
    app.config.from_object(settings or Settings())
    app.url_map.strict_slashes = False

    logging.basicConfig(level=app.config.get("LOG_LEVEL", "INFO"))
    CORS(app, origins=app.config.get("CORS_ORIGINS", "*"))
    db.init_app(app)

    # one mirror client per app, closed at interpreter exit
    if mirror is None:
        mirror = SheetMirror.from_config(app.config)
        atexit.register(mirror.close)
    app.extensions["sheet_mirror"] = mirror

    app.register_blueprint(survey_bp)
    app.register_blueprint(responses_bp)
    app.register_blueprint(ingest_bp)

    @app.get("/api/health")
    def health():
        return jsonify({
            "status": "ok",
            "mirrorConfigured": app.extensions["sheet_mirror"].configured,
            "storeAvailable": app.extensions["store_available"],
            "pythonVersion": platform.python_version(),
            "env": app.config.get("APP_ENV"),
        })

    # /api/* errors are always JSON
    @app.errorhandler(404)
    def _404(e):
        if request.path.startswith("/api/"):
            return jsonify({"error": "not found", "path": request.path}), 404
        return e

    @app.errorhandler(405)
    def _405(e):
        if request.path.startswith("/api/"):
            return jsonify({"error": "method not allowed", "path": request.path}), 405
        return e

    @app.errorhandler(413)
    def _413(e):
        if request.path.startswith("/api/"):
            return jsonify({"error": "payload too large"}), 413
        return e

    with app.app_context():
        app.extensions["store_available"] = _init_store()
        if not mirror.configured:
            logger.warning("GOOGLE_SHEET_WEBAPP_URL not configured, mirror disabled")
    return app
