"""
HirePrep - Application Factory

Job application tracker with AI-assisted interview practice.
"""

import time
from pathlib import Path

from flask import Flask, g, jsonify, request
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from hireprep.exceptions import HirePrepError, NotFoundError, StorageUnavailableError
from hireprep.logging_config import get_logger, log_request

__version__ = "1.0.0"

logger = get_logger(__name__)


def create_app(config=None, storage=None, coach=None):
    """
    Application factory for creating Flask app instances.

    Args:
        config: Optional Config instance (defaults to the global config)
        storage: Optional Storage backend (defaults to the configured one)
        coach: Optional InterviewCoach (defaults to one built from config)

    Returns:
        Configured Flask application instance
    """
    from dotenv import load_dotenv

    load_dotenv()

    from hireprep.ai.coach import InterviewCoach
    from hireprep.config import get_config
    from hireprep.routes import register_all_blueprints
    from hireprep.storage import create_storage

    if config is None:
        try:
            config = get_config()
        except FileNotFoundError as e:
            logger.error(f"Configuration Error: {e}")
            raise

    app = Flask(__name__)
    app.config["HIREPREP_CONFIG"] = config
    app.config["DIST_DIR"] = str(Path.cwd() / "dist")

    CORS(app)

    app.extensions["hireprep"] = {
        "storage": storage if storage is not None else create_storage(config),
        "coach": coach if coach is not None else InterviewCoach(config),
    }

    register_all_blueprints(app)
    register_error_handlers(app)
    register_request_logging(app)

    return app


def register_error_handlers(app):
    """Map HirePrep errors and unexpected failures to JSON responses."""

    @app.errorhandler(HirePrepError)
    def handle_hireprep_error(error):
        if isinstance(error, StorageUnavailableError):
            logger.error(f"Storage unavailable on {request.method} {request.path}: {error.message}")
        elif not isinstance(error, NotFoundError):
            logger.info(f"{error.__class__.__name__} on {request.path}: {error.message}")
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        return jsonify({"message": error.description}), error.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        logger.exception(f"Unhandled error on {request.method} {request.path}")
        return jsonify({"message": "Internal server error"}), 500


def register_request_logging(app):
    """Log every /api request with its status and duration."""

    @app.before_request
    def start_timer():
        g.request_start = time.perf_counter()

    @app.after_request
    def log_api_request(response):
        if request.path.startswith("/api"):
            duration_ms = int((time.perf_counter() - g.get("request_start", time.perf_counter())) * 1000)
            log_request(logger, request.method, request.path, response.status_code, duration_ms)
        return response
