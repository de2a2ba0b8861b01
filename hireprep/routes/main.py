"""
Main Routes Blueprint - Health check and frontend serving

Serves the built single-page frontend from dist/ when present.
"""

from pathlib import Path

from flask import Blueprint, current_app, jsonify, send_from_directory

from hireprep.ai.factory import has_api_key
from hireprep.exceptions import HirePrepError, NotFoundError
from hireprep.logging_config import get_logger

from .common import get_coach, get_storage

logger = get_logger(__name__)

main_bp = Blueprint("main", __name__)


def _dist_dir() -> Path:
    return Path(current_app.config["DIST_DIR"])


@main_bp.route("/api/health")
def health():
    """
    Report store reachability and the configured AI provider.

    Returns 200 when the store answers, 503 otherwise. AI availability never
    affects the status code since the fallback always works.
    """
    storage = get_storage()
    provider = get_coach().config.ai_provider

    storage_status = {"backend": storage.backend_name, "ok": True}
    try:
        storage.ping()
    except HirePrepError as e:
        storage_status.update(ok=False, message=e.message)

    body = {
        "status": "ok" if storage_status["ok"] else "degraded",
        "storage": storage_status,
        "ai": {"provider": provider, "configured": has_api_key(provider)},
    }
    return jsonify(body), 200 if storage_status["ok"] else 503


@main_bp.route("/")
def index():
    """Serve the frontend's index.html."""
    dist_index = _dist_dir() / "index.html"
    if dist_index.exists():
        return send_from_directory(_dist_dir(), "index.html")
    return "Frontend not built! Run 'npm run build' first.", 404


@main_bp.route("/<path:path>")
def serve_static(path):
    """
    Serve static files or fall back to index.html for client-side routing.
    """
    if path == "api" or path.startswith("api/"):
        raise NotFoundError("Not found")

    dist_path = _dist_dir()
    if (dist_path / path).is_file():
        return send_from_directory(dist_path, path)
    if (dist_path / "index.html").exists():
        return send_from_directory(dist_path, "index.html")
    raise NotFoundError("Not found")
