"""
Applications Blueprint - CRUD for tracked job applications and dashboard stats
"""

import math

from flask import Blueprint, jsonify, request

from hireprep.exceptions import NotFoundError
from hireprep.logging_config import get_logger
from hireprep.models import DEFAULT_LIMIT, build_filter

from .common import get_json_body, get_storage, parse_positive_int

logger = get_logger(__name__)

applications_bp = Blueprint("applications", __name__, url_prefix="/api")

NOT_FOUND = "Application not found"


@applications_bp.route("/applications", methods=["GET"])
def list_applications():
    """
    List applications, newest first.

    Route: GET /api/applications

    Query Parameters:
        status (str, optional): applied, interview, offer, rejected or "All"
        tag (str, optional): dream, target, backup or "All"
        search (str, optional): case-insensitive match on company or role
        page (int, optional): 1-based page number (default 1)
        limit (int, optional): page size (default 10)

    Returns:
        JSON: {applications, total, page, totalPages}

    Examples:
        GET /api/applications?status=interview&search=acme&page=2
    """
    page = parse_positive_int("page", 1)
    limit = parse_positive_int("limit", DEFAULT_LIMIT)

    options = build_filter(
        status=request.args.get("status"),
        tag=request.args.get("tag"),
        search=request.args.get("search"),
        limit=limit,
        offset=(page - 1) * limit,
    )
    result = get_storage().list_applications(options)

    return jsonify(
        {
            "applications": [app.to_dict() for app in result.items],
            "total": result.total,
            "page": page,
            "totalPages": math.ceil(result.total / limit),
        }
    )


@applications_bp.route("/applications/<application_id>", methods=["GET"])
def get_application(application_id):
    """Single application with its practice sessions attached as ``sessions``."""
    storage = get_storage()
    application = storage.get_application(application_id)
    if application is None:
        raise NotFoundError(NOT_FOUND)

    body = application.to_dict()
    body["sessions"] = [
        s.to_dict() for s in storage.list_sessions_by_application(application_id)
    ]
    return jsonify(body)


@applications_bp.route("/applications", methods=["POST"])
def create_application():
    """
    Create an application.

    Request Body (JSON):
        company, role (required); status, tag, jobUrl, notes (optional)
    """
    application = get_storage().create_application(get_json_body())
    return jsonify(application.to_dict()), 201


@applications_bp.route("/applications/<application_id>", methods=["PATCH"])
def update_application(application_id):
    """Partially update an application. Unknown fields are ignored."""
    application = get_storage().update_application(application_id, get_json_body())
    if application is None:
        raise NotFoundError(NOT_FOUND)
    return jsonify(application.to_dict())


@applications_bp.route("/applications/<application_id>", methods=["DELETE"])
def delete_application(application_id):
    """Delete an application and its sessions."""
    if not get_storage().delete_application(application_id):
        raise NotFoundError(NOT_FOUND)
    return "", 204


@applications_bp.route("/stats", methods=["GET"])
def get_stats():
    """Dashboard counters: {total, interviews, offers, responseRate}."""
    return jsonify(get_storage().get_stats().to_dict())
