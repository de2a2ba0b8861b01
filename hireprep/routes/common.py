"""
Helpers shared by the API blueprints.
"""

from typing import Any, Dict

from flask import current_app, request

from hireprep.exceptions import ValidationError

EXTENSION_KEY = "hireprep"


def get_storage():
    """The Storage instance attached to the running app."""
    return current_app.extensions[EXTENSION_KEY]["storage"]


def get_coach():
    """The InterviewCoach attached to the running app."""
    return current_app.extensions[EXTENSION_KEY]["coach"]


def get_json_body() -> Dict[str, Any]:
    """
    Parsed JSON object from the request body.

    Raises:
        ValidationError: If the body is missing, not JSON, or not an object
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def parse_positive_int(name: str, default: int) -> int:
    """Read a query parameter that must be an integer >= 1."""
    raw = request.args.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValidationError(f"Invalid {name}", [f"{name} must be a positive integer"])
    if value < 1:
        raise ValidationError(f"Invalid {name}", [f"{name} must be a positive integer"])
    return value
