"""
Interview Blueprint - AI practice questions, answer feedback and saved sessions
"""

from flask import Blueprint, jsonify

from hireprep.exceptions import ValidationError
from hireprep.logging_config import get_logger

from .common import get_coach, get_json_body, get_storage

logger = get_logger(__name__)

interview_bp = Blueprint("interview", __name__, url_prefix="/api")


def _text(data, key):
    value = data.get(key)
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


@interview_bp.route("/ai/questions", methods=["POST"])
def generate_questions():
    """
    Generate practice questions.

    Request Body (JSON):
        role (str, required), company (str, optional)

    Returns:
        JSON: {questions: [...]} - always populated; the local fallback
        answers when the AI provider can't.
    """
    data = get_json_body()
    role = _text(data, "role")
    if role is None:
        raise ValidationError("Role is required")

    questions = get_coach().generate_interview_questions(role, _text(data, "company"))
    return jsonify({"questions": questions})


@interview_bp.route("/ai/feedback", methods=["POST"])
def answer_feedback():
    """
    Score an answer.

    Request Body (JSON):
        question, answer (required), role (optional)

    Returns:
        JSON: {clarity, relevance, suggestions, overall}
    """
    data = get_json_body()
    question = _text(data, "question")
    answer = _text(data, "answer")
    if question is None or answer is None:
        raise ValidationError("Question and answer are required")

    feedback = get_coach().provide_feedback(question, answer, _text(data, "role"))
    return jsonify(feedback.to_dict())


@interview_bp.route("/sessions", methods=["POST"])
def create_session():
    """Save a practice session: {applicationId, questions}."""
    data = get_json_body()
    application_id = data.get("applicationId", data.get("application_id"))
    session = get_storage().create_session(application_id, data.get("questions"))
    return jsonify(session.to_dict()), 201


@interview_bp.route("/sessions/<application_id>", methods=["GET"])
def list_sessions(application_id):
    sessions = get_storage().list_sessions_by_application(application_id)
    return jsonify([s.to_dict() for s in sessions])
