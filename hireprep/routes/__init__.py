"""
Routes Package - Flask Blueprints for HirePrep

Blueprint structure:
- applications_bp: Application CRUD and stats (/api/applications, /api/stats)
- interview_bp: AI questions, feedback and practice sessions (/api/ai, /api/sessions)
- main_bp: Health check and frontend serving (/api/health, /)
"""

from hireprep.logging_config import get_logger

from .applications import applications_bp
from .interview import interview_bp
from .main import main_bp

logger = get_logger(__name__)


def register_all_blueprints(app):
    """
    Register all Flask blueprints with the application.

    Args:
        app: Flask application instance
    """
    # API blueprints first so main_bp's catch-all never shadows them
    app.register_blueprint(applications_bp)
    app.register_blueprint(interview_bp)
    app.register_blueprint(main_bp)
    logger.debug("Registered applications, interview and main blueprints")


__all__ = [
    "applications_bp",
    "interview_bp",
    "main_bp",
    "register_all_blueprints",
]
