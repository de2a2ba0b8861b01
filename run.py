#!/usr/bin/env python3
"""
HirePrep - Main Entry Point

Uses the application factory pattern via hireprep.create_app().

Usage:
    python run.py

Environment Variables:
    FLASK_ENV: development (default), production, testing
    LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (optional)
    DATABASE_PATH: SQLite file; in-memory storage is used when unset
    AI_PROVIDER: gemini (default) or claude
"""

import os
import sys
from pathlib import Path

from dotenv import load_dotenv

APP_DIR = Path(__file__).parent

load_dotenv(APP_DIR / ".env")

from hireprep.config import get_config  # noqa: E402
from hireprep.logging_config import get_logger, setup_logging  # noqa: E402

flask_env = os.environ.get("FLASK_ENV", "development")

try:
    config = get_config()
except (FileNotFoundError, ValueError) as e:
    setup_logging()
    get_logger(__name__).error(f"Configuration Error: {e}")
    sys.exit(1)

setup_logging(level=config.log_level, json_logs=config.json_logs or flask_env == "production")
logger = get_logger(__name__)


def main():
    """Main entry point for HirePrep."""
    logger.info("=" * 60)
    logger.info("HirePrep - Starting Up")
    logger.info("=" * 60)

    from hireprep.startup import run_startup_validation

    logger.info("Running startup validation...")
    validation_passed, _ = run_startup_validation(config, strict=False, log_results=True)
    if not validation_passed:
        logger.error("Startup validation failed. Please fix the errors above.")
        sys.exit(1)

    from hireprep import create_app

    app = create_app(config)
    storage = app.extensions["hireprep"]["storage"]

    logger.info("")
    logger.info("=" * 60)
    logger.info(f"  Environment: {flask_env}")
    logger.info(f"  Storage: {storage.backend_name}")
    logger.info(f"  Database: {config.database_path or 'not configured'}")
    logger.info(f"  AI provider: {config.ai_provider}")
    logger.info("")
    logger.info(f"  Dashboard: http://localhost:{config.server_port}")
    logger.info(f"  Health Check: http://localhost:{config.server_port}/api/health")
    logger.info("=" * 60)

    try:
        app.run(debug=flask_env != "production", host=config.server_host, port=config.server_port)
    finally:
        storage.close()


if __name__ == "__main__":
    main()
