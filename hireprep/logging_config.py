"""
Logging setup for HirePrep.

Console output for development, JSON lines when ``logging.json`` is set or in
production, and an optional rotating log file. Structured fields travel on
each record as ``extra_data`` so concurrent requests never share state.
"""

import json
import logging
import logging.handlers
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

LOGS_DIR = Path.cwd() / "logs"
LOG_FILE_NAME = "hireprep.log"
MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUPS = 5
MAX_CONSOLE_MESSAGE = 500

LOG_LEVELS = {
    "development": logging.DEBUG,
    "production": logging.INFO,
    "testing": logging.WARNING,
}

# SDK and server loggers that are chatty at INFO
QUIET_LOGGERS = ("urllib3", "httpcore", "httpx", "werkzeug", "anthropic", "google")


def record_data(record: logging.LogRecord) -> Dict[str, Any]:
    """Return the structured fields attached to a record, if any."""
    data = getattr(record, "extra_data", None)
    return data if isinstance(data, dict) else {}


class JSONFormatter(logging.Formatter):
    """One JSON object per line, with structured fields under ``data``."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        data = record_data(record)
        if data:
            payload["data"] = data
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class ConsoleFormatter(logging.Formatter):
    """Colored single-line output; structured fields are appended as key=value."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, self.RESET)
        timestamp = datetime.now().strftime("%H:%M:%S")

        message = record.getMessage()
        if len(message) > MAX_CONSOLE_MESSAGE:
            message = message[:MAX_CONSOLE_MESSAGE] + "..."

        fields = " ".join(f"{key}={value}" for key, value in record_data(record).items())
        line = f"{color}[{timestamp}] {record.levelname:8}{self.RESET} {record.name}: {message}"
        if fields:
            line += f" [{fields}]"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def _file_handler(log_file: Optional[str]) -> logging.Handler:
    if log_file:
        path = Path(log_file)
    else:
        LOGS_DIR.mkdir(exist_ok=True)
        path = LOGS_DIR / LOG_FILE_NAME
    handler = logging.handlers.RotatingFileHandler(
        path, maxBytes=MAX_LOG_BYTES, backupCount=LOG_BACKUPS, encoding="utf-8"
    )
    handler.setFormatter(JSONFormatter())
    return handler


def setup_logging(
    level: Optional[str] = None,
    json_logs: bool = False,
    log_file: Optional[str] = None,
) -> logging.Logger:
    """
    Configure the root logger.

    Args:
        level: Log level name; defaults by FLASK_ENV
        json_logs: Emit JSON lines on the console
        log_file: Also write JSON lines to this rotating file (production
            always writes to ``logs/hireprep.log``)

    Returns:
        The root logger
    """
    env = os.environ.get("FLASK_ENV", "development")
    if level:
        log_level = getattr(logging, level.upper(), logging.INFO)
    else:
        log_level = LOG_LEVELS.get(env, logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    console = logging.StreamHandler()
    console.setFormatter(JSONFormatter() if json_logs else ConsoleFormatter())
    root_logger.addHandler(console)

    if log_file or env == "production":
        root_logger.addHandler(_file_handler(log_file))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return root_logger


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def log_request(
    logger: logging.Logger, method: str, path: str, status: int, duration_ms: int
) -> None:
    """Log one handled HTTP request with its fields attached to that record only."""
    logger.info(
        f"{method} {path} {status} in {duration_ms}ms",
        extra={
            "extra_data": {
                "method": method,
                "path": path,
                "status": status,
                "duration_ms": duration_ms,
            }
        },
    )
