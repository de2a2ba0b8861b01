"""
Startup validation for HirePrep.

Checks the environment, storage and installed packages before the server
starts. Only storage problems are fatal; a missing AI key just means the
local fallbacks answer every AI request.
"""

import importlib
import os
from pathlib import Path
from typing import List, Optional, Tuple

from hireprep.ai.factory import PROVIDER_KEYS, has_api_key
from hireprep.config import Config, get_config
from hireprep.database import Database
from hireprep.exceptions import StorageUnavailableError
from hireprep.logging_config import get_logger

logger = get_logger(__name__)

# Import name of the SDK each provider needs
PROVIDER_PACKAGES = {
    "claude": ("anthropic", "Anthropic SDK"),
    "gemini": ("google.generativeai", "Google Gemini SDK"),
}


class ValidationResult:
    """Result of a validation check."""

    def __init__(
        self,
        name: str,
        passed: bool,
        message: str,
        severity: str = "error",  # error, warning, info
        fix_hint: Optional[str] = None,
    ):
        self.name = name
        self.passed = passed
        self.message = message
        self.severity = severity
        self.fix_hint = fix_hint

    def __str__(self) -> str:
        status = "PASS" if self.passed else self.severity.upper()
        return f"[{status}] {self.name}: {self.message}"


def validate_environment(config: Config) -> List[ValidationResult]:
    """Check that the configured AI provider has an API key."""
    provider = config.ai_provider
    env_vars = " or ".join(PROVIDER_KEYS[provider])

    if has_api_key(provider):
        return [
            ValidationResult(
                name=f"AI Provider: {provider}",
                passed=True,
                message=f"{provider} API key configured",
                severity="info",
            )
        ]
    return [
        ValidationResult(
            name=f"AI Provider: {provider}",
            passed=False,
            message=f"No API key for {provider}; built-in practice questions and feedback will be used",
            severity="warning",
            fix_hint=f"Set {env_vars} in your .env file",
        )
    ]


def validate_storage(config: Config) -> List[ValidationResult]:
    """Check that the selected storage backend is usable."""
    backend = config.resolve_storage_backend()

    if backend == "memory":
        auto = config.storage_backend == "auto"
        return [
            ValidationResult(
                name="Storage Backend",
                passed=not auto,
                message="In-memory storage selected; data is lost on restart",
                severity="warning" if auto else "info",
                fix_hint="Set DATABASE_PATH or storage.database_path to persist data" if auto else None,
            )
        ]

    results = []
    db_path = config.database_path
    if not db_path:
        results.append(
            ValidationResult(
                name="Storage Backend",
                passed=False,
                message="SQLite storage selected but no database path configured",
                severity="error",
                fix_hint="Set DATABASE_PATH or storage.database_path",
            )
        )
        return results

    results.append(
        ValidationResult(
            name="Storage Backend",
            passed=True,
            message=f"SQLite storage at {db_path}",
            severity="info",
        )
    )

    if db_path != ":memory:":
        db_dir = Path(db_path).expanduser().resolve().parent
        if not db_dir.exists():
            results.append(
                ValidationResult(
                    name="Database Directory",
                    passed=False,
                    message=f"Database directory does not exist: {db_dir}",
                    severity="error",
                    fix_hint="Create the directory or point DATABASE_PATH elsewhere",
                )
            )
            return results
        if not os.access(db_dir, os.W_OK):
            results.append(
                ValidationResult(
                    name="Database Directory",
                    passed=False,
                    message=f"No write permission for database directory: {db_dir}",
                    severity="error",
                    fix_hint="Fix directory permissions: chmod 755",
                )
            )
            return results
        results.append(
            ValidationResult(
                name="Database Directory",
                passed=True,
                message="Database directory accessible",
                severity="info",
            )
        )

    database = Database(db_path)
    try:
        database.ping()
        results.append(
            ValidationResult(
                name="Database Connection",
                passed=True,
                message="Database initialized successfully",
                severity="info",
            )
        )
    except StorageUnavailableError as e:
        results.append(
            ValidationResult(
                name="Database Connection",
                passed=False,
                message=f"Database error: {e.message}",
                severity="error",
                fix_hint="Check database file permissions and integrity",
            )
        )
    finally:
        database.close()

    return results


def validate_dependencies(config: Config) -> List[ValidationResult]:
    """Check that the configured provider's SDK is importable."""
    package, description = PROVIDER_PACKAGES[config.ai_provider]
    try:
        importlib.import_module(package)
    except ImportError:
        return [
            ValidationResult(
                name=f"Package: {package}",
                passed=False,
                message=f"{description} not installed; AI requests will use the fallback",
                severity="warning",
                fix_hint="Run: pip install -e .",
            )
        ]
    return [
        ValidationResult(
            name=f"Package: {package}",
            passed=True,
            message=f"{description} available",
            severity="info",
        )
    ]


def run_startup_validation(
    config: Optional[Config] = None, strict: bool = False, log_results: bool = True
) -> Tuple[bool, List[ValidationResult]]:
    """
    Run all startup validations.

    Args:
        config: Config to validate (defaults to the global config)
        strict: If True, treat warnings as errors
        log_results: If True, log validation results

    Returns:
        Tuple of (all_passed, results)
    """
    config = config or get_config()
    all_results: List[ValidationResult] = []

    validators = [
        ("Environment", validate_environment),
        ("Storage", validate_storage),
        ("Dependencies", validate_dependencies),
    ]

    for category, validator in validators:
        try:
            all_results.extend(validator(config))
        except Exception as e:
            all_results.append(
                ValidationResult(
                    name=f"{category} Validation",
                    passed=False,
                    message=f"Validation failed with error: {e}",
                    severity="error",
                )
            )

    if log_results:
        logger.info("=" * 60)
        logger.info("STARTUP VALIDATION RESULTS")
        logger.info("=" * 60)

        for result in all_results:
            if result.passed or result.severity == "info":
                logger.info(str(result))
            elif result.severity == "error":
                logger.error(str(result))
                if result.fix_hint:
                    logger.error(f"  Hint: {result.fix_hint}")
            else:
                logger.warning(str(result))
                if result.fix_hint:
                    logger.warning(f"  Hint: {result.fix_hint}")

        logger.info("=" * 60)

    errors = [r for r in all_results if not r.passed and r.severity == "error"]
    warnings = [r for r in all_results if not r.passed and r.severity == "warning"]

    if errors:
        logger.error(f"Startup validation failed with {len(errors)} error(s)")
        return False, all_results

    if strict and warnings:
        logger.error(f"Startup validation failed with {len(warnings)} warning(s) (strict mode)")
        return False, all_results

    logger.info("Startup validation passed")
    return True, all_results
