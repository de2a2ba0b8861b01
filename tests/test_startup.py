"""
Tests for startup validation checks.
"""

from hireprep.config import Config
from hireprep.startup import (
    run_startup_validation,
    validate_environment,
    validate_storage,
)


def _by_name(results):
    return {r.name: r for r in results}


def test_missing_ai_key_is_only_a_warning():
    """Test that no API key warns but does not fail startup."""
    results = validate_environment(Config(data={}))

    assert len(results) == 1
    assert not results[0].passed
    assert results[0].severity == "warning"
    assert "GEMINI_API_KEY" in results[0].fix_hint


def test_ai_key_present(monkeypatch):
    monkeypatch.setenv("ANTHROPIC_API_KEY", "test-anthropic-key")

    results = validate_environment(Config(data={"ai": {"provider": "claude"}}))

    assert results[0].passed


def test_auto_memory_storage_warns():
    results = validate_storage(Config(data={}))

    assert results[0].severity == "warning"
    assert not results[0].passed


def test_explicit_memory_storage_passes():
    results = validate_storage(Config(data={"storage": {"backend": "memory"}}))

    assert results[0].passed


def test_sqlite_without_path_is_an_error():
    """Test that an explicit sqlite backend needs a database path."""
    results = validate_storage(Config(data={"storage": {"backend": "sqlite"}}))

    assert results[0].severity == "error"
    assert not results[0].passed


def test_sqlite_storage_checks_directory_and_connection(tmp_path):
    config = Config(data={"storage": {"database_path": str(tmp_path / "hireprep.db")}})

    results = _by_name(validate_storage(config))

    assert results["Storage Backend"].passed
    assert results["Database Directory"].passed
    assert results["Database Connection"].passed
    assert (tmp_path / "hireprep.db").exists()


def test_sqlite_missing_directory_fails(tmp_path):
    config = Config(data={"storage": {"database_path": str(tmp_path / "missing" / "x.db")}})

    results = _by_name(validate_storage(config))

    assert not results["Database Directory"].passed
    assert "Database Connection" not in results


def test_run_startup_validation_passes_with_warnings():
    """Test that warnings pass normally and fail in strict mode."""
    config = Config(data={})

    passed, results = run_startup_validation(config, log_results=False)
    strict_passed, _ = run_startup_validation(config, strict=True, log_results=False)

    assert passed is True
    assert strict_passed is False
    assert any(r.severity == "warning" for r in results)


def test_run_startup_validation_fails_on_storage_error():
    config = Config(data={"storage": {"backend": "sqlite"}})

    passed, _ = run_startup_validation(config, log_results=True)

    assert passed is False
