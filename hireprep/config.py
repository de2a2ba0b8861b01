"""
Configuration Loader for HirePrep

Loads and validates configuration from config.yaml, then applies
environment variable overrides (usually supplied through .env).
"""

import copy
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

DEFAULT_CONFIG_PATH = Path.cwd() / "config.yaml"

STORAGE_BACKENDS = ("auto", "sqlite", "memory")
AI_PROVIDERS = ("claude", "gemini")

DEFAULTS: Dict[str, Any] = {
    "storage": {
        "backend": "auto",
        "database_path": None,
    },
    "ai": {
        "provider": "gemini",
        "model": None,
        "timeout_seconds": 20,
        "max_retries": 1,
        "calls_per_minute": 60,
    },
    "server": {
        "host": "0.0.0.0",
        "port": 5000,
    },
    "logging": {
        "level": None,
        "json": False,
    },
}

# Environment variable -> dot-notation config key
ENV_OVERRIDES = {
    "HIREPREP_STORAGE_BACKEND": "storage.backend",
    "DATABASE_PATH": "storage.database_path",
    "AI_PROVIDER": "ai.provider",
    "AI_MODEL": "ai.model",
    "PORT": "server.port",
    "LOG_LEVEL": "logging.level",
}


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in (override or {}).items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class Config:
    """Configuration manager for HirePrep."""

    def __init__(self, config_path: Optional[Path] = None, data: Optional[Dict[str, Any]] = None):
        """
        Initialize configuration.

        Args:
            config_path: Path to a YAML file. Falls back to $HIREPREP_CONFIG,
                then ./config.yaml. Only an explicitly requested file must exist.
            data: Raw configuration dict used instead of reading a file
        """
        self._explicit_path = config_path is not None or bool(os.environ.get("HIREPREP_CONFIG"))
        if config_path is None:
            env_path = os.environ.get("HIREPREP_CONFIG")
            config_path = Path(env_path) if env_path else DEFAULT_CONFIG_PATH

        self.config_path = Path(config_path)
        self._data = data
        self._config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from YAML, merge defaults and env overrides."""
        if self._data is not None:
            raw = copy.deepcopy(self._data)
        elif self.config_path.exists():
            with open(self.config_path, "r") as f:
                raw = yaml.safe_load(f) or {}
        elif self._explicit_path:
            raise FileNotFoundError(
                f"Config file not found: {self.config_path}\n"
                f"Copy config.example.yaml to config.yaml and adjust it."
            )
        else:
            raw = {}

        if not isinstance(raw, dict):
            raise ValueError("Config file must contain a mapping at the top level")

        config = _deep_merge(DEFAULTS, raw)
        self._apply_env_overrides(config)
        self._validate_config(config)
        return config

    def _apply_env_overrides(self, config: Dict[str, Any]) -> None:
        for env_var, key in ENV_OVERRIDES.items():
            value = os.environ.get(env_var)
            if not value:
                continue
            section, name = key.split(".")
            config.setdefault(section, {})[name] = value

    def _validate_config(self, config: Dict[str, Any]) -> None:
        """Validate values, coercing numeric strings from the environment."""
        for section in DEFAULTS:
            if not isinstance(config.get(section), dict):
                raise ValueError(f"Config section must be a mapping: {section}")

        backend = str(config["storage"]["backend"]).lower()
        if backend not in STORAGE_BACKENDS:
            raise ValueError(
                f"Invalid storage.backend: {backend}. Expected one of: {', '.join(STORAGE_BACKENDS)}"
            )
        config["storage"]["backend"] = backend

        provider = str(config["ai"]["provider"]).lower()
        if provider not in AI_PROVIDERS:
            raise ValueError(
                f"Invalid ai.provider: {provider}. Expected one of: {', '.join(AI_PROVIDERS)}"
            )
        config["ai"]["provider"] = provider

        for key, minimum in (("timeout_seconds", 1), ("max_retries", 0), ("calls_per_minute", 1)):
            config["ai"][key] = self._coerce_int(config["ai"][key], f"ai.{key}", minimum)

        config["server"]["port"] = self._coerce_int(config["server"]["port"], "server.port", 1)

    @staticmethod
    def _coerce_int(value: Any, key: str, minimum: int) -> int:
        try:
            number = int(value)
        except (TypeError, ValueError):
            raise ValueError(f"Invalid {key}: {value!r} is not an integer")
        if number < minimum:
            raise ValueError(f"Invalid {key}: must be >= {minimum}")
        return number

    # ===== STORAGE =====

    @property
    def storage_backend(self) -> str:
        """Configured backend name (auto, sqlite or memory)."""
        return self._config["storage"]["backend"]

    @property
    def database_path(self) -> Optional[str]:
        return self._config["storage"].get("database_path") or None

    def resolve_storage_backend(self) -> str:
        """
        Resolve 'auto' to a concrete backend.

        SQLite when a database path is configured, otherwise the in-memory store.
        """
        if self.storage_backend != "auto":
            return self.storage_backend
        return "sqlite" if self.database_path else "memory"

    # ===== AI CONFIGURATION =====

    @property
    def ai_provider(self) -> str:
        return self._config["ai"]["provider"]

    @property
    def ai_model(self) -> Optional[str]:
        return self._config["ai"].get("model")

    @property
    def ai_timeout(self) -> int:
        """Seconds before an AI request is abandoned in favour of the fallback."""
        return self._config["ai"]["timeout_seconds"]

    @property
    def ai_max_retries(self) -> int:
        return self._config["ai"]["max_retries"]

    @property
    def ai_calls_per_minute(self) -> int:
        return self._config["ai"]["calls_per_minute"]

    # ===== SERVER / LOGGING =====

    @property
    def server_host(self) -> str:
        return self._config["server"]["host"]

    @property
    def server_port(self) -> int:
        return self._config["server"]["port"]

    @property
    def log_level(self) -> Optional[str]:
        return self._config["logging"].get("level")

    @property
    def json_logs(self) -> bool:
        return bool(self._config["logging"].get("json"))

    # ===== UTILITY METHODS =====

    def reload(self) -> None:
        """Reload configuration from file."""
        self._config = self._load_config()

    def to_dict(self) -> Dict[str, Any]:
        """Return a copy of the raw configuration dictionary."""
        return copy.deepcopy(self._config)

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value by dot-notation key.

        Example: config.get('ai.provider')
        """
        value: Any = self._config
        for k in key.split("."):
            if isinstance(value, dict):
                value = value.get(k)
                if value is None:
                    return default
            else:
                return default
        return value


# Global config instance
_config: Optional[Config] = None


def get_config(config_path: Optional[Path] = None) -> Config:
    """
    Get global configuration instance.
    Creates instance on first call, then returns cached instance.
    """
    global _config
    if _config is None or config_path is not None:
        _config = Config(config_path)
    return _config


def reload_config() -> None:
    """Reload configuration from file."""
    global _config
    if _config is not None:
        _config.reload()
    else:
        _config = Config()
