"""
AI Provider Factory - Creates the appropriate AI provider based on configuration

Reads the 'ai.provider' setting and instantiates the matching provider class.
"""

import importlib
import os
from typing import Any, Dict, Optional

from hireprep.logging_config import get_logger

from .base import AIProvider

logger = get_logger(__name__)

# Registry of available providers
PROVIDERS = {
    "claude": "hireprep.ai.claude.ClaudeProvider",
    "gemini": "hireprep.ai.gemini.GeminiProvider",
}

# Environment variables that can carry each provider's API key
PROVIDER_KEYS = {
    "claude": ("ANTHROPIC_API_KEY",),
    "gemini": ("GEMINI_API_KEY", "GOOGLE_API_KEY"),
}

DEFAULT_PROVIDER = "gemini"


def get_provider(config: Optional[Dict[str, Any]] = None) -> AIProvider:
    """
    Get the configured AI provider instance.

    Args:
        config: Configuration dict. If not provided, reads from
                hireprep.config.get_config()

    Returns:
        AIProvider: An instance of the configured AI provider

    Raises:
        ValueError: If the provider is unknown or its API key is missing
        ImportError: If the provider's package is not installed

    Example:
        >>> provider = get_provider({'ai': {'provider': 'claude'}})
        >>> provider.provider_name
        'claude'
    """
    if config is None:
        from hireprep.config import get_config

        config = get_config().to_dict()

    provider_name = (config.get("ai", {}).get("provider") or DEFAULT_PROVIDER).lower()

    if provider_name not in PROVIDERS:
        available = ", ".join(PROVIDERS.keys())
        raise ValueError(f"Unknown AI provider: '{provider_name}'. Available providers: {available}")

    module_path, class_name = PROVIDERS[provider_name].rsplit(".", 1)

    try:
        module = importlib.import_module(module_path)
    except ImportError as e:
        logger.error(f"Failed to import {provider_name} provider: {e}")
        raise ImportError(
            f"Failed to load {provider_name} provider. "
            f"Ensure the required package is installed. Error: {e}"
        )

    return getattr(module, class_name)(config)


def has_api_key(provider_name: str) -> bool:
    """Whether an API key for the provider is present in the environment."""
    return any(os.environ.get(var) for var in PROVIDER_KEYS.get(provider_name, ()))


def get_provider_info() -> Dict[str, Dict[str, Any]]:
    """
    Get information about all supported providers.

    Example:
        >>> get_provider_info()["claude"]["has_key"]
        True
    """
    return {
        "claude": {
            "name": "Claude (Anthropic)",
            "env_vars": list(PROVIDER_KEYS["claude"]),
            "has_key": has_api_key("claude"),
            "default_model": "claude-sonnet-4-20250514",
        },
        "gemini": {
            "name": "Gemini (Google)",
            "env_vars": list(PROVIDER_KEYS["gemini"]),
            "has_key": has_api_key("gemini"),
            "default_model": "gemini-2.5-flash",
        },
    }
