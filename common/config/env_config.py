# common/config/env_config.py
import os
from typing import Optional
from common.api_error import ConfigurationError


def get_env(name: str, default: Optional[str] = None) -> Optional[str]:
    """
    Get env variable with optional default. Blank values count as unset.
    """
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip()


def require_env(name: str) -> str:
    """
    Get required environment variable or raise immediately.
    """
    value = get_env(name)
    if not value:
        raise ConfigurationError(f"Missing required env variable: {name}")
    return value


def get_int_env(name: str, default: Optional[int] = None) -> Optional[int]:
    """Integer env variable; a non-numeric value is a configuration error."""
    raw = get_env(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got: {raw!r}") from exc


__all__ = ["require_env", "get_env", "get_int_env"]
