"""
Centralized configuration management with startup validation.

Defines the environment variables the service reads and provides safe
configuration loading with validation and logging.
"""
import logging
import os
import re
from dataclasses import dataclass, field
from typing import Optional

from history.migration import DEFAULT_LEGACY_LENGTH_FLOOR

logger = logging.getLogger(__name__)

# =============================================================================
# Constants
# =============================================================================

SERVICE_NAME = "note-history"
SERVICE_VERSION = "0.1.0"

# Default values
DEFAULT_DATABASE_URL = "sqlite:///./note_history.db"
DEFAULT_JWT_SECRET = "dev-secret-change-in-production"
DEFAULT_MAX_REQUEST_SIZE_BYTES = 1_048_576  # 1MB
MIN_REQUEST_SIZE_BYTES = 1024  # 1KB minimum
DEFAULT_LOG_LEVEL = "INFO"

# Environments where the development JWT secret is acceptable
DEV_ENVIRONMENTS = ("development", "test")

# Sensitive substrings that should never appear in logs
SENSITIVE_SUBSTRINGS = ("key", "token", "secret", "password", "credential", "auth")


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(Exception):
    """Raised when required configuration is missing or invalid."""

    pass


# =============================================================================
# Configuration Dataclass
# =============================================================================


@dataclass
class AppConfig:
    """Application configuration loaded from environment."""

    # Service info
    service_name: str = SERVICE_NAME
    service_version: str = SERVICE_VERSION
    environment: str = "development"
    log_level: str = DEFAULT_LOG_LEVEL

    # Storage
    database_url: str = DEFAULT_DATABASE_URL

    # Auth (never logged; snapshot reports presence only)
    jwt_secret: str = field(default=DEFAULT_JWT_SECRET, repr=False)
    jwt_secret_present: bool = False

    # Security settings
    max_request_size_bytes: int = DEFAULT_MAX_REQUEST_SIZE_BYTES

    # History ids with length <= floor skip legacy decoding
    legacy_id_length_floor: int = DEFAULT_LEGACY_LENGTH_FLOOR

    # Warnings collected during config load
    warnings: list = field(default_factory=list)


# =============================================================================
# Configuration Loading
# =============================================================================


def _parse_int_env(
    name: str, default: int, min_value: Optional[int] = None
) -> tuple[int, Optional[str]]:
    """
    Parse an integer environment variable with validation.

    Returns (value, warning_message).
    On invalid input, returns default with a warning.
    """
    raw = os.environ.get(name)
    if raw is None:
        return default, None

    try:
        value = int(raw)
    except ValueError:
        warning = f"{name}='{raw}' is not a valid integer; using default {default}"
        return default, warning

    if min_value is not None and value < min_value:
        warning = f"{name}={value} is below minimum {min_value}; using default {default}"
        return default, warning

    return value, None


def _parse_log_level(raw: Optional[str]) -> tuple[str, Optional[str]]:
    """Validate a LOG_LEVEL value against the logging module's level names."""
    if not raw:
        return DEFAULT_LOG_LEVEL, None
    level = raw.strip().upper()
    if level not in ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"):
        return DEFAULT_LOG_LEVEL, f"LOG_LEVEL='{raw}' is not a valid level; using {DEFAULT_LOG_LEVEL}"
    return level, None


def load_config(fail_fast: bool = True) -> AppConfig:
    """
    Load and validate application configuration from environment.

    Args:
        fail_fast: If True, raise ConfigurationError on critical issues.
                   If False, collect warnings and continue.

    Returns:
        AppConfig instance with validated configuration.

    Raises:
        ConfigurationError: If required configuration is missing/invalid
                           and fail_fast is True.
    """
    warnings = []

    environment = os.environ.get("ENV", "development")

    log_level, level_warning = _parse_log_level(os.environ.get("LOG_LEVEL"))
    if level_warning:
        warnings.append(level_warning)

    database_url = os.environ.get("HISTORY_DATABASE_URL", DEFAULT_DATABASE_URL)
    if not database_url.strip():
        if fail_fast:
            raise ConfigurationError("HISTORY_DATABASE_URL is set but empty")
        warnings.append("HISTORY_DATABASE_URL is empty; using default")
        database_url = DEFAULT_DATABASE_URL

    jwt_secret = os.environ.get("HISTORY_JWT_SECRET", "")
    jwt_secret_present = bool(jwt_secret)
    if not jwt_secret_present:
        jwt_secret = DEFAULT_JWT_SECRET
        if environment not in DEV_ENVIRONMENTS:
            warnings.append(
                "HISTORY_JWT_SECRET is not set; using the development secret "
                f"in environment '{environment}'"
            )

    max_request_size, size_warning = _parse_int_env(
        "MAX_REQUEST_SIZE_BYTES",
        DEFAULT_MAX_REQUEST_SIZE_BYTES,
        min_value=MIN_REQUEST_SIZE_BYTES,
    )
    if size_warning:
        warnings.append(size_warning)

    length_floor, floor_warning = _parse_int_env(
        "HISTORY_LEGACY_ID_LENGTH_FLOOR",
        DEFAULT_LEGACY_LENGTH_FLOOR,
        min_value=0,
    )
    if floor_warning:
        warnings.append(floor_warning)

    # Log warnings
    for warning in warnings:
        logger.warning(f"[CONFIG] {warning}")

    return AppConfig(
        environment=environment,
        log_level=log_level,
        database_url=database_url,
        jwt_secret=jwt_secret,
        jwt_secret_present=jwt_secret_present,
        max_request_size_bytes=max_request_size,
        legacy_id_length_floor=length_floor,
        warnings=warnings,
    )


def log_config_snapshot(config: AppConfig) -> str:
    """
    Generate and log a safe configuration snapshot.

    Returns the snapshot string for testing purposes.
    Never logs actual secret values - only boolean presence flags.
    """
    snapshot = (
        f"[STARTUP] service={config.service_name} "
        f"version={config.service_version} "
        f"environment={config.environment} "
        f"log_level={config.log_level} "
        f"database_backend={config.database_url.split(':', 1)[0]} "
        f"max_request_size_bytes={config.max_request_size_bytes} "
        f"legacy_id_length_floor={config.legacy_id_length_floor} "
        f"jwt_secret_present={config.jwt_secret_present}"
    )
    logger.info(snapshot)
    return snapshot


def validate_config_snapshot_safety(snapshot: str) -> bool:
    """
    Validate that a config snapshot doesn't contain sensitive values.

    Returns True if safe, False if potentially unsafe.
    """
    snapshot_lower = snapshot.lower()

    # We allow "secret_present=" but not "secret=" followed by a non-boolean value
    for sensitive in SENSITIVE_SUBSTRINGS:
        pattern = rf"{sensitive}=(?!true|false)"
        if re.search(pattern, snapshot_lower):
            return False

    return True


# Module-level singleton config
_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """Get the global config singleton."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reset_config() -> None:
    """Drop the cached config (for testing)."""
    global _config
    _config = None
