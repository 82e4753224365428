"""
Centralized configuration module for application-wide settings.

Values are read from environment variables (optionally loaded from a
.env file by the application factory) and cached at import time, so
tests can override them by setting the environment before import or by
calling the getter functions directly.
"""

import logging
import os

logger = logging.getLogger(__name__)

_TRUTHY = ("true", "1", "yes")


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in _TRUTHY


# ===========================
# Database Configuration
# ===========================


def get_database_url() -> str:
    """
    Get the database URL used by the durable appointment store.

    Environment Variables:
        DATABASE_URL: SQLAlchemy URL
            Default: 'sqlite:///./dental_manager.db'
            Tests: 'sqlite:///:memory:'
    """
    return os.getenv("DATABASE_URL", "sqlite:///./dental_manager.db")


# ===========================
# Email Configuration
# ===========================


def get_email_enabled() -> bool:
    """
    Get whether outbound appointment emails are rendered and dispatched.

    Environment Variables:
        EMAIL_ENABLED: Whether notification emails are sent
            Default: 'true'

    Truthy values: "true", "1", "yes" (case-insensitive)
    """
    return _env_flag("EMAIL_ENABLED", "true")


def get_email_from_address() -> str:
    """Sender address used in rendered notification emails."""
    return os.getenv("EMAIL_FROM_ADDRESS", "noreply@dental-manager.local")


EMAIL_ENABLED = get_email_enabled()
EMAIL_FROM_ADDRESS = get_email_from_address()


def log_email_config():
    """
    Log the active email configuration.

    Should be called during application startup to provide visibility
    into whether notifications will be sent.
    """
    logger.info(
        "Email configuration initialized",
        extra={
            "context": {
                "email_enabled": EMAIL_ENABLED,
                "from_address": EMAIL_FROM_ADDRESS,
            }
        },
    )


# ===========================
# Logging Configuration
# ===========================


def get_log_level() -> str:
    return os.getenv("LOG_LEVEL", "INFO").upper()


def get_log_json() -> bool:
    return _env_flag("LOG_JSON", "false")


def get_log_to_file() -> bool:
    return _env_flag("LOG_TO_FILE", "false")


def get_seed_demo_data() -> bool:
    """Seed a demo dentist and customer at startup (local development)."""
    return _env_flag("SEED_DEMO_DATA", "false")
