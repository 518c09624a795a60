"""
Centralized configuration for the course archive export service.

Settings come from environment variables (loaded from .env / .env.local by
the entry points). Components never read the environment themselves: they
receive an ExportConfig at construction.
"""

import os
from dataclasses import dataclass

# Download links can be used for up to 4 hours
LINK_EXPIRY_SECONDS = 4 * 60 * 60


def is_dev_mode() -> bool:
    """Check if running in development mode (DEV_MODE env)."""
    return os.getenv("DEV_MODE", "").lower() in ("true", "1", "yes")


def get_site_url() -> str:
    """Base URL used for hrefs inside metadata.xml and download links."""
    return os.environ.get("SITE_URL", "http://localhost:8000").rstrip("/")


@dataclass(frozen=True)
class ExportConfig:
    """Settings consumed by the batch export and the download tokens."""

    salt: str
    time_limit_seconds: int = 300
    delay_ms: int = 0
    interval_minutes: int = 5
    site_url: str = "http://localhost:8000"
    link_expiry_seconds: int = LINK_EXPIRY_SECONDS


def get_export_config() -> ExportConfig:
    """
    Build the export configuration from the environment.

    Raises:
        ValueError: If EXPORT_SALT is not set (tokens cannot be signed)
    """
    salt = os.environ.get("EXPORT_SALT")
    if not salt:
        raise ValueError("EXPORT_SALT environment variable not set")

    return ExportConfig(
        salt=salt,
        time_limit_seconds=int(os.getenv("EXPORT_TIME_LIMIT_SECONDS", "300")),
        delay_ms=int(os.getenv("EXPORT_DELAY_MS", "0")),
        interval_minutes=int(os.getenv("EXPORT_INTERVAL_MINUTES", "5")),
        site_url=get_site_url(),
    )


# Required environment variables
# Format: (name, description, required_in_dev)
REQUIRED_ENV_VARS = [
    ("DATABASE_URL", "PostgreSQL connection string", True),
    ("JWT_SECRET", "Secret key for session JWTs", True),
    ("EXPORT_SALT", "Secret used to sign archive download links", True),
    ("SENTRY_DSN", "Sentry error reporting", False),
]


def check_required_env_vars() -> tuple[bool, list[str]]:
    """
    Check that required environment variables are set.

    Returns:
        (all_ok, warnings): Tuple of success flag and list of warning messages
    """
    warnings = []
    errors = []
    in_dev = is_dev_mode()

    for name, description, required_in_dev in REQUIRED_ENV_VARS:
        if os.environ.get(name):
            continue
        if required_in_dev or not in_dev:
            if required_in_dev:
                errors.append(f"  ✗ {name}: Not set ({description})")
            else:
                warnings.append(f"  ⚠ {name}: Not set ({description})")

    if errors:
        for error in errors:
            print(error)
        return False, warnings

    return True, warnings
