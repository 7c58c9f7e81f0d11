"""Application settings with environment-based simple classes."""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Final

from dotenv import load_dotenv

# Public selector env var (keep neutral name to avoid collisions)
ENV_VAR: Final[str] = "APP_ENV"  # 'development' | 'testing' | 'production'

DEFAULT_ACCESS_EXPIRATION_MS: Final[int] = 3_600_000  # 1 hour
DEFAULT_REFRESH_EXPIRATION_MS: Final[int] = 604_800_000  # 7 days

# Loads .env in development (no-op when missing)
load_dotenv()


def env_bool(name: str, default: bool = False) -> bool:
    """Parse a boolean flag from an environment variable.

    Parameters
    ----------
    name: str
        Environment variable to inspect.
    default: bool, optional
        Value returned when the variable is unset. Defaults to ``False``.

    Returns
    -------
    bool
        ``True`` if the value resembles ``{"1", "true", "yes", "y", "on"}``
        ignoring case; otherwise ``False`` or ``default`` when missing.
    """
    val = os.getenv(name)
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "y", "on"}


def env_int(name: str, default: int) -> int:
    """Parse an integer from an environment variable.

    Parameters
    ----------
    name: str
        Environment variable to inspect.
    default: int
        Value returned when the variable is unset or blank.

    Returns
    -------
    int
        Parsed value.

    Raises
    ------
    ValueError
        If the variable is set but is not an integer. Misconfigured lifetimes
        must stop the process rather than silently fall back.
    """
    val = os.getenv(name)
    if val is None or not val.strip():
        return default
    return int(val.strip())


class BaseConfig:
    """Base configuration shared across environments.

    Attributes
    ----------
    API_BASE_PREFIX: str
        Root path for registering API blueprints.
    JWT_SECRET: str
        Passphrase the token service derives its HMAC key from. Must encode to
        at least 32 bytes; empty by default so a missing secret aborts startup.
    JWT_EXPIRATION_MS: int
        Access-token lifetime in milliseconds (``JWT_EXPIRATION``).
    JWT_REFRESH_EXPIRATION_MS: int
        Refresh-token lifetime in milliseconds (``JWT_REFRESH_EXPIRATION``).
    JSON_SORT_KEYS: bool
        Keeps JSON output order stable when ``False``.
    PROPAGATE_EXCEPTIONS: bool
        Controls Flask error propagation.
    LOG_LEVEL: str
        Root logging verbosity (``INFO`` by default).
    DEBUG: bool
        Toggles Flask debug mode.
    TESTING: bool
        Enables Flask testing mode when ``True``.

    Notes
    -----
    Values are sourced from environment variables when the class body is
    evaluated, enabling configuration without code changes. No value can be
    changed on a running service.
    """

    API_BASE_PREFIX = "/api"

    # Secrets / token lifetimes
    JWT_SECRET = os.getenv("JWT_SECRET", "")
    JWT_EXPIRATION_MS = env_int("JWT_EXPIRATION", DEFAULT_ACCESS_EXPIRATION_MS)
    JWT_REFRESH_EXPIRATION_MS = env_int("JWT_REFRESH_EXPIRATION", DEFAULT_REFRESH_EXPIRATION_MS)

    # Flask & JSON
    JSON_SORT_KEYS = False
    PROPAGATE_EXCEPTIONS = False

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Flask built-ins
    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Configuration tailored for local development.

    Notes
    -----
    Enables debug mode by default. The secret still has to come from the
    environment or a ``.env`` file.
    """

    DEBUG = env_bool("FLASK_DEBUG", True)


class TestingConfig(BaseConfig):
    """Configuration for automated test runs.

    Notes
    -----
    - Forces ``TESTING`` mode and disables debug logs.
    - Ships a fixed 64-byte secret (HS512 block size) unless
      ``TEST_JWT_SECRET`` is set.
    - Propagates exceptions so pytest can surface tracebacks directly.
    """

    TESTING = True
    DEBUG = False
    JWT_SECRET = os.getenv(
        "TEST_JWT_SECRET",
        "testing-only-secret-0123456789abcdef-0123456789abcdef-0123456789",
    )
    JWT_EXPIRATION_MS = DEFAULT_ACCESS_EXPIRATION_MS
    JWT_REFRESH_EXPIRATION_MS = DEFAULT_REFRESH_EXPIRATION_MS
    LOG_LEVEL = "WARNING"
    PROPAGATE_EXCEPTIONS = True


class ProductionConfig(BaseConfig):
    """Configuration defaults for production deployments.

    Notes
    -----
    Keeps debug disabled while relying on WSGI-level log configuration for
    noise control.
    """

    DEBUG = False
    PROPAGATE_EXCEPTIONS = False


# Map names -> classes (simple, explicit)
CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config() -> type[BaseConfig]:
    """Return the configuration class inferred from ``APP_ENV``.

    Returns
    -------
    type[BaseConfig]
        Class to pass to :meth:`flask.Config.from_object`.

    Notes
    -----
    Falls back to :class:`DevelopmentConfig` when ``APP_ENV`` is unset or
    unknown.
    """
    name = os.getenv(ENV_VAR, "development").strip().lower()
    return CONFIG_MAP.get(name, DevelopmentConfig)
