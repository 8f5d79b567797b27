"""Application settings with environment-based simple classes."""

from __future__ import annotations

import os
import re
from collections.abc import Mapping
from datetime import timedelta
from typing import Any, Final

from dotenv import load_dotenv

# Public selector env var (keep neutral name to avoid collisions)
ENV_VAR: Final[str] = "APP_ENV"  # 'development' | 'testing' | 'production'

# Placeholder secrets. Never valid outside development and tests.
DEFAULT_JWT_SECRET: Final[str] = "waqf-jwt-secret"
DEFAULT_JWT_REFRESH_SECRET: Final[str] = "waqf-refresh-secret"
DEFAULT_SECRET_KEY: Final[str] = "CHANGE_ME"

_DURATION_RE = re.compile(r"^\s*(\d+)\s*([smhd]?)\s*$", re.IGNORECASE)
_DURATION_UNITS = {"s": "seconds", "m": "minutes", "h": "hours", "d": "days", "": "seconds"}

# Load .env in development (no-op when the file is missing)
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


def parse_duration(raw: str) -> timedelta:
    """Convert a compact duration literal into a :class:`~datetime.timedelta`.

    Accepted forms are an integer followed by an optional unit among
    ``s``, ``m``, ``h`` and ``d`` (``"15m"``, ``"7d"``, ``"3600"``).

    :param raw: Duration literal.
    :returns: Parsed duration.
    :raises ValueError: If the literal is not understood.
    """
    match = _DURATION_RE.match(raw or "")
    if not match:
        raise ValueError(f"Invalid duration literal: {raw!r}")
    amount, unit = match.groups()
    return timedelta(**{_DURATION_UNITS[unit.lower()]: int(amount)})


def env_duration(name: str, default: str) -> timedelta:
    """Parse a duration environment variable using :func:`parse_duration`.

    Parameters
    ----------
    name: str
        Environment variable to inspect.
    default: str
        Literal used when the variable is unset or blank.

    Returns
    -------
    datetime.timedelta
        Parsed lifetime.
    """
    val = os.getenv(name)
    return parse_duration(val if val and val.strip() else default)


class BaseConfig:
    """Base configuration shared across environments.

    Attributes
    ----------
    API_BASE_PREFIX: str
        Root path for registering API blueprints.
    SECRET_KEY: str
        Flask secret used for session signing.
    JWT_SECRET_KEY: str
        Key used by ``flask-jwt-extended`` for signing access tokens.
    JWT_REFRESH_SECRET_KEY: str
        Independent key signing refresh tokens.
    JWT_ACCESS_TOKEN_EXPIRES / JWT_REFRESH_TOKEN_EXPIRES: timedelta
        Token lifetimes (``JWT_EXPIRES_IN`` / ``JWT_REFRESH_EXPIRES_IN``).
    REFRESH_TOKEN_BACKEND: str
        ``"sql"`` (default) or ``"redis"`` for the refresh token store.
    REDIS_URL: str | None
        Connection string used when the Redis backend is selected.
    PASSWORD_HASH_METHOD: str
        ``werkzeug.security`` method string carrying the hash work factor.
    PASSWORD_RESET_EXPIRES: timedelta
        Lifetime of forgotten-password tokens.
    SQLALCHEMY_DATABASE_URI: str
        Database connection string consumed by SQLAlchemy.
    LOG_LEVEL: str
        Root logging verbosity (``INFO`` by default).
    CORS_ORIGINS: str
        Comma-separated list of allowed origins for CORS.

    Notes
    -----
    Values are primarily sourced from environment variables, enabling
    configuration without code changes.
    """

    API_BASE_PREFIX = "/api"
    APP_VERSION = os.getenv("APP_VERSION", "dev")
    APP_COMMIT = os.getenv("APP_COMMIT", "unknown")

    # Secrets / security
    SECRET_KEY = os.getenv("SECRET_KEY", DEFAULT_SECRET_KEY)
    JWT_SECRET_KEY = os.getenv("JWT_SECRET", DEFAULT_JWT_SECRET)
    JWT_REFRESH_SECRET_KEY = os.getenv("JWT_REFRESH_SECRET", DEFAULT_JWT_REFRESH_SECRET)
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
    JWT_TOKEN_LOCATION = ["headers"]
    JWT_ACCESS_TOKEN_EXPIRES = env_duration("JWT_EXPIRES_IN", "7d")
    JWT_REFRESH_TOKEN_EXPIRES = env_duration("JWT_REFRESH_EXPIRES_IN", "30d")

    PASSWORD_HASH_METHOD = os.getenv("PASSWORD_HASH_METHOD", "scrypt:32768:8:1")
    PASSWORD_RESET_EXPIRES = env_duration("PASSWORD_RESET_EXPIRES_IN", "1h")

    # Refresh token persistence
    REFRESH_TOKEN_BACKEND = os.getenv("REFRESH_TOKEN_BACKEND", "sql").strip().lower()
    REDIS_URL = os.getenv("REDIS_URL") or None

    # DB
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///./dev.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)

    # Flask & JSON
    JSON_SORT_KEYS = False
    PROPAGATE_EXCEPTIONS = False

    # Logging, CORS & proxy
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS = os.getenv("CORS_ORIGINS") or os.getenv("FRONTEND_URL", "http://localhost:3000")
    USE_PROXYFIX = env_bool("USE_PROXYFIX", True)

    # Flask built-ins
    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Configuration tailored for local development.

    Notes
    -----
    Enables debug mode by default and honors ``SQLALCHEMY_ECHO`` for verbose
    SQL logging when requested.
    """

    DEBUG = env_bool("FLASK_DEBUG", True)
    CORS_MAX_AGE = 600  # 10 minutes


class TestingConfig(BaseConfig):
    """Configuration for automated test runs.

    Notes
    -----
    - Forces ``TESTING`` mode and disables debug logs.
    - Uses an in-memory SQLite database unless ``TEST_DATABASE_URL`` is set.
    - Uses a cheap hash method so the suite stays fast.
    """

    TESTING = True
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    PASSWORD_HASH_METHOD = "pbkdf2:sha256:1000"
    REFRESH_TOKEN_BACKEND = "sql"
    REDIS_URL = None
    USE_PROXYFIX = False


class ProductionConfig(BaseConfig):
    """Configuration defaults for production deployments.

    Notes
    -----
    Keeps debug and SQL echoing disabled. :func:`validate_secrets` refuses the
    placeholder secrets for this class.
    """

    DEBUG = False
    SQLALCHEMY_ECHO = False
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


def validate_secrets(config: Mapping[str, Any]) -> None:
    """Reject placeholder secrets outside debug and testing runs.

    :param config: Loaded Flask configuration.
    :raises RuntimeError: If a placeholder secret reaches a production config.
    """
    if config.get("DEBUG") or config.get("TESTING"):
        return
    placeholders = {
        "SECRET_KEY": DEFAULT_SECRET_KEY,
        "JWT_SECRET_KEY": DEFAULT_JWT_SECRET,
        "JWT_REFRESH_SECRET_KEY": DEFAULT_JWT_REFRESH_SECRET,
    }
    offending = sorted(key for key, value in placeholders.items() if config.get(key) == value)
    if offending:
        raise RuntimeError(f"Refusing to start with placeholder secrets: {', '.join(offending)}")
    if config.get("JWT_SECRET_KEY") == config.get("JWT_REFRESH_SECRET_KEY"):
        raise RuntimeError("JWT_SECRET_KEY and JWT_REFRESH_SECRET_KEY must differ.")
