"""Environment-driven settings, one class per deployment flavour."""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Final

from dotenv import load_dotenv

# Selects the config class: 'development' | 'testing' | 'production'
ENV_VAR: Final[str] = "APP_ENV"

TRUTHY: Final[frozenset[str]] = frozenset({"1", "true", "yes", "y", "on"})

# A local .env is optional
load_dotenv()


def env_bool(name: str, default: bool = False) -> bool:
    """Read a yes/no flag such as ``USE_PROXYFIX=on``.

    Returns ``default`` when ``name`` is unset; any other value counts as
    ``True`` only when it is one of :data:`TRUTHY` (case and surrounding
    blanks ignored).
    """
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in TRUTHY


def env_int(name: str, default: int) -> int:
    """Read a whole number such as a token lifetime in seconds.

    Parameters
    ----------
    name: str
        Variable name.
    default: int
        Used when the variable is unset or blank.

    Raises
    ------
    ValueError
        The variable holds something other than an integer; the message
        names the variable so a bad deployment fails loudly at import.
    """
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw.strip())
    except ValueError as exc:
        raise ValueError(f"Environment variable {name} must be an integer, got {raw!r}") from exc


class BaseConfig:
    """Settings every environment starts from.

    Attributes
    ----------
    API_BASE_PREFIX: str
        Optional path segment in front of ``/customers`` and ``/vendors``.
    APP_BASE_URL: str
        Public origin of this service; the OAuth ``redirect_uri`` is built
        from it.
    AUTH_TOKEN_ISSUER: str
        ``iss`` written into customer tokens.
    AUTH_TOKEN_SECRET_KEY: str
        HS256 secret for customer tokens. The default only suits local
        development.
    AUTH_ACCESS_TOKEN_LIFETIME, AUTH_REFRESH_TOKEN_LIFETIME: int
        Token lifetimes in seconds (one hour and one day by default).
    SHOPIFY_API_VERSION: str
        Version segment of Admin and Storefront API URLs.
    SHOPIFY_SCOPES: str
        Comma-separated scopes requested on install and delegated to the
        storefront token.
    SHOPIFY_HTTP_TIMEOUT: int
        Seconds before an upstream call is abandoned.
    SQLALCHEMY_DATABASE_URI: str
        Read from ``DATABASE_URL``.
    LOG_LEVEL: str
        Root logger level.
    CORS_ORIGINS: str
        Comma-separated storefront origins, or ``*``.
    """

    API_BASE_PREFIX = os.getenv("API_BASE_PREFIX", "")
    APP_BASE_URL = os.getenv("APP_BASE_URL", "http://localhost:8080")
    APP_VERSION = os.getenv("APP_VERSION", "dev")

    SECRET_KEY = os.getenv("SECRET_KEY", "CHANGE_ME")

    # Customer tokens
    AUTH_TOKEN_ISSUER = os.getenv("AUTH_TOKEN_ISSUER", "API")
    AUTH_TOKEN_SECRET_KEY = os.getenv("AUTH_TOKEN_SECRET_KEY", "2fg6wuCkkQ4HNjCo")
    AUTH_ACCESS_TOKEN_LIFETIME = env_int("AUTH_ACCESS_TOKEN_LIFETIME", 3600)
    AUTH_REFRESH_TOKEN_LIFETIME = env_int("AUTH_REFRESH_TOKEN_LIFETIME", 86400)

    # Shopify
    SHOPIFY_API_VERSION = os.getenv("SHOPIFY_API_VERSION", "2023-01")
    SHOPIFY_SCOPES = os.getenv("SHOPIFY_SCOPES", "read_customers")
    SHOPIFY_HTTP_TIMEOUT = env_int("SHOPIFY_HTTP_TIMEOUT", 10)

    # Database
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///./dev.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)

    JSON_SORT_KEYS = False
    PROPAGATE_EXCEPTIONS = False
    USE_PROXYFIX = env_bool("USE_PROXYFIX", True)

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")

    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Local runs: debug mode and debug logs unless overridden."""

    DEBUG = env_bool("FLASK_DEBUG", True)
    LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
    CORS_MAX_AGE = 600


class TestingConfig(BaseConfig):
    """Deterministic settings for the test suite.

    In-memory SQLite (or ``TEST_DATABASE_URL``), fixed token secret and
    lifetimes, no proxy middleware, and a fake public origin so redirect
    URLs are predictable.
    """

    TESTING = True
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    SQLALCHEMY_ECHO = False
    PROPAGATE_EXCEPTIONS = True
    LOG_LEVEL = "WARNING"

    API_BASE_PREFIX = ""
    APP_BASE_URL = "http://testserver"
    AUTH_TOKEN_ISSUER = "API"
    AUTH_TOKEN_SECRET_KEY = "test-secret"
    AUTH_ACCESS_TOKEN_LIFETIME = 3600
    AUTH_REFRESH_TOKEN_LIFETIME = 86400
    SHOPIFY_API_VERSION = "2023-01"
    SHOPIFY_SCOPES = "read_customers"
    USE_PROXYFIX = False


class ProductionConfig(BaseConfig):
    """Deployed behind gunicorn; nothing verbose, nothing propagated."""

    SQLALCHEMY_ECHO = False
    PROPAGATE_EXCEPTIONS = False


CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config() -> type[BaseConfig]:
    """Pick the config class named by ``APP_ENV``; development when unknown."""
    name = os.getenv(ENV_VAR, "development").strip().lower()
    return CONFIG_MAP.get(name, DevelopmentConfig)
