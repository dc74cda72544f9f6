"""Application configuration module."""

import os
from datetime import timedelta

# Only acceptable outside production; create_app refuses it when APP_ENV=production.
DEV_JWT_SECRET = "dev-only-jwt-secret-do-not-use-in-production"


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


class Config:
    """Base configuration for the Flask application."""

    # Core
    APP_ENV = os.getenv("APP_ENV", "development").strip().lower()
    SECRET_KEY = os.getenv("SECRET_KEY", "change-me")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    EXPOSE_ERROR_DETAILS = _env_flag("EXPOSE_ERROR_DETAILS")

    # Session tokens
    JWT_SECRET_KEY = os.getenv("JWT_SECRET") or DEV_JWT_SECRET
    JWT_ALGORITHM = "HS256"
    SESSION_LIFETIME = timedelta(days=30)
    JWT_ACCESS_TOKEN_EXPIRES = SESSION_LIFETIME
    AUTH_COOKIE_SECURE = APP_ENV == "production"
    AUTH_COOKIE_SAMESITE = "Strict"

    # Account verification
    VERIFICATION_CODE_TTL = timedelta(hours=24)

    # Database
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///app.db")
    SQLALCHEMY_DATABASE_URI = DATABASE_URL
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {"pool_pre_ping": True}

    # CORS
    _raw_origins = os.getenv("ORIGINS", "*")
    if _raw_origins.strip() == "*":
        CORS_ORIGINS = "*"
    else:
        CORS_ORIGINS = [o.strip() for o in _raw_origins.split(",") if o.strip()]

    # Rate limiting
    RATE_LIMIT = os.getenv("RATE_LIMIT", "60 per minute")
    RATELIMIT_HEADERS_ENABLED = True
    RATELIMIT_STORAGE_URI = os.getenv("RATELIMIT_STORAGE_URI", "memory://")
    RATELIMIT_KEY_PREFIX = os.getenv("RATELIMIT_KEY_PREFIX", "")
