"""Application configuration module."""

import os
import re
from datetime import timedelta

_DURATION_PATTERN = re.compile(r"^\s*(\d+)\s*([smhd]?)\s*$")
_DURATION_UNITS = {"": "seconds", "s": "seconds", "m": "minutes", "h": "hours", "d": "days"}


def parse_duration(raw: str | None, default: timedelta) -> timedelta:
    """Parse values such as ``7d``, ``12h``, ``30m`` or ``3600`` into a timedelta."""

    if not raw:
        return default
    match = _DURATION_PATTERN.match(raw.lower())
    if match is None:
        raise ValueError(f"Invalid duration: {raw!r}")
    amount, unit = match.groups()
    return timedelta(**{_DURATION_UNITS[unit]: int(amount)})


def _split_list(raw: str) -> tuple[str, ...]:
    return tuple(item.strip() for item in raw.split(",") if item.strip())


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


class Config:
    """Base configuration for the Flask application."""

    # Core
    SECRET_KEY = os.getenv("SECRET_KEY", "change-me")
    APP_ENV = os.getenv("APP_ENV", "development").strip().lower()
    APP_URL = os.getenv("APP_URL", "http://localhost:3000").rstrip("/")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    # Database
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///app.db")
    SQLALCHEMY_DATABASE_URI = DATABASE_URL
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {"pool_pre_ping": True}

    # Session tokens
    JWT_SECRET_KEY = os.getenv("JWT_SECRET") or os.getenv("JWT_SECRET_KEY") or SECRET_KEY
    JWT_ACCESS_TOKEN_EXPIRES = parse_duration(os.getenv("JWT_EXPIRY"), timedelta(days=7))
    JWT_TOKEN_LOCATION = ["cookies"]
    JWT_ACCESS_COOKIE_NAME = "authToken"
    JWT_COOKIE_SECURE = APP_ENV == "production"
    JWT_COOKIE_SAMESITE = "Lax"
    JWT_COOKIE_CSRF_PROTECT = False
    JWT_SESSION_COOKIE = False

    # Verification / reset tokens
    VERIFICATION_TOKEN_TTL_MINUTES = int(os.getenv("VERIFICATION_TOKEN_TTL_MINUTES", "1440"))
    RESET_TOKEN_TTL_MINUTES = int(os.getenv("RESET_TOKEN_TTL_MINUTES", "60"))

    # Outbound mail
    MAIL_SERVER = os.getenv("MAIL_SERVER")
    MAIL_PORT = int(os.getenv("MAIL_PORT", "465"))
    MAIL_USERNAME = os.getenv("MAIL_USERNAME")
    MAIL_PASSWORD = os.getenv("MAIL_PASSWORD")
    MAIL_USE_SSL = _env_flag("MAIL_USE_SSL", "true")
    MAIL_TIMEOUT = float(os.getenv("MAIL_TIMEOUT", "10"))
    MAIL_DEFAULT_SENDER = os.getenv("MAIL_DEFAULT_SENDER", "Quizzit <no-reply@localhost>")
    MAIL_SUPPRESS_SEND = _env_flag("MAIL_SUPPRESS_SEND")

    # Session guard
    PROTECTED_PATH_PREFIXES = _split_list(
        os.getenv("PROTECTED_PATH_PREFIXES", "/dashboard,/quiz,/results,/profile")
    )
    AUTH_PAGE_PREFIXES = _split_list(
        os.getenv("AUTH_PAGE_PREFIXES", "/login,/register,/verify-email")
    )
    LOGIN_PATH = os.getenv("LOGIN_PATH", "/login")
    LANDING_PATH = os.getenv("LANDING_PATH", "/dashboard")

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
