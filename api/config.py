"""
Environment-aware configuration.
Every key can be overridden from the environment or a .env file.
"""
import os
import re
from datetime import timedelta

from dotenv import load_dotenv

load_dotenv()  # Read .env if present

_DURATION_RE = re.compile(r"^\s*(\d+)\s*([smhd]?)\s*$")
_UNITS = {"": 1, "s": 1, "m": 60, "h": 3600, "d": 86400}


def parse_duration(value, default: timedelta) -> timedelta:
    """'15m', '7d', '2h', '3600s' or plain seconds."""
    if value is None or value == "":
        return default
    match = _DURATION_RE.match(str(value).lower())
    if not match:
        raise ValueError(f"Invalid duration: {value!r}")
    amount, unit = match.groups()
    return timedelta(seconds=int(amount) * _UNITS[unit])


def env_bool(name: str, default: bool) -> bool:
    val = os.getenv(name)
    if val is None:
        return default
    return val.lower() in ("1", "true", "yes", "on")


def env_int(name: str, default=None):
    val = os.getenv(name)
    return int(val) if val not in (None, "") else default


class BaseConfig:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")  # Set a strong key in production
    DEBUG = False
    TESTING = False
    APP_ENV = os.getenv("APP_ENV", "dev")
    API_PREFIX = os.getenv("API_PREFIX", "/api/v1")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
    # CORS: in dev we usually allow '*', in prod supply a comma-separated list in env
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")

    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///elearning.db")
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)

    # Access and refresh tokens must be signed with different secrets
    JWT_ACCESS_SECRET = os.getenv("JWT_ACCESS_SECRET", "dev-access-secret-change-me-0123456789")
    JWT_REFRESH_SECRET = os.getenv("JWT_REFRESH_SECRET", "dev-refresh-secret-change-me-0123456789")
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
    JWT_ACCESS_EXPIRES = parse_duration(os.getenv("JWT_ACCESS_EXPIRES"), timedelta(minutes=15))
    JWT_REFRESH_EXPIRES = parse_duration(os.getenv("JWT_REFRESH_EXPIRES"), timedelta(days=7))
    JWT_ISSUER = os.getenv("JWT_ISSUER", "elearning-api")

    # None keeps the argon2-cffi defaults
    ARGON2_TIME_COST = env_int("ARGON2_TIME_COST")
    ARGON2_MEMORY_COST = env_int("ARGON2_MEMORY_COST")
    ARGON2_PARALLELISM = env_int("ARGON2_PARALLELISM")

    EMAIL_BACKEND = os.getenv("EMAIL_BACKEND", "console")
    SMTP_HOST = os.getenv("SMTP_HOST", "localhost")
    SMTP_PORT = env_int("SMTP_PORT", 587)
    SMTP_USER = os.getenv("SMTP_USER", "")
    SMTP_PASS = os.getenv("SMTP_PASS", "")
    SMTP_USE_TLS = env_bool("SMTP_USE_TLS", True)
    FROM_EMAIL = os.getenv("FROM_EMAIL", "noreply@example.com")
    FROM_NAME = os.getenv("FROM_NAME", "E-Learning Platform")
    FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:3000")


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG").upper()


class TestingConfig(BaseConfig):
    TESTING = True
    DATABASE_URL = "sqlite://"
    EMAIL_BACKEND = "memory"
    LOG_LEVEL = "WARNING"
    JWT_ACCESS_SECRET = "test-access-secret-0123456789abcdef"
    JWT_REFRESH_SECRET = "test-refresh-secret-0123456789abcdef"
    # cheap hashes keep the suite fast
    ARGON2_TIME_COST = 1
    ARGON2_MEMORY_COST = 8
    ARGON2_PARALLELISM = 1


class ProductionConfig(BaseConfig):
    DEBUG = False
    EMAIL_BACKEND = os.getenv("EMAIL_BACKEND", "smtp")


def get_config(name: str | None):
    """
    Select config class.
    - If name is provided, choose by name.
    - Else choose based on APP_ENV (dev/test/prod).
    """
    env = (name or os.getenv("APP_ENV", "dev")).lower()
    if env in ["prod", "production"]:
        return ProductionConfig
    if env in ["test", "testing"]:
        return TestingConfig
    return DevelopmentConfig
