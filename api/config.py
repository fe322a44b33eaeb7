"""
Environment-aware configuration.
Values come from the process environment (and .env via python-dotenv).
The database URL is read by DBStorage itself (models/db_storage.py).
"""
import logging
import os
from dotenv import load_dotenv

from utils.durations import is_valid_duration

load_dotenv()  # Read .env if present

DEFAULT_JWT_SECRET = "dev-secret-change-me"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes")


def _int(name: str, default: str):
    # malformed values are kept as-is so validate_config can report them
    raw = os.getenv(name, default)
    try:
        return int(raw)
    except ValueError:
        return raw


class ConfigError(Exception):
    """Raised at startup when the configuration is unusable."""

    def __init__(self, issues):
        self.issues = list(issues)
        super().__init__("Invalid configuration:\n" + "\n".join(f"  - {i}" for i in self.issues))


class BaseConfig:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")  # Set a strong key in production
    DEBUG = False
    TESTING = False
    # CORS: comma-separated list of origins, '*' allows all
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:3000")
    APP_ENV = os.getenv("APP_ENV", "dev")
    API_PREFIX = "/api/v1"
    # jwt configurations
    JWT_ENABLED = _flag("JWT_ENABLED", "true")
    JWT_SECRET = os.getenv("JWT_SECRET", DEFAULT_JWT_SECRET)
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
    JWT_ISSUER = os.getenv("JWT_ISSUER", "starter-api")
    JWT_EXPIRATION = os.getenv("JWT_EXPIRATION", "7d")
    JWT_REFRESH_EXPIRATION = os.getenv("JWT_REFRESH_EXPIRATION", "30d")
    # docs
    SWAGGER_ENABLED = _flag("SWAGGER_ENABLED", "true")
    # logging / observability
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
    DB_QUERY_LOG = _flag("DB_QUERY_LOG", "false")
    DB_SLOW_QUERY_THRESHOLD_MS = _int("DB_SLOW_QUERY_THRESHOLD_MS", "1000")
    QUERY_METRICS_MAX_ENTRIES = _int("QUERY_METRICS_MAX_ENTRIES", "1000")
    # throttling: at most THROTTLE_LIMIT requests per client every THROTTLE_TTL seconds
    THROTTLE_TTL = _int("THROTTLE_TTL", "60")
    THROTTLE_LIMIT = _int("THROTTLE_LIMIT", "10")
    RATELIMIT_ENABLED = _flag("RATELIMIT_ENABLED", "true")
    RATELIMIT_STORAGE_URI = os.getenv("RATELIMIT_STORAGE_URI", "memory://")
    RATELIMIT_HEADERS_ENABLED = True


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    APP_ENV = "dev"
    LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG").upper()


class TestingConfig(BaseConfig):
    TESTING = True
    APP_ENV = "test"
    JWT_ENABLED = True
    JWT_SECRET = "test-secret-key-for-testing-only"
    JWT_EXPIRATION = "15m"
    JWT_REFRESH_EXPIRATION = "1d"
    SWAGGER_ENABLED = False
    LOG_LEVEL = "WARNING"
    # throttle tests build their own app with it switched on
    RATELIMIT_ENABLED = False


class ProductionConfig(BaseConfig):
    DEBUG = False
    APP_ENV = "production"


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


def validate_config(config) -> None:
    """Fail fast on settings that would otherwise be silently defaulted."""
    issues = []
    for key in ("JWT_EXPIRATION", "JWT_REFRESH_EXPIRATION"):
        if not is_valid_duration(config.get(key)):
            issues.append(f"{key}: expected <int><s|m|h|d> of at most 100 years, got {config.get(key)!r}")

    if config.get("JWT_ENABLED", True):
        secret = config.get("JWT_SECRET")
        if not secret:
            issues.append("JWT_SECRET: required when JWT is enabled")
        elif secret == DEFAULT_JWT_SECRET and str(config.get("APP_ENV", "")).lower() in ("prod", "production"):
            issues.append("JWT_SECRET: the default secret cannot be used in production")

    for key, minimum, default in (
        ("DB_SLOW_QUERY_THRESHOLD_MS", 0, 1000),
        ("QUERY_METRICS_MAX_ENTRIES", 1, 1000),
        ("THROTTLE_TTL", 1, 60),
        ("THROTTLE_LIMIT", 1, 10),
    ):
        value = config.get(key, default)
        if not isinstance(value, int) or value < minimum:
            issues.append(f"{key}: expected an integer >= {minimum}, got {value!r}")
    if str(config.get("LOG_LEVEL", "INFO")).upper() not in LOG_LEVELS:
        issues.append(f"LOG_LEVEL: must be one of {', '.join(LOG_LEVELS)}")

    if issues:
        logging.getLogger(__name__).error("Environment validation failed: %s", "; ".join(issues))
        raise ConfigError(issues)
