"""
Environment-aware configuration.
Secrets and the database URL come from the environment (.env is read if present).
Missing required values are a startup error, never a silent default.
"""
import os
from dotenv import load_dotenv
from datetime import timedelta

from utils.exceptions import ConfigurationError

load_dotenv()  # Read .env if present

REQUIRED_KEYS = ("JWT_SECRET", "ADMIN_BOOTSTRAP_TOKEN", "DATABASE_URL")


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes")


class BaseConfig:
    DEBUG = False
    TESTING = False
    # CORS: comma-separated list in env, '*' allows everything
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")
    APP_ENV = os.getenv("APP_ENV", "dev")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Required (validated in create_app)
    JWT_SECRET = os.getenv("JWT_SECRET")
    ADMIN_BOOTSTRAP_TOKEN = os.getenv("ADMIN_BOOTSTRAP_TOKEN")
    DATABASE_URL = os.getenv("DATABASE_URL")

    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
    JWT_ISSUER = os.getenv("JWT_ISSUER", "soldbd-api")
    ACCESS_TOKEN_EXPIRES = timedelta(seconds=int(os.getenv("ACCESS_TOKEN_EXPIRES_SECONDS", "900")))
    REFRESH_TOKEN_EXPIRES = timedelta(days=int(os.getenv("REFRESH_TOKEN_EXPIRES_DAYS", "30")))

    DB_POOL_SIZE = int(os.getenv("DB_POOL_SIZE", "10"))
    DB_ECHO = _env_bool("DB_ECHO")


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    # In dev, propagate exceptions so our error handler has full context
    PROPAGATE_EXCEPTIONS = True


class TestingConfig(BaseConfig):
    TESTING = True


class ProductionConfig(BaseConfig):
    DEBUG = False


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
    """Raise ConfigurationError listing every required key that is unset or blank."""
    missing = [key for key in REQUIRED_KEYS if not str(config.get(key) or "").strip()]
    if missing:
        raise ConfigurationError(f"Missing required configuration: {', '.join(missing)}")
