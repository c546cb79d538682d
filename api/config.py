"""
Environment-aware configuration.

Values are read from the process environment (and a .env file, if present)
once, when this module is imported. Nothing below the application factory
reads the environment again: token settings are frozen into a TokenSettings
object and injected into the TokenService at startup.
"""
import os
from dotenv import load_dotenv
from datetime import timedelta

load_dotenv()  # Read .env if present

# Fallback signing secrets. Fine for development, never for production:
# create_app() logs a warning when a production app runs with either of them.
DEFAULT_JWT_SECRET = "default_secret_key"
DEFAULT_JWT_REFRESH_SECRET = "default_refresh_secret_key"


def _seconds(name: str, default: str) -> timedelta:
    return timedelta(seconds=int(os.getenv(name, default)))


class BaseConfig:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")  # Set a strong key in production
    DEBUG = False
    TESTING = False
    # CORS: in dev we usually allow '*', in prod supply a comma-separated list in env
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")
    APP_ENV = os.getenv("APP_ENV", "dev")
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///blog.db")
    SQL_ECHO = False
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    # Token configuration
    JWT_SECRET = os.getenv("JWT_SECRET", DEFAULT_JWT_SECRET)
    JWT_REFRESH_SECRET = os.getenv("JWT_REFRESH_SECRET", DEFAULT_JWT_REFRESH_SECRET)
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
    JWT_ACCESS_EXPIRES = _seconds("JWT_ACCESS_EXPIRATION", "3600")
    JWT_REFRESH_EXPIRES = _seconds("JWT_REFRESH_EXPIRATION", "604800")


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")


class TestingConfig(BaseConfig):
    TESTING = True
    DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite:///test-blog.db")
    JWT_SECRET = "test-access-secret"
    JWT_REFRESH_SECRET = "test-refresh-secret"


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
