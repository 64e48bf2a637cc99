"""
SurgiOps supply-chain console
Configuration classes for Flask App Factory.

Usage:
    config_name = os.getenv("APP_ENV", "development")
    app.config.from_object(config[config_name])
"""

import os
import secrets

basedir = os.path.abspath(os.path.dirname(os.path.dirname(__file__)))

# Default SQLite path for local dev when PostgreSQL is not running
_SQLITE_DEV = f"sqlite:///{os.path.join(basedir, 'instance', 'surgiops_dev.db')}"
_SQLITE_TEST = "sqlite:///:memory:"

# Generate a random key for development; production MUST use a stable env var
_DEV_SECRET = secrets.token_hex(32)


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


class Config:
    """Base configuration shared across all environments."""

    SECRET_KEY = os.getenv("SECRET_KEY", _DEV_SECRET)
    DEBUG = False
    TESTING = False

    # SQLAlchemy
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {
        "pool_pre_ping": True,
        "pool_size": 5,
        "max_overflow": 10,
        "pool_recycle": 300,
        "pool_timeout": 20,
    }

    # Rate limit storage (memory:// or a redis:// URI)
    RATELIMIT_STORAGE_URI = os.getenv("RATELIMIT_STORAGE_URI", "memory://")

    # CORS
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")

    # AI insight generation function
    INSIGHTS_FUNCTION_URL = os.getenv("INSIGHTS_FUNCTION_URL", "")
    INSIGHTS_FUNCTION_KEY = os.getenv("INSIGHTS_FUNCTION_KEY", "")
    # e.g. https://fn.example.com/runs/{run_id}; empty disables polling
    INSIGHTS_STATUS_URL = os.getenv("INSIGHTS_STATUS_URL", "")
    INSIGHTS_TIMEOUT = int(os.getenv("INSIGHTS_TIMEOUT", "60"))
    INSIGHTS_REFRESH_DELAY = float(os.getenv("INSIGHTS_REFRESH_DELAY", "2"))
    INSIGHTS_RETRY_DELAY = float(os.getenv("INSIGHTS_RETRY_DELAY", "3"))
    INSIGHTS_POLL_ATTEMPTS = int(os.getenv("INSIGHTS_POLL_ATTEMPTS", "10"))
    INSIGHTS_PAGE_SIZE = int(os.getenv("INSIGHTS_PAGE_SIZE", "50"))

    # Reports: which optional sales sources exist in this deployment
    REPORTS_OPPORTUNITIES_ENABLED = _env_flag("REPORTS_OPPORTUNITIES_ENABLED", "true")
    REPORTS_TRANSACTIONS_ENABLED = _env_flag("REPORTS_TRANSACTIONS_ENABLED", "true")

    # Booking panel
    RECENT_CASES_DAYS = int(os.getenv("RECENT_CASES_DAYS", "30"))
    RECENT_CASES_LIMIT = int(os.getenv("RECENT_CASES_LIMIT", "20"))


class DevelopmentConfig(Config):
    """Development environment configuration."""

    DEBUG = True
    _raw_db_url = os.getenv("DATABASE_URL", "")
    SQLALCHEMY_DATABASE_URI = (
        _raw_db_url.replace("postgres://", "postgresql://", 1) if _raw_db_url else _SQLITE_DEV
    )


class TestingConfig(Config):
    """Testing environment configuration."""

    TESTING = True
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", _SQLITE_TEST)
    SQLALCHEMY_ENGINE_OPTIONS = {}
    RATELIMIT_ENABLED = False
    INSIGHTS_FUNCTION_URL = "http://insights.test/generate"
    INSIGHTS_FUNCTION_KEY = "test-key"
    INSIGHTS_STATUS_URL = ""
    INSIGHTS_REFRESH_DELAY = 0
    INSIGHTS_RETRY_DELAY = 0
    REPORTS_OPPORTUNITIES_ENABLED = True
    REPORTS_TRANSACTIONS_ENABLED = True


class ProductionConfig(Config):
    """Production environment configuration."""

    DEBUG = False
    # Railway/Heroku use postgres:// but SQLAlchemy 2.0 requires postgresql://
    _raw_db_url = os.getenv("DATABASE_URL", "")
    SQLALCHEMY_DATABASE_URI = _raw_db_url.replace("postgres://", "postgresql://", 1) if _raw_db_url else None
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "")  # Must be set explicitly in production

    SQLALCHEMY_ENGINE_OPTIONS = {
        "pool_pre_ping": True,
        "pool_size": 5,
        "max_overflow": 10,
        "pool_recycle": 300,
        "pool_timeout": 20,
        "connect_args": {
            "options": "-c statement_timeout=30000",
        },
    }

    def __init__(self):
        if not self.SQLALCHEMY_DATABASE_URI:
            raise RuntimeError("DATABASE_URL environment variable is required in production")
        if not os.getenv("SECRET_KEY"):
            raise RuntimeError("SECRET_KEY environment variable must be set in production")


# Configuration mapping: environment name -> config class
config = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
    "default": DevelopmentConfig,
}
