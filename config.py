import os

from dotenv import load_dotenv

load_dotenv()


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY") or "dev-key-change-in-production"
    FLASK_ENV = os.environ.get("FLASK_ENV", "production")
    DEBUG = os.environ.get("FLASK_DEBUG", "False").lower() == "true"

    UPLOAD_FOLDER = os.environ.get("UPLOAD_FOLDER", "uploads")
    MAX_CONTENT_LENGTH = 16 * 1024 * 1024  # 16MB

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

    # Comma separated list, "*" allows any origin
    CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "*")

    # Remove files written by a create/update that later fails.
    # Off by default: failed requests leave their uploads on disk.
    MATERIALS_COMPENSATE_ON_FAILURE = (
        os.environ.get("MATERIALS_COMPENSATE_ON_FAILURE", "False").lower() == "true"
    )

    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL") or "sqlite:///database.db"

    # Cache configuration. The material list is only cached with a backend
    # shared by all workers (RedisCache, MemcachedCache, FileSystemCache).
    CACHE_TYPE = os.environ.get("CACHE_TYPE", "NullCache")
    CACHE_REDIS_URL = os.environ.get("CACHE_REDIS_URL")
    CACHE_DIR = os.environ.get("CACHE_DIR")
    CACHE_NO_NULL_WARNING = True
    CACHE_DEFAULT_TIMEOUT = 300  # 5 minutes
    CACHE_KEY_PREFIX = "materials_"

    # Rate limiting
    RATELIMIT_ENABLED = True
    RATELIMIT_STORAGE_URI = os.environ.get("RATELIMIT_STORAGE_URI", "memory://")
    UPLOAD_RATE_LIMIT = os.environ.get("UPLOAD_RATE_LIMIT", "30 per minute")


class DevelopmentConfig(Config):
    DEBUG = True
    FLASK_ENV = "development"
    LOG_LEVEL = "DEBUG"


class ProductionConfig(Config):
    DEBUG = False
    FLASK_ENV = "production"


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SECRET_KEY = "test-secret-key-for-testing-only"
    MATERIALS_COMPENSATE_ON_FAILURE = False

    # Disable caching in tests to avoid stale data
    CACHE_TYPE = "NullCache"  # No caching during tests
    CACHE_NO_NULL_WARNING = True

    RATELIMIT_ENABLED = False


config = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
    "default": ProductionConfig,
}
