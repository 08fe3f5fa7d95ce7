import os
from datetime import timedelta

from dotenv import load_dotenv

load_dotenv()


def _engine_options(database_uri):
    """Pool settings only make sense for a networked PostgreSQL server."""
    if not database_uri or not database_uri.startswith(("postgres://", "postgresql")):
        return {}
    return {
        "pool_pre_ping": True,  # Test connections before using them
        "pool_recycle": 3600,   # Recycle connections after 1 hour
        "pool_size": 10,
        "max_overflow": 20,
        "connect_args": {
            "connect_timeout": 10,
            "sslmode": os.getenv("DATABASE_SSLMODE", "require"),
            "keepalives": 1,
            "keepalives_idle": 30,
            "keepalives_interval": 10,
            "keepalives_count": 5,
        }
    }


class Config:
    """Base Flask configuration shared across environments."""

    SECRET_KEY = os.environ.get("SECRET_KEY") or "dev-key-change-this-in-production"

    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL") or "sqlite:///dashboard.db"
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = _engine_options(SQLALCHEMY_DATABASE_URI)

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    ALLOWED_IMAGE_EXTENSIONS = {"png", "jpg", "jpeg", "gif", "webp"}
    UPLOAD_FOLDERS = {"products", "appearance", "countries"}
    MAX_CONTENT_LENGTH = 10 * 1024 * 1024  # 10MB max upload size

    CLOUDINARY_CLOUD_NAME = os.environ.get("CLOUDINARY_CLOUD_NAME")
    CLOUDINARY_API_KEY = os.environ.get("CLOUDINARY_API_KEY")
    CLOUDINARY_API_SECRET = os.environ.get("CLOUDINARY_API_SECRET")

    # Storefronts sharing this admin backend
    DEFAULT_PROJECT = "ghadaq"
    DEFAULT_PAYMENT_METHOD = os.environ.get("DEFAULT_PAYMENT_METHOD", "paymob")

    DEFAULT_BASE_CURRENCY = os.environ.get("DEFAULT_BASE_CURRENCY", "SAR")
    EXCHANGERATE_API_KEY = os.environ.get("EXCHANGERATE_API_KEY", "")
    CURRENCY_API_TIMEOUT = int(os.environ.get("CURRENCY_API_TIMEOUT", 10))

    PRODUCTS_PAGE_SIZE = 10
    LOGS_PAGE_SIZE = 20

    LANGUAGES = ("ar", "en")
    BABEL_DEFAULT_LOCALE = "ar"
    BABEL_TRANSLATION_DIRECTORIES = "translations"

    PERMANENT_SESSION_LIFETIME = timedelta(days=7)
    # Session cookies stay off cross-site requests
    SESSION_COOKIE_SAMESITE = "Lax"
    REMEMBER_COOKIE_SAMESITE = "Lax"


class DevelopmentConfig(Config):
    DEBUG = True
    LOG_LEVEL = "DEBUG"


class ProductionConfig(Config):
    DEBUG = False
    SESSION_COOKIE_SECURE = True
    REMEMBER_COOKIE_SECURE = True


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL") or "sqlite://"
    SQLALCHEMY_ENGINE_OPTIONS = {}
    WTF_CSRF_ENABLED = False
    EXCHANGERATE_API_KEY = ""
    CLOUDINARY_CLOUD_NAME = "test-cloud"
    CLOUDINARY_API_KEY = "test-key"
    CLOUDINARY_API_SECRET = "test-secret"


CONFIG_BY_NAME = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
}
