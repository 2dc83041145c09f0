# flake8: noqa
"""
Production environment settings for the personal ledger API.

This configuration extends base settings with production-specific values
including maximum security, production services, and JSON logging.
"""

from .base import *
import logging
from .utils import csv_list, load_environment_config

# Load environment configuration
config = load_environment_config("production")

# Environment identification
ENVIRONMENT = "production"

# Security settings for production
DEBUG = False
SECRET_KEY = config("SECRET_KEY")
ALLOWED_HOSTS = csv_list(config("ALLOWED_HOSTS", default="api.personal-ledger.app"))

# CORS settings for production
CORS_ALLOWED_ORIGINS = csv_list(
    config("CORS_ALLOWED_ORIGINS", default="https://personal-ledger.app")
)
CORS_ALLOW_ALL_ORIGINS = False

# Security headers for production
SECURE_SSL_REDIRECT = True
SESSION_COOKIE_SECURE = True
CSRF_COOKIE_SECURE = True
SECURE_CONTENT_TYPE_NOSNIFF = True

# Google OAuth configuration (production credentials)
GOOGLE_OAUTH_CLIENT_ID = config("GOOGLE_OAUTH_CLIENT_ID_PROD", default="")
GOOGLE_OAUTH_CLIENT_SECRET = config("GOOGLE_OAUTH_CLIENT_SECRET_PROD", default="")
GOOGLE_OAUTH_CALLBACK_URL = config(
    "GOOGLE_OAUTH_CALLBACK_URL", default="https://personal-ledger.app/auth/callback"
)
SOCIALACCOUNT_PROVIDERS["google"]["APP"]["client_id"] = GOOGLE_OAUTH_CLIENT_ID
SOCIALACCOUNT_PROVIDERS["google"]["APP"]["secret"] = GOOGLE_OAUTH_CLIENT_SECRET

APP_ADMIN_ROLE = config("APP_ADMIN_ROLE", default="admin")

# Database configuration for production
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.postgresql",
        "NAME": config("POSTGRES_DB"),
        "USER": config("POSTGRES_USER"),
        "PASSWORD": config("POSTGRES_PASSWORD"),
        "HOST": config("DB_HOST"),
        "PORT": config("DB_PORT", default="5432"),
        "CONN_MAX_AGE": 60,  # Connection reuse 1 minute
        "OPTIONS": {
            "connect_timeout": 5,  # Max 5 second waiting for DB connection
        },
    }
}

# Static files served by whitenoise (admin panel)
MIDDLEWARE.insert(1, "whitenoise.middleware.WhiteNoiseMiddleware")
STORAGES = {
    "default": {"BACKEND": "django.core.files.storage.FileSystemStorage"},
    "staticfiles": {
        "BACKEND": "whitenoise.storage.CompressedManifestStaticFilesStorage"
    },
}

# Production logging - structured JSON for log aggregation
LOG_DIR = config("LOG_DIR", default="/var/log/ledger")

LOGGING["handlers"]["production_file"] = {
    "level": "INFO",
    "class": "logging.handlers.RotatingFileHandler",
    "filename": f"{LOG_DIR}/production.log",
    "maxBytes": 1024 * 1024 * 100,  # 100MB
    "backupCount": 10,
    "formatter": "json",
    "encoding": "utf-8",
}

LOGGING["handlers"]["production_errors"] = {
    "level": "ERROR",
    "class": "logging.handlers.RotatingFileHandler",
    "filename": f"{LOG_DIR}/production_errors.log",
    "maxBytes": 1024 * 1024 * 50,  # 50MB
    "backupCount": 10,
    "formatter": "json",
    "encoding": "utf-8",
}

for logger_name in ["django", "core", "users", "allauth", "finance"]:
    if logger_name in LOGGING["loggers"]:
        LOGGING["loggers"][logger_name]["handlers"] = [
            "console",
            "production_file",
            "production_errors",
        ]
        LOGGING["loggers"][logger_name]["level"] = "INFO"

# Reduce noise in production
LOGGING["loggers"]["django.db.backends"]["level"] = "ERROR"
LOGGING["loggers"]["django.request"]["level"] = "WARNING"

os.makedirs(LOG_DIR, exist_ok=True)

logger = logging.getLogger(__name__)
logger.info(
    "Production environment initialized",
    extra={
        "environment": ENVIRONMENT,
        "debug_mode": DEBUG,
        "allowed_hosts": ALLOWED_HOSTS,
        "action": "environment_startup",
        "component": "settings",
        "severity": "info",
    },
)
