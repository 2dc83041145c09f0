# flake8: noqa
"""
Test environment settings.

In-memory SQLite, fast password hashing and quiet logging so the pytest-django
suite runs without any external service.
"""

from .base import *

ENVIRONMENT = "test"

DEBUG = False
SECRET_KEY = "django-insecure-test-key"
ALLOWED_HOSTS = ["testserver", "localhost"]

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

APP_ADMIN_ROLE = "admin"
GOOGLE_OAUTH_CALLBACK_URL = "http://testserver/auth/callback"

for logger_config in LOGGING["loggers"].values():
    logger_config["level"] = "CRITICAL"
