"""
Test settings.

In-memory SQLite, fast password hashing and no retry delay against the
mocked backend.
"""

from .base import *  # noqa: F403,F405

SECRET_KEY = "test-secret-key-not-for-production"

DEBUG = False

ALLOWED_HOSTS = ["*"]

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
    }
}

# Retail backend API (mocked with responses in tests)
POS_API_BASE_URL = "http://backend.test/api"
POS_API_TOKEN = "test-token"
POS_API_TIMEOUT = 5
POS_API_MAX_ATTEMPTS = 2
POS_API_BACKOFF = 0

POS_TAX_RATE = "0.08"
POS_DEFAULT_PRODUCT_IMAGE = "https://example.com/placeholder.png"

LOGGING = build_logging(debug=False, log_filename="pos_test.log")  # noqa: F405
