"""
Development-specific Django settings.
"""

import os

# Load environment variables from .env file
from dotenv import load_dotenv

from .base import *  # noqa: F403,F405

load_dotenv()

# Re-read after load_dotenv so values from .env apply
POS_API_BASE_URL = os.getenv("POS_API_URL", POS_API_BASE_URL)  # noqa: F405
POS_API_TOKEN = os.getenv("POS_API_TOKEN", POS_API_TOKEN)  # noqa: F405
POS_TAX_RATE = os.getenv("POS_TAX_RATE", POS_TAX_RATE)  # noqa: F405

# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = os.getenv("DJANGO_SECRET_KEY", "dev-secret-key-change-in-production")

# SECURITY WARNING: don't run with debug turned on in production!
DEBUG = True

ALLOWED_HOSTS = os.getenv("DJANGO_ALLOWED_HOSTS", "localhost,127.0.0.1,.localhost,0.0.0.0").split(
    ","
)

# SQLite unless Postgres is configured
if os.getenv("POSTGRES_DB"):
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.postgresql",
            "NAME": os.getenv("POSTGRES_DB"),
            "USER": os.getenv("POSTGRES_USER", "postgres"),
            "PASSWORD": os.getenv("POSTGRES_PASSWORD", "postgres"),
            "HOST": os.getenv("POSTGRES_HOST", "localhost"),
            "PORT": os.getenv("POSTGRES_PORT", "5432"),
        }
    }
else:
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.sqlite3",
            "NAME": BASE_DIR / "db.sqlite3",  # noqa: F405
        }
    }

# Logging Configuration - Development (Verbose console output)
LOGGING = build_logging(debug=True, log_filename="pos_dev.log")  # noqa: F405

# Security Settings - Development (Relaxed)
SESSION_COOKIE_SECURE = False
CSRF_COOKIE_SECURE = False
