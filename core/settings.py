"""
Django settings for the ARS rates project.
Values come from environment variables, with development defaults.
"""

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = os.getenv("DJANGO_SECRET_KEY", "django-insecure-ars-rates-dev-key")
DEBUG = os.getenv("DJANGO_DEBUG", "false").lower() == "true"
ALLOWED_HOSTS = [host for host in os.getenv("DJANGO_ALLOWED_HOSTS", "localhost,127.0.0.1").split(",") if host]

INSTALLED_APPS = [
    "django.contrib.contenttypes",
    "django.contrib.auth",
    "rest_framework",
    "drf_spectacular",
    "apps.rates.apps.RatesConfig",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
]

ROOT_URLCONF = "core.urls"

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": BASE_DIR / "db.sqlite3",
    }
}

TIME_ZONE = os.getenv("TIME_ZONE", "America/Argentina/Buenos_Aires")
USE_TZ = True
USE_I18N = False

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# Cache
REDIS_URL = os.getenv("REDIS_URL")

if REDIS_URL:
    CACHES = {
        "default": {
            "BACKEND": "django.core.cache.backends.redis.RedisCache",
            "LOCATION": REDIS_URL,
        }
    }
else:
    CACHES = {
        "default": {
            "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
            "LOCATION": "ars-rates",
        }
    }

# Rate sources
DOLAR_API_BASE_URL = os.getenv("DOLAR_API_BASE_URL", "https://dolarapi.com/v1")
ARGENTINA_DATOS_BASE_URL = os.getenv("ARGENTINA_DATOS_BASE_URL", "https://api.argentinadatos.com/v1")
RATE_SOURCE = os.getenv("RATE_SOURCE", "dolar_api")

RATES_CACHE_ALIAS = os.getenv("RATES_CACHE_ALIAS", "default")
RATES_CACHE_PREFIX = os.getenv("RATES_CACHE_PREFIX", "dolar_api")
RATES_CACHE_TTL = int(os.getenv("RATES_CACHE_TTL", "300"))

RATES_HTTP_TIMEOUT = float(os.getenv("RATES_HTTP_TIMEOUT", "10"))
RATES_HTTP_OPEN_TIMEOUT = float(os.getenv("RATES_HTTP_OPEN_TIMEOUT", "5"))
RATES_HTTP_MAX_RETRIES = int(os.getenv("RATES_HTTP_MAX_RETRIES", "3"))
RATES_HTTP_BACKOFF_FACTOR = float(os.getenv("RATES_HTTP_BACKOFF_FACTOR", "0.5"))

# Celery
CELERY_BROKER_URL = os.getenv("CELERY_BROKER_URL", "redis://localhost:6379/0")
CELERY_RESULT_BACKEND = os.getenv("CELERY_RESULT_BACKEND", CELERY_BROKER_URL)
CELERY_TIMEZONE = TIME_ZONE
CELERY_BEAT_SCHEDULE = {
    "warm-rate-cache": {
        "task": "warm_rate_cache",
        "schedule": 240.0,
    },
    "check-rate-source-health": {
        "task": "check_rate_source_health",
        "schedule": 900.0,
    },
}

# REST framework
REST_FRAMEWORK = {
    "DEFAULT_SCHEMA_CLASS": "drf_spectacular.openapi.AutoSchema",
    "DEFAULT_AUTHENTICATION_CLASSES": [],
    "DEFAULT_PERMISSION_CLASSES": ["rest_framework.permissions.AllowAny"],
    "UNAUTHENTICATED_USER": None,
}

SPECTACULAR_SETTINGS = {
    "TITLE": "ARS Rates API",
    "DESCRIPTION": "Official USD/ARS exchange rates from DolarAPI and ArgentinaDatos",
    "VERSION": "0.1.0",
}

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "%(asctime)s %(levelname)s %(name)s: %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "verbose",
        },
    },
    "loggers": {
        "apps.rates": {
            "handlers": ["console"],
            "level": LOG_LEVEL,
            "propagate": False,
        },
    },
    "root": {
        "handlers": ["console"],
        "level": "WARNING",
    },
}
