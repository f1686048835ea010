"""Django settings for trip estimator project."""

from __future__ import annotations

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent
PROJECT_ROOT = BASE_DIR.parent

SECRET_KEY = os.getenv("DJANGO_SECRET_KEY", "change-me-in-production")
DEBUG = os.getenv("DJANGO_DEBUG", "1") == "1"
ALLOWED_HOSTS = [host for host in os.getenv("DJANGO_ALLOWED_HOSTS", "").split(",") if host]

INSTALLED_APPS = [
    "django.contrib.contenttypes",
    "django.contrib.staticfiles",
    "trip_estimator",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "config.urls"

WSGI_APPLICATION = "config.wsgi.application"

# No models; only the test runner touches the database.
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": PROJECT_ROOT / "db.sqlite3",
    }
}

LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

STATIC_URL = "static/"
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "trip-estimator-cache",
    }
}

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple": {
            "format": "%(asctime)s %(levelname)s [%(name)s] %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "simple",
        },
    },
    "loggers": {
        "trip_estimator": {
            "handlers": ["console"],
            "level": os.getenv("TRIP_ESTIMATOR_LOG_LEVEL", "INFO"),
            "propagate": False,
        },
    },
}

GOOGLE_MAPS_API_KEY = os.getenv("GOOGLE_MAPS_API_KEY", "")

ROUTES_BASE_URL = os.getenv("ROUTES_BASE_URL", "https://routes.googleapis.com")
ROUTES_TIMEOUT_SECONDS = float(os.getenv("ROUTES_TIMEOUT_SECONDS", "12"))
ROUTES_RETRY_COUNT = int(os.getenv("ROUTES_RETRY_COUNT", "2"))
ROUTE_CACHE_TTL_SECONDS = int(os.getenv("ROUTE_CACHE_TTL_SECONDS", "600"))

PLACES_BASE_URL = os.getenv("PLACES_BASE_URL", "https://places.googleapis.com")
PLACES_TIMEOUT_SECONDS = float(os.getenv("PLACES_TIMEOUT_SECONDS", "12"))
PLACES_SEARCH_RADIUS_METERS = float(os.getenv("PLACES_SEARCH_RADIUS_METERS", "5000"))
PLACES_MAX_RESULTS = int(os.getenv("PLACES_MAX_RESULTS", "5"))

PRICING_FEED_URL = os.getenv("PRICING_FEED_URL", "https://www.gasbuddy.com/graphql")
PRICING_FEED_TIMEOUT_SECONDS = float(os.getenv("PRICING_FEED_TIMEOUT_SECONDS", "10"))
PRICE_CACHE_TTL_SECONDS = int(os.getenv("PRICE_CACHE_TTL_SECONDS", "900"))

DEFAULT_TANK_GALLONS = float(os.getenv("DEFAULT_TANK_GALLONS", "15"))
REFUEL_SAFETY_BUFFER = float(os.getenv("REFUEL_SAFETY_BUFFER", "0.75"))
DEFAULT_CURRENCY = os.getenv("DEFAULT_CURRENCY", "usd")
