"""
Settings for the pairchat Django + Channels (ASGI) service.

- Environment-based configuration
- WebSocket-only service: no database, no admin, no sessions
- Channel layer: RedisChannelLayer when REDIS_URL is set, in-memory otherwise.
  Matchmaking state lives in process memory either way, so multiple instances
  behind a load balancer need sticky sessions.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import List

from corsheaders.defaults import default_headers as _cors_default_headers
from dotenv import load_dotenv

# Local dev convenience; in production, prefer real environment variables.
load_dotenv()


BASE_DIR = Path(__file__).resolve().parent.parent


def _env(name: str, default: str | None = None) -> str | None:
    v = os.environ.get(name)
    return v if v not in (None, "") else default


def _env_bool(name: str, default: bool = False) -> bool:
    v = _env(name)
    if v is None:
        return default
    return v.strip().lower() in ("1", "true", "yes", "y", "on")


def _env_csv(name: str, default: str = "") -> List[str]:
    raw = _env(name, default) or ""
    return [x.strip() for x in raw.split(",") if x.strip()]


# SECURITY WARNING: Do not hardcode secrets in code.
DEBUG = _env_bool("DJANGO_DEBUG", default=False)

SECRET_KEY = _env("DJANGO_SECRET_KEY", "dev-insecure-secret-key-change-me")
if not DEBUG and (not SECRET_KEY or SECRET_KEY.startswith("dev-insecure-")):
    raise RuntimeError("DJANGO_SECRET_KEY must be set in production")

ALLOWED_HOSTS = _env_csv("DJANGO_ALLOWED_HOSTS", default="localhost,127.0.0.1")

CORS_ALLOWED_ORIGINS = _env_csv("CORS_ALLOWED_ORIGINS", default="http://localhost:3000,http://127.0.0.1:3000")
# Allow X-API-KEY so preflight includes Access-Control-Allow-Headers: x-api-key
CORS_ALLOW_HEADERS = list(_cors_default_headers) + ["x-api-key"]

# When serving behind a proxy, Django must respect X-Forwarded-* headers.
USE_X_FORWARDED_HOST = True
SECURE_PROXY_SSL_HEADER = ("HTTP_X_FORWARDED_PROTO", "https")
SECURE_SSL_REDIRECT = _env_bool("DJANGO_SECURE_SSL_REDIRECT", default=False)


INSTALLED_APPS = [
    # daphne provides the ASGI runserver command and must be listed first.
    "daphne",
    "corsheaders",
    "channels",
    "pairchat.realtime.apps.RealtimeConfig",
]

MIDDLEWARE = [
    "pairchat.middleware.ApiKeyAuthMiddleware",
    "corsheaders.middleware.CorsMiddleware",
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
]

ROOT_URLCONF = "pairchat.urls"

ASGI_APPLICATION = "pairchat.asgi.application"

# Nothing is persisted; all state is scoped to the process lifetime.
DATABASES = {}


LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = False
USE_TZ = True

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"


#
# Channels configuration
#
REDIS_URL = _env("REDIS_URL", None)
if REDIS_URL:
    CHANNEL_LAYERS = {
        "default": {
            "BACKEND": "channels_redis.core.RedisChannelLayer",
            "CONFIG": {
                "hosts": [REDIS_URL],
                "capacity": int(_env("CHANNEL_LAYER_CAPACITY", "1000") or "1000"),
                "expiry": int(_env("CHANNEL_LAYER_EXPIRY", "60") or "60"),
            },
        }
    }
else:
    CHANNEL_LAYERS = {"default": {"BACKEND": "channels.layers.InMemoryChannelLayer"}}


LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple": {"format": "%(asctime)s %(levelname)s %(name)s: %(message)s"},
    },
    "handlers": {"console": {"class": "logging.StreamHandler", "formatter": "simple"}},
    "root": {"handlers": ["console"], "level": _env("DJANGO_LOG_LEVEL", "INFO") or "INFO"},
    "loggers": {
        "pairchat": {"level": _env("PAIRCHAT_LOG_LEVEL", "INFO") or "INFO", "propagate": True},
    },
}

# API key auth: if set, HTTP endpoints (except /health/) require X-API-KEY and
# WebSocket handshakes require an Authorization header or ?authorization= parameter.
AUTH_API_KEY = (_env("AUTH_API_KEY", "") or "").strip() or None
