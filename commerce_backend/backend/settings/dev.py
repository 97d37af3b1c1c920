# backend/settings/dev.py
"""
PATH: backend/settings/dev.py

LOCAL DEVELOPMENT SETTINGS

- SQLite by default (DATABASE_URL overrides). SQLite ignores SELECT ... FOR UPDATE,
  so concurrent-oversell behaviour is only exercised against Postgres.
- Commerce modules log at DEBUG so every posting and dashboard build is visible.
"""

from __future__ import annotations

from .base import *  # noqa: F403
from .base import LOGGING, env

DEBUG = True

ALLOWED_HOSTS = env.list("ALLOWED_HOSTS", default=["localhost", "127.0.0.1"])

CORS_ALLOWED_ORIGINS = env.list("CORS_ALLOWED_ORIGINS", default=["http://localhost:3000"])
CSRF_TRUSTED_ORIGINS = env.list("CSRF_TRUSTED_ORIGINS", default=["http://localhost:3000"])
CORS_ALLOW_CREDENTIALS = True

LOGGING = {
    **LOGGING,
    "loggers": {
        **LOGGING["loggers"],
        **{
            name: {"handlers": ["console"], "level": "DEBUG", "propagate": False}
            for name in ("accounting", "products", "purchases", "sales", "supplies", "reporting")
        },
    },
}
