# backend/wsgi.py
"""
WSGI entrypoint (gunicorn / uwsgi).
Production sets DJANGO_SETTINGS_MODULE=backend.settings.prod; anything else
falls back to dev settings.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "backend.settings.dev")

application = get_wsgi_application()
