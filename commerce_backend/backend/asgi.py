"""
PATH: backend/asgi.py

ASGI entrypoint. The API is synchronous; this only exists for ASGI servers.
"""

import os

from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "backend.settings.dev")

application = get_asgi_application()
