# users/views/__init__.py

from users.views.auth import LoginView, RegisterView
from users.views.me import MeView

__all__ = ["LoginView", "MeView", "RegisterView"]
