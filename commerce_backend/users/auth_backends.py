"""
PATH: users/auth_backends.py

LOGIN BACKEND

- One identifier field: an email when it contains "@", a username otherwise.
- Inactive users and members of a deactivated organization cannot log in,
  so a suspended tenant loses API access at the next token refresh.
"""

from __future__ import annotations

from django.contrib.auth import get_user_model
from django.contrib.auth.backends import BaseBackend

User = get_user_model()


def _lookup(identifier: str):
    field = "email__iexact" if "@" in identifier else "username__iexact"
    return User.objects.select_related("organization").filter(**{field: identifier}).first()


class EmailOrUsernameBackend(BaseBackend):
    def authenticate(self, request, username=None, password=None, **kwargs):
        identifier = (username or kwargs.get("email") or "").strip()
        if not identifier or password is None:
            return None

        user = _lookup(identifier)
        if user is None or not user.is_active:
            return None
        if user.organization_id and not user.organization.is_active:
            return None

        return user if user.check_password(password) else None

    def get_user(self, user_id):
        return User.objects.select_related("organization").filter(pk=user_id).first()
