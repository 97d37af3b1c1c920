# tenants/context.py

"""
TENANT CONTEXT

Built once per request from the authenticated user and passed explicitly to
every service call.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from core.errors import ValidationError


@dataclass(frozen=True)
class TenantContext:
    organization: Any
    user: Any = None

    @property
    def organization_id(self):
        return self.organization.pk

    @classmethod
    def from_user(cls, user) -> "TenantContext":
        organization = getattr(user, "organization", None)
        if organization is None:
            raise ValidationError("User is not attached to an organization")
        return cls(organization=organization, user=user)
