"""
PATH: tenants/models/__init__.py

Tenants models export surface.
"""

from .base import TenantManager, TenantOwnedModel, TenantQuerySet
from .organization import Organization

__all__ = [
    "Organization",
    "TenantManager",
    "TenantOwnedModel",
    "TenantQuerySet",
]
