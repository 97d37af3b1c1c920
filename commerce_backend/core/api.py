# core/api.py

"""
API HELPERS

- error_response(): render a CommerceError with its status code.
- tenant_context(): build the TenantContext for the authenticated request.
- TenantScopedMixin: view mixin exposing self.ctx.
"""

from __future__ import annotations

from rest_framework.response import Response

from core.errors import CommerceError
from tenants.context import TenantContext


def error_response(exc: CommerceError) -> Response:
    return Response(exc.as_payload(), status=exc.status_code)


def tenant_context(request) -> TenantContext:
    return TenantContext.from_user(request.user)


class TenantScopedMixin:
    @property
    def ctx(self) -> TenantContext:
        cached = getattr(self, "_tenant_ctx", None)
        if cached is None:
            cached = tenant_context(self.request)
            self._tenant_ctx = cached
        return cached
