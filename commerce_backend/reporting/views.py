# reporting/views.py

"""
DASHBOARD API

GET /api/dashboard/?month=&year=   metrics for the period (default: current month)
GET /api/dashboard/periods/        (year, month) pairs with sales, transactions
                                   or inventory movements, newest first
"""

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework.generics import GenericAPIView
from rest_framework.response import Response

from accounting.models import Transaction
from core.api import TenantScopedMixin, error_response
from core.errors import CommerceError
from core.periods import periods_for, resolve_month_year
from products.models import InventoryMovement
from reporting.services.dashboard import build_dashboard
from sales.models import Sale
from tenants.api.permissions import HasOrganization


class DashboardView(TenantScopedMixin, GenericAPIView):
    permission_classes = [HasOrganization]

    @extend_schema(
        tags=["dashboard"],
        parameters=[
            OpenApiParameter("month", int, required=False),
            OpenApiParameter("year", int, required=False),
        ],
        responses=dict,
    )
    def get(self, request):
        try:
            period = resolve_month_year(request.query_params)
        except CommerceError as exc:
            return error_response(exc)
        return Response(build_dashboard(self.ctx, period))


class DashboardPeriodsView(TenantScopedMixin, GenericAPIView):
    permission_classes = [HasOrganization]

    @extend_schema(tags=["dashboard"], responses=dict)
    def get(self, request):
        seen = set()
        for qs, field in (
            (Sale.objects.for_tenant(self.ctx), "sold_at"),
            (Transaction.objects.for_tenant(self.ctx), "occurred_at"),
            (InventoryMovement.objects.for_tenant(self.ctx), "created_at"),
        ):
            seen.update((p["year"], p["month"]) for p in periods_for(qs, field))

        periods = [{"year": y, "month": m} for y, m in sorted(seen, reverse=True)]
        return Response({"periods": periods})
