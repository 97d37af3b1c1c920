# accounting/api/views/finances.py

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework.generics import GenericAPIView
from rest_framework.response import Response

from accounting.services.queries import finance_summary
from core.api import TenantScopedMixin, error_response
from core.errors import CommerceError
from core.periods import resolve_month_year
from tenants.api.permissions import HasOrganization


class FinanceSummaryView(TenantScopedMixin, GenericAPIView):
    """
    GET /api/finances/summary/?month=&year=
    """

    permission_classes = [HasOrganization]

    @extend_schema(
        tags=["finances"],
        parameters=[
            OpenApiParameter("month", int, required=False),
            OpenApiParameter("year", int, required=False),
        ],
        responses=dict,
    )
    def get(self, request):
        try:
            period = resolve_month_year(request.query_params)
            data = finance_summary(self.ctx, period=period)
        except CommerceError as exc:
            return error_response(exc)
        return Response(data)
