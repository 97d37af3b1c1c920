# purchases/api/views.py

"""
PATH: purchases/api/views.py

PURCHASES API

GET  /api/purchases/?month=&year=   purchases of a period (default: current month)
POST /api/purchases/                record a purchase (stock + expense, atomic)
GET  /api/purchases/<id>/           purchase with its lines
"""

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.response import Response

from core.api import TenantScopedMixin, error_response
from core.errors import CommerceError
from core.periods import resolve_month_year
from purchases.api.serializers import PurchaseBatchSerializer, PurchaseCreateSerializer
from purchases.models import PurchaseBatch
from purchases.services.purchase_service import record_purchase
from tenants.api.permissions import HasOrganization


def _purchases(ctx):
    return (
        PurchaseBatch.objects.for_tenant(ctx)
        .select_related("account")
        .prefetch_related("items", "items__product")
    )


class PurchaseListCreateView(TenantScopedMixin, GenericAPIView):
    permission_classes = [HasOrganization]
    serializer_class = PurchaseBatchSerializer

    @extend_schema(
        tags=["purchases"],
        parameters=[
            OpenApiParameter("month", int, required=False),
            OpenApiParameter("year", int, required=False),
        ],
        responses=PurchaseBatchSerializer(many=True),
    )
    def get(self, request):
        try:
            period = resolve_month_year(request.query_params)
        except CommerceError as exc:
            return error_response(exc)

        qs = period.filter(_purchases(self.ctx), "purchased_at")
        page = self.paginate_queryset(qs)
        if page is not None:
            return self.get_paginated_response(PurchaseBatchSerializer(page, many=True).data)
        return Response(PurchaseBatchSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        tags=["purchases"],
        request=PurchaseCreateSerializer,
        responses={201: PurchaseBatchSerializer},
    )
    def post(self, request):
        s = PurchaseCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            batch = record_purchase(
                self.ctx,
                account_id=data["account_id"],
                currency=data.get("currency") or None,
                exchange_rate=data.get("exchange_rate"),
                shipping=data.get("shipping"),
                notes=data.get("notes", ""),
                purchased_at=data.get("purchased_at"),
                items=data["items"],
            )
        except CommerceError as exc:
            return error_response(exc)

        batch = _purchases(self.ctx).get(pk=batch.pk)
        return Response(PurchaseBatchSerializer(batch).data, status=status.HTTP_201_CREATED)


class PurchaseDetailView(TenantScopedMixin, GenericAPIView):
    permission_classes = [HasOrganization]
    serializer_class = PurchaseBatchSerializer

    @extend_schema(tags=["purchases"], responses=PurchaseBatchSerializer)
    def get(self, request, purchase_id):
        try:
            batch = _purchases(self.ctx).get_owned(self.ctx, purchase_id, label="Purchase")
        except CommerceError as exc:
            return error_response(exc)
        return Response(PurchaseBatchSerializer(batch).data, status=status.HTTP_200_OK)
