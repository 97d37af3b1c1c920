"""
======================================================
PATH: products/views/inventory.py
======================================================
INVENTORY API

- GET  /api/inventory/batches/                 cost layers (?product_id=, ?open=1)
- GET  /api/inventory/movements/               movement log (?month=&year=&product_id=&type=)
- GET  /api/inventory/movements/periods/       distinct (year, month) with movements
- POST /api/inventory/adjust/                  IN/OUT stock adjustment

Quantity mutation is SERVICE-managed (never direct edits): batches are read-only here.
======================================================
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status, viewsets
from rest_framework.generics import GenericAPIView
from rest_framework.response import Response

from core.api import TenantScopedMixin, error_response
from core.errors import CommerceError
from core.periods import periods_for, resolve_month_year
from products.filters import InventoryBatchFilter
from products.models import InventoryBatch, InventoryMovement
from products.serializers import (
    InventoryAdjustSerializer,
    InventoryBatchSerializer,
    InventoryMovementSerializer,
)
from products.services.cost_layers import stock_for
from products.services.stock_adjustments import adjust_stock
from tenants.api.permissions import HasOrganization


class InventoryBatchViewSet(TenantScopedMixin, viewsets.ReadOnlyModelViewSet):
    serializer_class = InventoryBatchSerializer
    permission_classes = [HasOrganization]

    filterset_class = InventoryBatchFilter

    def get_queryset(self):
        return (
            InventoryBatch.objects.for_tenant(self.ctx)
            .select_related("product")
            .order_by("received_at", "id")
        )


class InventoryMovementListView(TenantScopedMixin, GenericAPIView):
    permission_classes = [HasOrganization]
    serializer_class = InventoryMovementSerializer

    @extend_schema(
        tags=["inventory"],
        parameters=[
            OpenApiParameter("month", int, required=False),
            OpenApiParameter("year", int, required=False),
            OpenApiParameter("product_id", int, required=False),
            OpenApiParameter("type", str, required=False),
        ],
        responses=InventoryMovementSerializer(many=True),
    )
    def get(self, request):
        params = request.query_params
        try:
            period = resolve_month_year(params)
        except CommerceError as exc:
            return error_response(exc)

        qs = period.filter(
            InventoryMovement.objects.for_tenant(self.ctx).select_related("product"),
            "created_at",
        )

        product_id = params.get("product_id")
        if product_id:
            qs = qs.filter(product_id=product_id)

        movement_type = (params.get("type") or "").strip().upper()
        if movement_type in InventoryMovement.MovementType.values:
            qs = qs.filter(movement_type=movement_type)

        qs = qs.order_by("-created_at", "-id")
        page = self.paginate_queryset(qs)
        if page is not None:
            return self.get_paginated_response(InventoryMovementSerializer(page, many=True).data)
        return Response(InventoryMovementSerializer(qs, many=True).data)


class InventoryMovementPeriodsView(TenantScopedMixin, GenericAPIView):
    permission_classes = [HasOrganization]

    @extend_schema(tags=["inventory"], responses=dict)
    def get(self, request):
        qs = InventoryMovement.objects.for_tenant(self.ctx)
        return Response({"periods": periods_for(qs, "created_at")})


class InventoryAdjustView(TenantScopedMixin, GenericAPIView):
    permission_classes = [HasOrganization]
    serializer_class = InventoryAdjustSerializer

    @extend_schema(tags=["inventory"], request=InventoryAdjustSerializer, responses={201: dict})
    def post(self, request):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            result = adjust_stock(
                self.ctx,
                product_id=data["product_id"],
                direction=data["direction"],
                quantity=data["quantity"],
                notes=data["notes"],
                unit_cost=data.get("unit_cost"),
            )
        except CommerceError as exc:
            return error_response(exc)

        return Response(
            {
                "product_id": result.product.pk,
                "direction": result.direction,
                "quantity": result.quantity,
                "batch_id": result.batch.pk if result.batch else None,
                "unit_cost": str(result.unit_cost),
                "stock": stock_for(self.ctx, result.product),
            },
            status=status.HTTP_201_CREATED,
        )
