# supplies/views.py

"""
SUPPLIES API

/api/supplies/                  list (?q=, ?include_inactive=1) / create
/api/supplies/<id>/             retrieve / patch / delete (soft)
/api/supplies/low-stock/        active supplies below min_stock
/api/supply-purchases/          restocks (?from=&to=) / record a restock
"""

from drf_spectacular.utils import extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.generics import GenericAPIView
from rest_framework.response import Response

from core.api import TenantScopedMixin, error_response
from core.errors import CommerceError
from core.periods import resolve_sales_range
from supplies.models import Supply, SupplyPurchase
from supplies.serializers import (
    SupplyPurchaseCreateSerializer,
    SupplyPurchaseSerializer,
    SupplySerializer,
)
from supplies.services import record_supply_purchase
from tenants.api.permissions import HasOrganization


class SupplyViewSet(TenantScopedMixin, viewsets.ModelViewSet):
    serializer_class = SupplySerializer
    permission_classes = [HasOrganization]
    http_method_names = ["get", "post", "patch", "delete", "head", "options"]

    def get_queryset(self):
        qs = Supply.objects.for_tenant(self.ctx)
        params = self.request.query_params
        if params.get("include_inactive") not in ("1", "true"):
            qs = qs.filter(is_active=True)
        q = (params.get("q") or "").strip()
        if q:
            qs = qs.filter(name__icontains=q)
        return qs

    def perform_create(self, serializer):
        serializer.save(organization=self.ctx.organization)

    @extend_schema(tags=["supplies"])
    def destroy(self, request, *args, **kwargs):
        supply = self.get_object()
        if supply.is_active:
            supply.is_active = False
            supply.save(update_fields=["is_active", "updated_at"])
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(tags=["supplies"], responses=SupplySerializer(many=True))
    @action(detail=False, methods=["get"], url_path="low-stock")
    def low_stock(self, request):
        qs = Supply.objects.for_tenant(self.ctx).below_minimum().order_by("stock", "name")
        return Response(SupplySerializer(qs, many=True, context={"request": request}).data)


class SupplyPurchaseListCreateView(TenantScopedMixin, GenericAPIView):
    permission_classes = [HasOrganization]
    serializer_class = SupplyPurchaseSerializer

    def _queryset(self):
        return (
            SupplyPurchase.objects.for_tenant(self.ctx)
            .prefetch_related("items", "items__supply")
        )

    @extend_schema(tags=["supplies"], responses=SupplyPurchaseSerializer(many=True))
    def get(self, request):
        try:
            period = resolve_sales_range(request.query_params)
        except CommerceError as exc:
            return error_response(exc)
        qs = period.filter(self._queryset(), "purchased_at")
        return Response(SupplyPurchaseSerializer(qs, many=True).data)

    @extend_schema(
        tags=["supplies"],
        request=SupplyPurchaseCreateSerializer,
        responses={201: SupplyPurchaseSerializer},
    )
    def post(self, request):
        s = SupplyPurchaseCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            purchase = record_supply_purchase(
                self.ctx,
                items=data["items"],
                account_id=data.get("account_id"),
                notes=data.get("notes", ""),
                purchased_at=data.get("purchased_at"),
            )
        except CommerceError as exc:
            return error_response(exc)

        purchase = self._queryset().get(pk=purchase.pk)
        return Response(SupplyPurchaseSerializer(purchase).data, status=status.HTTP_201_CREATED)
