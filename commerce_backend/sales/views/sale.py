# sales/views/sale.py

"""
SALES API

GET  /api/sales/?preset=&from=&to=&payment=&customer_id=&event_id=
     preset: today | 7d | this_month | last_month | all (default all);
     from/to (YYYY-MM-DD, inclusive) override the preset.
POST /api/sales/            commit a sale (FIFO, stock, supplies, INCOME, customer)
GET  /api/sales/<id>/       detail with items, supplies and profit
GET  /api/sales/periods/    (year, month) pairs with sales
"""

from django.db.models import Count
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.response import Response

from core.api import TenantScopedMixin, error_response
from core.errors import CommerceError
from core.periods import periods_for, resolve_sales_range
from reporting.services.profit import sale_profits
from sales.models import Sale
from sales.serializers import SaleCreateSerializer, SaleDetailSerializer, SaleListSerializer
from sales.services.sale_service import create_sale
from tenants.api.permissions import HasOrganization


def _sales(ctx):
    return (
        Sale.objects.for_tenant(ctx)
        .select_related("customer", "account")
        .annotate(items_count=Count("items"))
    )


def _detail(ctx, sale_id):
    sale = (
        _sales(ctx)
        .prefetch_related("items", "items__product", "supplies_used", "supplies_used__supply")
        .get_owned(ctx, sale_id, label="Sale")
    )
    return SaleDetailSerializer(sale, context={"profits": sale_profits([sale])}).data


class SaleListCreateView(TenantScopedMixin, GenericAPIView):
    permission_classes = [HasOrganization]
    serializer_class = SaleListSerializer

    @extend_schema(
        tags=["sales"],
        parameters=[
            OpenApiParameter("preset", str, required=False),
            OpenApiParameter("from", str, required=False),
            OpenApiParameter("to", str, required=False),
            OpenApiParameter("payment", str, required=False),
            OpenApiParameter("customer_id", int, required=False),
            OpenApiParameter("event_id", int, required=False),
        ],
        responses=SaleListSerializer(many=True),
    )
    def get(self, request):
        params = request.query_params
        try:
            period = resolve_sales_range(params)
        except CommerceError as exc:
            return error_response(exc)

        qs = period.filter(_sales(self.ctx), "sold_at")

        payment = (params.get("payment") or "").strip().upper()
        if payment and payment != "ALL":
            qs = qs.filter(payment_method=payment)
        for param in ("customer_id", "event_id"):
            value = (params.get(param) or "").strip()
            if value.isdigit():
                qs = qs.filter(**{param: int(value)})

        qs = qs.order_by("-sold_at", "-id")
        page = self.paginate_queryset(qs)
        rows = list(page if page is not None else qs)
        data = SaleListSerializer(rows, many=True, context={"profits": sale_profits(rows)}).data
        if page is not None:
            return self.get_paginated_response(data)
        return Response(data)

    @extend_schema(
        tags=["sales"],
        request=SaleCreateSerializer,
        responses={201: SaleDetailSerializer},
    )
    def post(self, request):
        s = SaleCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            sale = create_sale(
                self.ctx,
                account_id=data["account_id"],
                items=data["items"],
                payment_method=data.get("payment_method"),
                customer_id=data.get("customer_id"),
                event_id=data.get("event_id"),
                discount_type=data.get("discount_type"),
                discount_value=data.get("discount_value"),
                shipping_cost=data.get("shipping_cost"),
                notes=data.get("notes", ""),
                sold_at=data.get("sold_at"),
                supplies_used=data.get("supplies_used"),
            )
        except CommerceError as exc:
            return error_response(exc)

        return Response(_detail(self.ctx, sale.pk), status=status.HTTP_201_CREATED)


class SaleDetailView(TenantScopedMixin, GenericAPIView):
    permission_classes = [HasOrganization]
    serializer_class = SaleDetailSerializer

    @extend_schema(tags=["sales"], responses=SaleDetailSerializer)
    def get(self, request, sale_id):
        try:
            return Response(_detail(self.ctx, sale_id))
        except CommerceError as exc:
            return error_response(exc)


class SalePeriodsView(TenantScopedMixin, GenericAPIView):
    permission_classes = [HasOrganization]

    @extend_schema(tags=["sales"], responses=dict)
    def get(self, request):
        return Response({"periods": periods_for(Sale.objects.for_tenant(self.ctx), "sold_at")})
