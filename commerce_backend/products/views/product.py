# products/views/product.py

"""
PRODUCT VIEWSET

Purpose:
- Tenant-scoped product management (CRUD)
- Stock annotated from cost layers on every list/retrieve
- DELETE is a soft delete (is_active=False): products with sales or
  cost layers must stay referenceable.
- Low stock alert: GET /api/products/low-stock/
"""

from django.db.models import Q
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from core.api import TenantScopedMixin
from products.models import Product
from products.serializers import ProductSerializer
from products.services.stock_reports import low_stock_queryset
from tenants.api.permissions import HasOrganization


class ProductViewSet(TenantScopedMixin, viewsets.ModelViewSet):
    serializer_class = ProductSerializer
    permission_classes = [HasOrganization]
    http_method_names = ["get", "post", "patch", "delete", "head", "options"]

    def get_queryset(self):
        qs = Product.objects.for_tenant(self.ctx).with_stock()

        params = self.request.query_params
        if params.get("include_inactive") not in ("1", "true"):
            qs = qs.filter(is_active=True)

        q = (params.get("q") or "").strip()
        if q:
            qs = qs.filter(Q(name__icontains=q) | Q(sku__icontains=q))

        return qs.order_by("name", "id")

    def perform_create(self, serializer):
        serializer.save(organization=self.ctx.organization)

    @extend_schema(tags=["products"])
    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        self.perform_create(serializer)
        product = self.get_queryset().get(pk=serializer.instance.pk)
        return Response(ProductSerializer(product).data, status=status.HTTP_201_CREATED)

    @extend_schema(tags=["products"])
    def partial_update(self, request, *args, **kwargs):
        product = self.get_object()
        serializer = self.get_serializer(product, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        product = self.get_queryset().get(pk=product.pk)
        return Response(ProductSerializer(product).data)

    @extend_schema(tags=["products"])
    def destroy(self, request, *args, **kwargs):
        product = self.get_object()
        if product.is_active:
            product.is_active = False
            product.save(update_fields=["is_active", "updated_at"])
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        tags=["products"],
        parameters=[OpenApiParameter("limit", int, required=False)],
        responses=ProductSerializer(many=True),
    )
    @action(detail=False, methods=["get"], url_path="low-stock")
    def low_stock(self, request):
        qs = low_stock_queryset(self.ctx)
        limit = request.query_params.get("limit")
        if limit and limit.isdigit():
            qs = qs[: int(limit)]
        return Response(ProductSerializer(qs, many=True).data)

