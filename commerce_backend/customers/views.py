# customers/views.py

"""
CUSTOMERS API

/api/customers/         list (?q= name/phone/email) / create
/api/customers/<id>/    retrieve / patch / delete
"""

from django.db.models import Q
from drf_spectacular.utils import extend_schema, extend_schema_view
from rest_framework import viewsets

from core.api import TenantScopedMixin
from customers.models import Customer
from customers.serializers import CustomerSerializer
from tenants.api.permissions import HasOrganization


@extend_schema_view(
    list=extend_schema(tags=["customers"]),
    create=extend_schema(tags=["customers"]),
    retrieve=extend_schema(tags=["customers"]),
    partial_update=extend_schema(tags=["customers"]),
    destroy=extend_schema(tags=["customers"]),
)
class CustomerViewSet(TenantScopedMixin, viewsets.ModelViewSet):
    serializer_class = CustomerSerializer
    permission_classes = [HasOrganization]
    http_method_names = ["get", "post", "patch", "delete", "head", "options"]

    def get_queryset(self):
        qs = Customer.objects.for_tenant(self.ctx)
        q = (self.request.query_params.get("q") or "").strip()
        if q:
            qs = qs.filter(Q(name__icontains=q) | Q(phone__icontains=q) | Q(email__icontains=q))
        return qs.order_by("name", "id")

    def perform_create(self, serializer):
        serializer.save(organization=self.ctx.organization)
