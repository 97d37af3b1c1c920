# tenants/api/views.py

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.response import Response

from tenants.api.permissions import IsOrganizationAdmin
from tenants.api.serializers import OrganizationSerializer


class OrganizationSettingsView(GenericAPIView):
    """
    GET   /api/organization/   current tenant settings
    PATCH /api/organization/   update name / currency / tax_rate
    """

    permission_classes = [IsOrganizationAdmin]
    serializer_class = OrganizationSerializer

    @extend_schema(tags=["organization"], responses=OrganizationSerializer)
    def get(self, request):
        return Response(OrganizationSerializer(request.user.organization).data)

    @extend_schema(
        tags=["organization"],
        request=OrganizationSerializer,
        responses=OrganizationSerializer,
    )
    def patch(self, request):
        s = OrganizationSerializer(
            request.user.organization, data=request.data, partial=True
        )
        s.is_valid(raise_exception=True)
        organization = s.save()
        return Response(OrganizationSerializer(organization).data, status=status.HTTP_200_OK)
