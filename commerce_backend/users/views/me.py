# users/views/me.py

from drf_spectacular.utils import extend_schema
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from tenants.api.serializers import OrganizationSerializer
from users.serializers import UserSerializer


class MeView(APIView):
    """
    Current user plus the tenant settings the client needs up front
    (currency for purchase forms, tax_rate for sale previews).
    """

    permission_classes = [IsAuthenticated]
    serializer_class = UserSerializer

    @extend_schema(tags=["auth"], responses={200: UserSerializer})
    def get(self, request):
        data = UserSerializer(request.user).data
        organization = request.user.organization
        data["organization"] = OrganizationSerializer(organization).data if organization else None
        return Response(data)
