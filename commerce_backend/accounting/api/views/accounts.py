# accounting/api/views/accounts.py

"""
PATH: accounting/api/views/accounts.py

ACCOUNTS API

GET    /api/accounts/                     active accounts (?include_inactive=1 for all)
POST   /api/accounts/                     create (optional opening_balance)
GET    /api/accounts/<id>/                detail
PATCH  /api/accounts/<id>/                rename / retype / reactivate
DELETE /api/accounts/<id>/                soft delete (is_active=False)
GET    /api/accounts/<id>/reconcile/      stored vs recomputed balance
"""

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.response import Response

from accounting.api.serializers import (
    AccountCreateSerializer,
    AccountSerializer,
    AccountUpdateSerializer,
)
from accounting.models import Account
from accounting.services.account_service import (
    create_account,
    deactivate_account,
    update_account,
)
from accounting.services.ledger import reconcile_account
from core.api import TenantScopedMixin, error_response
from core.errors import CommerceError
from users.permissions import IsMemberReadOnlyOrAdmin


class AccountListCreateView(TenantScopedMixin, GenericAPIView):
    permission_classes = [IsMemberReadOnlyOrAdmin]
    serializer_class = AccountSerializer

    @extend_schema(tags=["accounts"], responses=AccountSerializer(many=True))
    def get(self, request):
        qs = Account.objects.for_tenant(self.ctx)
        if request.query_params.get("include_inactive") not in ("1", "true"):
            qs = qs.filter(is_active=True)
        return Response(AccountSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        tags=["accounts"],
        request=AccountCreateSerializer,
        responses={201: AccountSerializer},
    )
    def post(self, request):
        s = AccountCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            account = create_account(
                self.ctx,
                name=data["name"],
                type=data["type"],
                account_number=data.get("account_number", ""),
                opening_balance=data.get("opening_balance"),
            )
        except CommerceError as exc:
            return error_response(exc)

        return Response(AccountSerializer(account).data, status=status.HTTP_201_CREATED)


class AccountDetailView(TenantScopedMixin, GenericAPIView):
    permission_classes = [IsMemberReadOnlyOrAdmin]
    serializer_class = AccountSerializer

    @extend_schema(tags=["accounts"], responses=AccountSerializer)
    def get(self, request, account_id):
        try:
            account = Account.objects.get_owned(self.ctx, account_id, label="Account")
        except CommerceError as exc:
            return error_response(exc)
        return Response(AccountSerializer(account).data)

    @extend_schema(tags=["accounts"], request=AccountUpdateSerializer, responses=AccountSerializer)
    def patch(self, request, account_id):
        s = AccountUpdateSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            account = update_account(self.ctx, account_id, **s.validated_data)
        except CommerceError as exc:
            return error_response(exc)
        return Response(AccountSerializer(account).data)

    @extend_schema(tags=["accounts"], responses=AccountSerializer)
    def delete(self, request, account_id):
        try:
            account = deactivate_account(self.ctx, account_id)
        except CommerceError as exc:
            return error_response(exc)
        return Response(AccountSerializer(account).data, status=status.HTTP_200_OK)


class AccountReconcileView(TenantScopedMixin, GenericAPIView):
    permission_classes = [IsMemberReadOnlyOrAdmin]

    @extend_schema(tags=["accounts"], responses=dict)
    def get(self, request, account_id):
        try:
            result = reconcile_account(self.ctx, account_id)
        except CommerceError as exc:
            return error_response(exc)

        return Response(
            {
                "account_id": result.account_id,
                "stored_balance": str(result.stored_balance),
                "computed_balance": str(result.computed_balance),
                "difference": str(result.difference),
                "is_balanced": result.is_balanced,
            }
        )
