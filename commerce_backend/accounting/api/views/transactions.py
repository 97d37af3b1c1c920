# accounting/api/views/transactions.py

"""
PATH: accounting/api/views/transactions.py

TRANSACTIONS API

GET  /api/transactions/?month=&year=&account_id=&type=
     Period list (default: current month) + totals per type.
POST /api/transactions/
     Manual INCOME / EXPENSE / TRANSFER (reference OTHER).
GET  /api/transactions/periods/
     Distinct (year, month) pairs with activity.
"""

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.response import Response

from accounting.api.serializers import TransactionCreateSerializer, TransactionSerializer
from accounting.models import Transaction
from accounting.services.account_service import record_manual_transaction
from accounting.services.queries import transactions_for_period
from core.api import TenantScopedMixin, error_response
from core.errors import CommerceError
from core.periods import periods_for, resolve_month_year
from tenants.api.permissions import HasOrganization


class TransactionListCreateView(TenantScopedMixin, GenericAPIView):
    permission_classes = [HasOrganization]
    serializer_class = TransactionSerializer

    @extend_schema(
        tags=["transactions"],
        parameters=[
            OpenApiParameter("month", int, required=False),
            OpenApiParameter("year", int, required=False),
            OpenApiParameter("account_id", int, required=False),
            OpenApiParameter("type", str, required=False),
        ],
        responses=TransactionSerializer(many=True),
    )
    def get(self, request):
        params = request.query_params
        try:
            period = resolve_month_year(params)
            qs, totals = transactions_for_period(
                self.ctx,
                period=period,
                account_id=params.get("account_id"),
                type=(params.get("type") or "").strip().upper() or None,
            )
        except CommerceError as exc:
            return error_response(exc)

        page = self.paginate_queryset(qs)
        rows = TransactionSerializer(page if page is not None else qs, many=True).data
        payload = {"period": period.as_dict(), "totals": totals, "results": rows}
        if page is not None:
            payload["count"] = self.paginator.page.paginator.count
        return Response(payload)

    @extend_schema(
        tags=["transactions"],
        request=TransactionCreateSerializer,
        responses={201: TransactionSerializer},
    )
    def post(self, request):
        s = TransactionCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            txn = record_manual_transaction(
                self.ctx,
                type=data["type"],
                account_id=data["account_id"],
                to_account_id=data.get("to_account_id"),
                amount=data["amount"],
                category=data.get("category", ""),
                description=data.get("description", ""),
                occurred_at=data.get("occurred_at"),
            )
        except CommerceError as exc:
            return error_response(exc)

        return Response(TransactionSerializer(txn).data, status=status.HTTP_201_CREATED)


class TransactionPeriodsView(TenantScopedMixin, GenericAPIView):
    permission_classes = [HasOrganization]

    @extend_schema(tags=["transactions"], responses=dict)
    def get(self, request):
        qs = Transaction.objects.for_tenant(self.ctx)
        return Response({"periods": periods_for(qs, "occurred_at")})
