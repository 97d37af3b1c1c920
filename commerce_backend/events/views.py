# events/views.py

"""
EVENTS API

/api/events/                    list (status + sales/expense totals) / create
/api/events/<id>/               detail with sales, expenses and profit summary / patch / delete
/api/events/<id>/expenses/      record an event expense (EXPENSE, reference EVENT)
"""

from drf_spectacular.utils import extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from accounting.api.serializers import TransactionSerializer
from core.api import TenantScopedMixin, error_response
from core.errors import CommerceError
from events.models import Event
from events.serializers import EventExpenseCreateSerializer, EventSerializer
from events.services import add_event_expense
from reporting.services.events import event_expenses, event_summary, event_totals
from tenants.api.permissions import HasOrganization


class EventViewSet(TenantScopedMixin, viewsets.ModelViewSet):
    serializer_class = EventSerializer
    permission_classes = [HasOrganization]
    http_method_names = ["get", "post", "patch", "delete", "head", "options"]

    def get_queryset(self):
        return Event.objects.for_tenant(self.ctx).order_by("-starts_at", "-id")

    def perform_create(self, serializer):
        serializer.save(organization=self.ctx.organization)

    @extend_schema(tags=["events"])
    def list(self, request, *args, **kwargs):
        qs = self.get_queryset()
        page = self.paginate_queryset(qs)
        events = list(page if page is not None else qs)
        totals = event_totals(self.ctx, events)

        rows = []
        for event, row in zip(events, EventSerializer(events, many=True).data):
            rows.append({**row, **totals[event.pk]})

        if page is not None:
            return self.get_paginated_response(rows)
        return Response(rows)

    @extend_schema(tags=["events"])
    def retrieve(self, request, *args, **kwargs):
        event = self.get_object()
        return Response({**EventSerializer(event).data, **event_summary(self.ctx, event)})

    @extend_schema(tags=["events"])
    def destroy(self, request, *args, **kwargs):
        event = self.get_object()
        if event.sales.exists() or event_expenses(self.ctx, event).exists():
            return Response(
                {"detail": "Events with sales or expenses cannot be deleted", "code": "validation_error"},
                status=status.HTTP_400_BAD_REQUEST,
            )
        event.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        tags=["events"],
        request=EventExpenseCreateSerializer,
        responses={201: TransactionSerializer},
    )
    @action(detail=True, methods=["post"], url_path="expenses")
    def expenses(self, request, pk=None):
        event = self.get_object()
        s = EventExpenseCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            txn = add_event_expense(
                self.ctx,
                event.pk,
                account_id=data["account_id"],
                amount=data["amount"],
                description=data.get("description", ""),
                occurred_at=data.get("occurred_at"),
            )
        except CommerceError as exc:
            return error_response(exc)

        return Response(TransactionSerializer(txn).data, status=status.HTTP_201_CREATED)
