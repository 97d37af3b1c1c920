from datetime import timedelta
from decimal import Decimal

from django.test import TestCase
from django.utils import timezone
from rest_framework.test import APIClient

from accounting.models import Transaction
from core.errors import NotFoundError, TransactionFailure, ValidationError
from core.testing import make_account, make_product, make_tenant
from events.models import Event
from events.services import add_event_expense
from products.models import InventoryMovement
from products.services.cost_layers import add_layer
from sales.services.sale_service import create_sale


def _event(org, *, starts_in=timedelta(hours=-1), lasts=timedelta(hours=4), fixed_cost="100.00"):
    starts_at = timezone.now() + starts_in
    return Event.objects.create(
        organization=org,
        name="Mercado de Artesanos",
        location="Plaza",
        starts_at=starts_at,
        ends_at=starts_at + lasts,
        fixed_cost=Decimal(fixed_cost),
    )


class EventStatusTests(TestCase):
    def setUp(self):
        self.org, _, _ = make_tenant()

    def test_status_is_derived_from_the_clock(self):
        event = _event(self.org)
        self.assertEqual(event.status_at(event.starts_at - timedelta(minutes=1)), Event.Status.PLANNED)
        self.assertEqual(event.status_at(event.starts_at), Event.Status.ACTIVE)
        self.assertEqual(event.status_at(event.ends_at), Event.Status.ACTIVE)
        self.assertEqual(event.status_at(event.ends_at + timedelta(seconds=1)), Event.Status.COMPLETED)
        self.assertEqual(event.status, Event.Status.ACTIVE)


class EventProfitTests(TestCase):
    """
    GUARANTEES:
    - Sales attached to an event post INCOME tagged EVENT/<id>
    - Event expenses post EXPENSE tagged EVENT/<id> and lower net profit
    - Events with sales or expenses cannot be deleted
    """

    def setUp(self):
        self.org, self.user, self.ctx = make_tenant()
        self.account = make_account(self.ctx, opening_balance="500")
        self.event = _event(self.org)
        self.client = APIClient()
        self.client.force_authenticate(self.user)

    def _sell(self):
        product = make_product(self.ctx, name="Jarrón", price="200.00")
        add_layer(
            self.ctx,
            product,
            quantity=5,
            unit_cost="80",
            reference_type=InventoryMovement.ReferenceType.ADJUSTMENT,
            reference_id=None,
        )
        return create_sale(
            self.ctx,
            account_id=self.account.pk,
            event_id=self.event.pk,
            items=[{"product_id": product.pk, "quantity": 2}],
        )

    def test_event_net_profit_includes_sale_profit(self):
        sale = self._sell()

        res = self.client.get(f"/api/events/{self.event.pk}/")
        self.assertEqual(res.status_code, 200)
        summary = res.data["summary"]
        self.assertEqual(summary["sales_count"], 1)
        self.assertEqual(summary["total_sales"], sale.total)
        # 400 - 2 * 80
        self.assertEqual(summary["total_profit"], Decimal("240.00"))
        self.assertEqual(summary["net_profit"], Decimal("140.00"))
        self.assertEqual(summary["roi"], Decimal("140.00"))

    def test_expense_action_posts_event_expense(self):
        self._sell()

        res = self.client.post(
            f"/api/events/{self.event.pk}/expenses/",
            {"account_id": self.account.pk, "amount": "40.00", "description": "Toldo"},
            format="json",
        )
        self.assertEqual(res.status_code, 201)
        self.assertEqual(res.data["type"], Transaction.Type.EXPENSE)
        self.assertEqual(res.data["reference_type"], Transaction.ReferenceType.EVENT)
        self.assertEqual(res.data["reference_id"], self.event.pk)

        self.account.refresh_from_db()
        # 500 + 400 income - 40 expense
        self.assertEqual(self.account.balance, Decimal("860.00"))

        summary = self.client.get(f"/api/events/{self.event.pk}/").data["summary"]
        self.assertEqual(summary["expenses_total"], Decimal("40.00"))
        self.assertEqual(summary["total_expenses"], Decimal("140.00"))
        self.assertEqual(summary["net_profit"], Decimal("100.00"))

    def test_list_carries_totals_and_status(self):
        self._sell()

        res = self.client.get("/api/events/")
        self.assertEqual(res.status_code, 200)
        row = res.data["results"][0]
        self.assertEqual(row["status"], Event.Status.ACTIVE)
        self.assertEqual(row["total_sales"], Decimal("400.00"))
        self.assertEqual(row["net_profit"], Decimal("140.00"))

    def test_expense_rejects_non_positive_amount(self):
        res = self.client.post(
            f"/api/events/{self.event.pk}/expenses/",
            {"account_id": self.account.pk, "amount": "0"},
            format="json",
        )
        self.assertEqual(res.status_code, 400)
        self.assertFalse(Transaction.objects.filter(type=Transaction.Type.EXPENSE).exists())

    def test_expense_rejects_overlong_description(self):
        res = self.client.post(
            f"/api/events/{self.event.pk}/expenses/",
            {"account_id": self.account.pk, "amount": "25.00", "description": "x" * 300},
            format="json",
        )
        self.assertEqual(res.status_code, 400)
        self.assertFalse(Transaction.objects.filter(type=Transaction.Type.EXPENSE).exists())
        self.account.refresh_from_db()
        self.assertEqual(self.account.balance, Decimal("500.00"))

    def test_model_validation_surfaces_as_validation_error(self):
        with self.assertRaises(ValidationError) as cm:
            add_event_expense(
                self.ctx,
                self.event.pk,
                account_id=self.account.pk,
                amount="25.00",
                description="x" * 300,
            )

        self.assertNotIsInstance(cm.exception, TransactionFailure)
        self.assertEqual(cm.exception.status_code, 400)
        self.assertIn("description", cm.exception.message)
        self.assertFalse(Transaction.objects.filter(type=Transaction.Type.EXPENSE).exists())
        self.account.refresh_from_db()
        self.assertEqual(self.account.balance, Decimal("500.00"))

    def test_expense_for_other_tenants_event_is_not_found(self):
        other_org, _, _ = make_tenant("Otra", email="otra@example.com")
        foreign = _event(other_org)

        with self.assertRaises(NotFoundError):
            add_event_expense(self.ctx, foreign.pk, account_id=self.account.pk, amount="10")

        res = self.client.get(f"/api/events/{foreign.pk}/")
        self.assertEqual(res.status_code, 404)

    def test_delete_blocked_once_event_has_activity(self):
        self._sell()
        res = self.client.delete(f"/api/events/{self.event.pk}/")
        self.assertEqual(res.status_code, 400)
        self.assertTrue(Event.objects.filter(pk=self.event.pk).exists())

    def test_delete_empty_event(self):
        res = self.client.delete(f"/api/events/{self.event.pk}/")
        self.assertEqual(res.status_code, 204)
        self.assertFalse(Event.objects.filter(pk=self.event.pk).exists())

    def test_create_rejects_inverted_dates(self):
        now = timezone.now()
        res = self.client.post(
            "/api/events/",
            {
                "name": "Feria",
                "starts_at": now.isoformat(),
                "ends_at": (now - timedelta(days=1)).isoformat(),
            },
            format="json",
        )
        self.assertEqual(res.status_code, 400)
