from datetime import timedelta
from decimal import Decimal

from django.test import TestCase
from django.utils import timezone
from rest_framework.test import APIClient

from core.testing import make_account, make_product, make_tenant
from events.models import Event
from events.services import add_event_expense
from products.models import InventoryMovement
from products.services.cost_layers import add_layer
from reporting.services.events import event_profit
from reporting.services.profit import product_profits, product_tax_share, sale_profit
from sales.services.sale_service import create_sale


class ProductTaxShareTests(TestCase):
    def test_fully_discounted_sale_has_no_tax_share(self):
        self.assertEqual(
            product_tax_share(Decimal("0"), Decimal("0"), Decimal("100"), Decimal("100")),
            Decimal("0"),
        )

    def test_share_is_proportional_to_line_total(self):
        share = product_tax_share(Decimal("30"), Decimal("50"), Decimal("200"), Decimal("50"))
        self.assertEqual(share, Decimal("10"))


class ProfitConsistencyTests(TestCase):
    """
    GUARANTEES:
    - Sale detail, dashboard and event detail report the same profit
    - Event profit subtracts fixed cost and EVENT expenses
    - Per-product profit carries each line's share of the sale tax
    """

    def setUp(self):
        self.org, self.user, self.ctx = make_tenant(tax_rate="0.15")
        self.account = make_account(self.ctx, opening_balance="100")
        self.mug = make_product(self.ctx, name="Taza", price="115.00")
        self.plate = make_product(self.ctx, name="Plato", price="230.00")
        for product, cost in ((self.mug, "40"), (self.plate, "90")):
            add_layer(
                self.ctx,
                product,
                quantity=10,
                unit_cost=cost,
                reference_type=InventoryMovement.ReferenceType.ADJUSTMENT,
                reference_id=None,
            )

        now = timezone.now()
        self.event = Event.objects.create(
            organization=self.org,
            name="Feria",
            starts_at=now - timedelta(hours=2),
            ends_at=now + timedelta(hours=2),
            fixed_cost=Decimal("50.00"),
        )
        self.sale = create_sale(
            self.ctx,
            account_id=self.account.pk,
            event_id=self.event.pk,
            items=[
                {"product_id": self.mug.pk, "quantity": 2},
                {"product_id": self.plate.pk, "quantity": 1},
            ],
            discount_type="AMOUNT",
            discount_value="46",
            shipping_cost="20",
        )
        self.client = APIClient()
        self.client.force_authenticate(self.user)

    def test_sale_figures(self):
        # subtotal 460, discount 46, net 414 -> tax 54.00
        self.assertEqual(self.sale.subtotal, Decimal("460.00"))
        self.assertEqual(self.sale.tax, Decimal("54.00"))
        self.assertEqual(self.sale.total, Decimal("434.00"))
        # 414 - (2*40 + 90) - 54
        self.assertEqual(sale_profit(self.sale), Decimal("190.00"))

    def test_three_read_paths_agree(self):
        expected = sale_profit(self.sale)

        detail = self.client.get(f"/api/sales/{self.sale.pk}/")
        self.assertEqual(detail.status_code, 200)
        self.assertEqual(detail.data["profit"], expected)

        dashboard = self.client.get("/api/dashboard/")
        self.assertEqual(dashboard.status_code, 200)
        self.assertEqual(dashboard.data["metrics"]["profit"], expected)
        self.assertEqual(dashboard.data["recent_sales"][0]["profit"], expected)
        self.assertEqual(sum(r["profit"] for r in dashboard.data["sales_chart"]), expected)

        event = self.client.get(f"/api/events/{self.event.pk}/")
        self.assertEqual(event.status_code, 200)
        self.assertEqual(event.data["summary"]["total_profit"], expected)
        self.assertEqual(event.data["sales"][0]["profit"], expected)

    def test_event_profit_subtracts_fixed_cost_and_expenses(self):
        add_event_expense(
            self.ctx,
            self.event.pk,
            account_id=self.account.pk,
            amount="30",
            description="Transporte",
        )

        self.assertEqual(event_profit(self.ctx, self.event), Decimal("190.00") - Decimal("50.00") - Decimal("30.00"))

    def test_product_profits_sum_to_sale_profit(self):
        rows = product_profits([self.sale])
        self.assertEqual([r["name"] for r in rows], ["Taza", "Plato"])
        self.assertEqual(sum(r["profit"] for r in rows), sale_profit(self.sale))

    def test_other_tenant_sees_empty_dashboard(self):
        _, stranger, _ = make_tenant("Otra", email="otra@example.com")
        client = APIClient()
        client.force_authenticate(stranger)

        res = client.get("/api/dashboard/")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["metrics"]["sales_count"], 0)
        self.assertEqual(res.data["metrics"]["profit"], Decimal("0.00"))
