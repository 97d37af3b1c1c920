from decimal import Decimal

from django.test import TestCase
from rest_framework.test import APIClient

from core.testing import make_account, make_product, make_tenant
from products.models import InventoryMovement
from products.services.cost_layers import add_layer
from sales.models import Sale


class SaleApiTests(TestCase):
    """
    GUARANTEES:
    - POST /api/sales/ returns the committed totals
    - Stock shortages are a 400 carrying product + available
    - Another tenant's sale is a 404
    """

    def setUp(self):
        self.org, self.user, self.ctx = make_tenant()
        self.account = make_account(self.ctx)
        self.product = make_product(self.ctx, name="Vela", price="25.00")
        add_layer(
            self.ctx,
            self.product,
            quantity=4,
            unit_cost="10",
            reference_type=InventoryMovement.ReferenceType.ADJUSTMENT,
            reference_id=None,
        )
        self.client = APIClient()
        self.client.force_authenticate(self.user)

    def _post(self, quantity, **extra):
        payload = {
            "account_id": self.account.pk,
            "payment_method": "CARD",
            "items": [{"product_id": self.product.pk, "quantity": quantity}],
            **extra,
        }
        return self.client.post("/api/sales/", payload, format="json")

    def test_create_returns_totals_and_profit(self):
        res = self._post(2, shipping_cost="5.00")

        self.assertEqual(res.status_code, 201)
        self.assertEqual(res.data["sale_number"], "VTA-00001")
        self.assertEqual(res.data["subtotal"], "50.00")
        self.assertEqual(res.data["total"], "55.00")
        self.assertEqual(res.data["payment_method"], "CARD")
        self.assertEqual(res.data["profit"], Decimal("30.00"))
        self.assertEqual(len(res.data["items"]), 1)

    def test_insufficient_stock_is_400_with_details(self):
        res = self._post(9)

        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data["code"], "insufficient_stock")
        self.assertEqual(res.data["product"], "Vela")
        self.assertEqual(res.data["available"], 4)
        self.assertFalse(Sale.objects.exists())

    def test_list_filters_by_payment_and_carries_profit(self):
        self._post(1)
        self._post(1, payment_method="CASH")

        res = self.client.get("/api/sales/", {"payment": "CARD", "preset": "today"})
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["count"], 1)
        row = res.data["results"][0]
        self.assertEqual(row["payment_method"], "CARD")
        self.assertEqual(row["profit"], Decimal("15.00"))
        self.assertEqual(row["items_count"], 1)

    def test_bad_preset_is_400(self):
        res = self.client.get("/api/sales/", {"preset": "forever"})
        self.assertEqual(res.status_code, 400)

    def test_other_tenant_sale_is_404(self):
        sale_id = self._post(1).data["id"]

        _, stranger, _ = make_tenant("Otra", email="otra@example.com")
        client = APIClient()
        client.force_authenticate(stranger)

        res = client.get(f"/api/sales/{sale_id}/")
        self.assertEqual(res.status_code, 404)
        self.assertEqual(res.data["code"], "not_found")

    def test_unauthenticated_is_rejected(self):
        res = APIClient().get("/api/sales/")
        self.assertEqual(res.status_code, 401)
