# products/tests/test_products_api.py

from decimal import Decimal

from django.test import TestCase
from rest_framework.test import APIClient

from core.testing import make_product, make_tenant
from products.models import Product


class ProductApiTests(TestCase):
    def setUp(self):
        self.org, self.user, self.ctx = make_tenant()
        self.client = APIClient()
        self.client.force_authenticate(self.user)

    def test_create_normalizes_sku_and_reports_zero_stock(self):
        res = self.client.post(
            "/api/products/",
            {"name": "Taza", "sku": " tz-01 ", "price": "45.00"},
            format="json",
        )

        self.assertEqual(res.status_code, 201)
        self.assertEqual(res.data["sku"], "TZ-01")
        self.assertEqual(res.data["stock"], 0)
        self.assertTrue(res.data["is_low_stock"])

    def test_negative_price_is_rejected(self):
        res = self.client.post("/api/products/", {"name": "Taza", "price": "-1"}, format="json")
        self.assertEqual(res.status_code, 400)

    def test_stock_follows_adjustments(self):
        product = make_product(self.ctx, name="Taza")

        res = self.client.post(
            "/api/inventory/adjust/",
            {"product_id": product.pk, "direction": "IN", "quantity": 15, "notes": "Inicial", "unit_cost": "8"},
            format="json",
        )
        self.assertEqual(res.status_code, 201)
        self.assertEqual(res.data["stock"], 15)

        detail = self.client.get(f"/api/products/{product.pk}/")
        self.assertEqual(detail.data["stock"], 15)
        self.assertEqual(detail.data["stock_value"], "120.00")
        self.assertFalse(detail.data["is_low_stock"])

    def test_out_adjustment_beyond_stock_returns_400(self):
        product = make_product(self.ctx, name="Taza")
        res = self.client.post(
            "/api/inventory/adjust/",
            {"product_id": product.pk, "direction": "OUT", "quantity": 1, "notes": "Rotura"},
            format="json",
        )
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data["available"], 0)

    def test_delete_is_soft(self):
        product = make_product(self.ctx, name="Taza")

        res = self.client.delete(f"/api/products/{product.pk}/")
        self.assertEqual(res.status_code, 204)

        product.refresh_from_db()
        self.assertFalse(product.is_active)
        listing = self.client.get("/api/products/")
        self.assertEqual(listing.data["count"], 0)

    def test_low_stock_list(self):
        make_product(self.ctx, name="Taza")
        res = self.client.get("/api/products/low-stock/")
        self.assertEqual(res.status_code, 200)
        self.assertEqual([r["name"] for r in res.data], ["Taza"])

    def test_products_are_tenant_scoped(self):
        _, _, other_ctx = make_tenant("Otra", email="otra@example.com")
        foreign = make_product(other_ctx, name="Ajena")

        self.assertEqual(self.client.get(f"/api/products/{foreign.pk}/").status_code, 404)
        listing = self.client.get("/api/products/")
        self.assertEqual(listing.data["count"], 0)
        self.assertTrue(Product.objects.filter(pk=foreign.pk).exists())

    def test_batches_filter_by_product(self):
        a = make_product(self.ctx, name="A")
        b = make_product(self.ctx, name="B")
        for product in (a, b):
            self.client.post(
                "/api/inventory/adjust/",
                {"product_id": product.pk, "direction": "IN", "quantity": 2, "notes": "Inicial"},
                format="json",
            )

        res = self.client.get(f"/api/inventory/batches/?product_id={a.pk}")
        self.assertEqual(res.status_code, 200)
        self.assertEqual([r["product"] for r in res.data["results"]], [a.pk])
        self.assertEqual(res.data["results"][0]["unit_cost"], "0.0000")
