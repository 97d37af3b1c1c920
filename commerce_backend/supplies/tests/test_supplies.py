from decimal import Decimal

from django.test import TestCase
from rest_framework.test import APIClient

from accounting.models import Transaction
from core.errors import NotFoundError
from core.testing import make_account, make_tenant
from supplies.models import Supply, SupplyMovement
from supplies.services import consume_supplies, record_supply_purchase, resolve_supply_usages


class SupplyStockTests(TestCase):
    """
    GUARANTEES:
    - Consumption floors stock at zero and logs one OUT movement
    - Restocks raise stock, refresh unit cost and log one IN movement
    - Supplies of another tenant are not found
    """

    def setUp(self):
        self.org, self.user, self.ctx = make_tenant()
        self.bag = Supply.objects.create(
            organization=self.org, name="Bolsa", stock=3, unit_cost=Decimal("1.5000")
        )

    def test_consumption_is_floored_at_zero(self):
        usages = resolve_supply_usages(self.ctx, [{"supply_id": self.bag.pk, "quantity": 5}])
        self.assertEqual(usages[0].unit_cost, Decimal("1.5000"))
        self.assertEqual(usages[0].line_total, Decimal("7.50"))

        consume_supplies(self.ctx, usages, reference_id=1)

        self.bag.refresh_from_db()
        self.assertEqual(self.bag.stock, 0)
        movement = SupplyMovement.objects.get(supply=self.bag)
        self.assertEqual(movement.movement_type, SupplyMovement.MovementType.OUT)
        self.assertEqual(movement.quantity, 5)

    def test_foreign_supply_is_not_found(self):
        _, _, other_ctx = make_tenant("Otra")
        with self.assertRaises(NotFoundError):
            resolve_supply_usages(other_ctx, [{"supply_id": self.bag.pk, "quantity": 1}])

    def test_restock_updates_stock_and_cost(self):
        account = make_account(self.ctx, opening_balance="100")
        purchase = record_supply_purchase(
            self.ctx,
            account_id=account.pk,
            items=[{"supply_id": self.bag.pk, "quantity": 10, "unit_cost": "2"}],
        )

        self.bag.refresh_from_db()
        self.assertEqual(self.bag.stock, 13)
        self.assertEqual(self.bag.unit_cost, Decimal("2.0000"))
        self.assertEqual(purchase.total, Decimal("20.00"))
        self.assertTrue(
            SupplyMovement.objects.filter(
                supply=self.bag,
                movement_type=SupplyMovement.MovementType.IN,
                reference_id=purchase.pk,
            ).exists()
        )

        account.refresh_from_db()
        self.assertEqual(account.balance, Decimal("80.00"))
        self.assertTrue(
            Transaction.objects.filter(type=Transaction.Type.EXPENSE, amount=Decimal("20.00")).exists()
        )


class SupplyApiTests(TestCase):
    def setUp(self):
        self.org, self.user, self.ctx = make_tenant()
        self.client = APIClient()
        self.client.force_authenticate(self.user)

    def test_create_and_reject_duplicate_name(self):
        res = self.client.post("/api/supplies/", {"name": "Etiqueta", "min_stock": 5}, format="json")
        self.assertEqual(res.status_code, 201)
        self.assertTrue(res.data["is_below_minimum"])

        dup = self.client.post("/api/supplies/", {"name": "etiqueta"}, format="json")
        self.assertEqual(dup.status_code, 400)

    def test_low_stock_lists_only_below_minimum(self):
        Supply.objects.create(organization=self.org, name="Cinta", stock=1, min_stock=5)
        Supply.objects.create(organization=self.org, name="Caja", stock=10, min_stock=5)

        res = self.client.get("/api/supplies/low-stock/")
        self.assertEqual(res.status_code, 200)
        self.assertEqual([row["name"] for row in res.data], ["Cinta"])
