from datetime import timedelta
from decimal import Decimal
from unittest import mock

from django.test import TestCase
from django.utils import timezone

from accounting.models import Transaction
from accounting.services.ledger import reconcile_account
from core.errors import InsufficientStockError, NotFoundError, TransactionFailure, ValidationError
from core.testing import make_account, make_product, make_tenant
from customers.models import Customer
from events.models import Event
from products.models import InventoryBatch, InventoryMovement
from products.services.cost_layers import add_layer, stock_for
from purchases.services.purchase_service import record_purchase
from reporting.services.profit import sale_profit
from sales.models import Sale, SaleItem, SaleSequence
from sales.services.pricing import price_sale
from sales.services.sale_service import create_sale


def stock(ctx, product, quantity, unit_cost, received_at=None):
    batch, _ = add_layer(
        ctx,
        product,
        quantity=quantity,
        unit_cost=unit_cost,
        reference_type=InventoryMovement.ReferenceType.ADJUSTMENT,
        reference_id=None,
        received_at=received_at,
    )
    return batch


class SaleProcessorTests(TestCase):
    """
    Sale processor end to end.

    GUARANTEES:
    - FIFO-weighted unit cost on every line
    - total = subtotal - discount + shipping, posted once as INCOME
    - Customer aggregates move exactly once per sale
    - Sale numbers are sequential per tenant
    """

    def setUp(self):
        self.org, self.user, self.ctx = make_tenant()
        self.account = make_account(self.ctx, opening_balance="1000.00")
        self.product = make_product(self.ctx, name="Taza", price="80.00")

    def test_sale_from_purchased_stock(self):
        """
        Buy 10 at L52 landed, sell 7 at L80: profit 560 - 7*52 = 196.
        """
        record_purchase(
            self.ctx,
            account_id=self.account.pk,
            currency="USD",
            exchange_rate="25",
            shipping="20",
            items=[{"product_id": self.product.pk, "quantity": 10, "unit_cost": "2"}],
        )

        sale = create_sale(
            self.ctx,
            account_id=self.account.pk,
            items=[{"product_id": self.product.pk, "quantity": 7, "unit_price": "80"}],
        )

        self.assertEqual(sale.subtotal, Decimal("560.00"))
        self.assertEqual(sale.discount, Decimal("0.00"))
        self.assertEqual(sale.total, Decimal("560.00"))

        item = SaleItem.objects.get(sale=sale)
        self.assertEqual(item.unit_cost, Decimal("52.0000"))
        self.assertEqual(item.line_total, Decimal("560.00"))
        self.assertEqual(sale_profit(sale), Decimal("196.00"))

        self.assertEqual(InventoryBatch.objects.get(product=self.product).qty_available, 3)
        self.assertEqual(stock_for(self.ctx, self.product), 3)

        income = Transaction.objects.get(type=Transaction.Type.INCOME, category="Sales")
        self.assertEqual(income.reference_type, Transaction.ReferenceType.SALE)
        self.assertEqual(income.reference_id, sale.pk)
        self.assertEqual(income.amount, Decimal("560.00"))

        self.account.refresh_from_db()
        self.assertEqual(self.account.balance, Decimal("1000.00") - Decimal("520.00") + Decimal("560.00"))
        self.assertTrue(reconcile_account(self.ctx, self.account.pk).is_balanced)

    def test_fifo_weighted_unit_cost_across_layers(self):
        now = timezone.now()
        first = stock(self.ctx, self.product, 5, "10", received_at=now - timedelta(days=2))
        second = stock(self.ctx, self.product, 5, "12", received_at=now - timedelta(days=1))

        sale = create_sale(
            self.ctx,
            account_id=self.account.pk,
            items=[{"product_id": self.product.pk, "quantity": 7}],
        )

        item = SaleItem.objects.get(sale=sale)
        # (5*10 + 2*12) / 7
        self.assertEqual(item.unit_cost, Decimal("10.5714"))
        self.assertEqual(item.unit_price, Decimal("80.00"))

        first.refresh_from_db()
        second.refresh_from_db()
        self.assertEqual(first.qty_available, 0)
        self.assertEqual(second.qty_available, 3)
        self.assertEqual(
            InventoryMovement.objects.filter(
                movement_type=InventoryMovement.MovementType.OUT, reference_id=sale.pk
            ).count(),
            1,
        )

    def test_global_percent_discount_with_shipping(self):
        other = make_product(self.ctx, name="Plato", price="150.00")
        stock(self.ctx, self.product, 10, "30")
        stock(self.ctx, other, 10, "50")

        sale = create_sale(
            self.ctx,
            account_id=self.account.pk,
            items=[
                {"product_id": self.product.pk, "quantity": 5, "unit_price": "100"},
                {"product_id": other.pk, "quantity": 2, "unit_price": "250"},
            ],
            discount_type="PERCENT",
            discount_value="10",
            shipping_cost="50",
        )

        self.assertEqual(sale.subtotal, Decimal("1000.00"))
        self.assertEqual(sale.discount, Decimal("100.00"))
        self.assertEqual(sale.total, Decimal("950.00"))
        self.assertEqual(
            sum(i.line_total for i in sale.items.all()),
            sale.subtotal - sale.discount,
        )

        income = Transaction.objects.get(reference_type=Transaction.ReferenceType.SALE, reference_id=sale.pk)
        self.assertEqual(income.amount, Decimal("950.00"))

    def test_tax_is_extracted_from_inclusive_prices(self):
        self.org.tax_rate = Decimal("0.15")
        self.org.save()
        stock(self.ctx, self.product, 1, "40")

        sale = create_sale(
            self.ctx,
            account_id=self.account.pk,
            items=[{"product_id": self.product.pk, "quantity": 1, "unit_price": "115"}],
            shipping_cost="10",
        )

        self.assertEqual(sale.tax_rate, Decimal("0.15"))
        self.assertEqual(sale.tax, Decimal("15.00"))
        self.assertEqual(sale.total, Decimal("125.00"))
        self.assertEqual(sale_profit(sale), Decimal("60.00"))

    def test_event_sale_posts_income_to_the_event(self):
        stock(self.ctx, self.product, 2, "20")
        event = Event.objects.create(
            organization=self.org,
            name="Feria",
            starts_at=timezone.now() - timedelta(hours=1),
            ends_at=timezone.now() + timedelta(hours=5),
        )

        sale = create_sale(
            self.ctx,
            account_id=self.account.pk,
            event_id=event.pk,
            items=[{"product_id": self.product.pk, "quantity": 2}],
        )

        income = Transaction.objects.get(type=Transaction.Type.INCOME, category="Sales")
        self.assertEqual(income.reference_type, Transaction.ReferenceType.EVENT)
        self.assertEqual(income.reference_id, event.pk)
        self.assertFalse(
            Transaction.objects.filter(reference_type=Transaction.ReferenceType.SALE).exists()
        )
        self.assertEqual(sale.event_id, event.pk)

    def test_customer_aggregates_and_sale_numbers(self):
        stock(self.ctx, self.product, 5, "20")
        customer = Customer.objects.create(organization=self.org, name="Ana")

        first = create_sale(
            self.ctx,
            account_id=self.account.pk,
            customer_id=customer.pk,
            items=[{"product_id": self.product.pk, "quantity": 1}],
        )
        second = create_sale(
            self.ctx,
            account_id=self.account.pk,
            customer_id=customer.pk,
            items=[{"product_id": self.product.pk, "quantity": 2}],
            shipping_cost="5",
        )

        self.assertEqual(first.sale_number, "VTA-00001")
        self.assertEqual(second.sale_number, "VTA-00002")

        customer.refresh_from_db()
        self.assertEqual(customer.total_orders, 2)
        self.assertEqual(customer.total_spent, Decimal("245.00"))

    def test_sale_numbers_are_per_tenant(self):
        stock(self.ctx, self.product, 1, "20")
        create_sale(self.ctx, account_id=self.account.pk, items=[{"product_id": self.product.pk, "quantity": 1}])

        other_org, _, other_ctx = make_tenant("Otra Tienda")
        other_account = make_account(other_ctx)
        other_product = make_product(other_ctx)
        stock(other_ctx, other_product, 1, "20")
        sale = create_sale(
            other_ctx,
            account_id=other_account.pk,
            items=[{"product_id": other_product.pk, "quantity": 1}],
        )
        self.assertEqual(sale.sale_number, "VTA-00001")


class SaleAtomicityTests(TestCase):
    """
    GUARANTEES:
    - A shortage on any line aborts the sale before anything is written
    - A failure in the write phase rolls back every row (TransactionFailure)
    """

    def setUp(self):
        self.org, self.user, self.ctx = make_tenant()
        self.account = make_account(self.ctx, opening_balance="500.00")
        self.customer = Customer.objects.create(organization=self.org, name="Ana")
        self.products = []
        for idx in range(5):
            product = make_product(self.ctx, name=f"Producto {idx + 1}", price="10.00")
            stock(self.ctx, product, 1 if idx == 3 else 5, "4")
            self.products.append(product)

    def _snapshot(self):
        self.account.refresh_from_db()
        self.customer.refresh_from_db()
        return (
            [stock_for(self.ctx, p) for p in self.products],
            sorted(InventoryBatch.objects.values_list("id", "qty_available")),
            self.account.balance,
            (self.customer.total_orders, self.customer.total_spent),
            InventoryMovement.objects.count(),
            Transaction.objects.count(),
        )

    def _cart(self):
        return [{"product_id": p.pk, "quantity": 2} for p in self.products]

    def test_shortage_on_fourth_line_changes_nothing(self):
        before = self._snapshot()

        with self.assertRaises(InsufficientStockError) as ctx:
            create_sale(
                self.ctx,
                account_id=self.account.pk,
                customer_id=self.customer.pk,
                items=self._cart(),
            )

        self.assertEqual(ctx.exception.product_name, "Producto 4")
        self.assertEqual(ctx.exception.available, 1)
        self.assertEqual(self._snapshot(), before)
        self.assertFalse(Sale.objects.exists())
        self.assertFalse(SaleSequence.objects.filter(last_value__gt=0).exists())

    def test_failure_during_writes_rolls_everything_back(self):
        cart = [{"product_id": p.pk, "quantity": 1} for p in self.products]
        before = self._snapshot()

        with mock.patch(
            "sales.services.sale_service.record_transaction",
            side_effect=RuntimeError("ledger offline"),
        ):
            with self.assertRaises(TransactionFailure) as ctx:
                create_sale(
                    self.ctx,
                    account_id=self.account.pk,
                    customer_id=self.customer.pk,
                    items=cart,
                )

        self.assertIsInstance(ctx.exception.__cause__, RuntimeError)
        self.assertEqual(self._snapshot(), before)
        self.assertFalse(Sale.objects.exists())
        self.assertFalse(SaleItem.objects.exists())

    def test_duplicate_lines_cannot_oversell(self):
        product = self.products[0]
        with self.assertRaises(InsufficientStockError):
            create_sale(
                self.ctx,
                account_id=self.account.pk,
                items=[
                    {"product_id": product.pk, "quantity": 3},
                    {"product_id": product.pk, "quantity": 3},
                ],
            )
        self.assertEqual(stock_for(self.ctx, product), 5)


class SaleValidationTests(TestCase):
    def setUp(self):
        self.org, self.user, self.ctx = make_tenant()
        self.account = make_account(self.ctx)
        self.product = make_product(self.ctx)
        stock(self.ctx, self.product, 10, "5")

    def test_mixed_discount_modes_are_rejected(self):
        with self.assertRaises(ValidationError):
            create_sale(
                self.ctx,
                account_id=self.account.pk,
                items=[{"product_id": self.product.pk, "quantity": 1, "discount": "5"}],
                discount_type="AMOUNT",
                discount_value="10",
            )
        self.assertFalse(Sale.objects.exists())

    def test_other_tenant_account_is_not_found(self):
        _, _, other_ctx = make_tenant("Otra")
        foreign = make_account(other_ctx)
        with self.assertRaises(NotFoundError):
            create_sale(
                self.ctx,
                account_id=foreign.pk,
                items=[{"product_id": self.product.pk, "quantity": 1}],
            )

    def test_other_tenant_event_is_not_found(self):
        other_org, _, _ = make_tenant("Otra")
        event = Event.objects.create(
            organization=other_org,
            name="Ajena",
            starts_at=timezone.now(),
            ends_at=timezone.now(),
        )
        with self.assertRaises(NotFoundError):
            create_sale(
                self.ctx,
                account_id=self.account.pk,
                event_id=event.pk,
                items=[{"product_id": self.product.pk, "quantity": 1}],
            )
        self.assertEqual(stock_for(self.ctx, self.product), 10)

    def test_item_discounts_reduce_line_totals(self):
        sale = create_sale(
            self.ctx,
            account_id=self.account.pk,
            items=[{"product_id": self.product.pk, "quantity": 2, "unit_price": "50", "discount": "10"}],
        )
        self.assertEqual(sale.subtotal, Decimal("100.00"))
        self.assertEqual(sale.discount, Decimal("10.00"))
        self.assertEqual(sale.total, Decimal("90.00"))
        self.assertEqual(sale.items.get().line_total, Decimal("90.00"))

    def test_discount_value_without_type_is_rejected(self):
        with self.assertRaises(ValidationError) as cm:
            create_sale(
                self.ctx,
                account_id=self.account.pk,
                items=[{"product_id": self.product.pk, "quantity": 1}],
                discount_value="10",
            )
        self.assertEqual(cm.exception.message, "discount_type is required with discount_value")
        self.assertFalse(Sale.objects.exists())
        self.assertEqual(stock_for(self.ctx, self.product), 10)

    def test_small_global_discount_never_goes_negative_on_a_line(self):
        sale = create_sale(
            self.ctx,
            account_id=self.account.pk,
            items=[{"product_id": self.product.pk, "quantity": 1, "unit_price": "10.00"}] * 8,
            discount_type="AMOUNT",
            discount_value="0.04",
        )
        discounts = list(sale.items.order_by("id").values_list("discount", flat=True))
        self.assertTrue(all(d >= Decimal("0") for d in discounts))
        self.assertEqual(sum(discounts), Decimal("0.04"))
        self.assertEqual(sale.total, Decimal("79.96"))


class SalePricingTests(TestCase):
    """
    GUARANTEES:
    - A global discount spreads in whole cents, each line within [0, gross]
    - Σ line_total == subtotal - discount
    """

    def test_four_cents_over_eight_equal_lines(self):
        pricing = price_sale([(1, "10.00", 0)] * 8, discount_type="AMOUNT", discount_value="0.04")

        discounts = [line.discount for line in pricing.lines]
        self.assertEqual(discounts, [Decimal("0.01")] * 4 + [Decimal("0.00")] * 4)
        for line in pricing.lines:
            self.assertGreaterEqual(line.discount, Decimal("0"))
            self.assertLessEqual(line.discount, line.gross)
            self.assertLessEqual(line.line_total, Decimal("10.00"))
        self.assertEqual(sum(discounts), Decimal("0.04"))
        self.assertEqual(pricing.total, Decimal("79.96"))

    def test_uneven_lines_keep_the_exact_total(self):
        pricing = price_sale(
            [(1, "0.01", 0), (3, "33.33", 0), (1, "0.05", 0)],
            discount_type="PERCENT",
            discount_value="50",
        )

        self.assertEqual(pricing.discount, Decimal("50.03"))
        for line in pricing.lines:
            self.assertGreaterEqual(line.discount, Decimal("0"))
            self.assertLessEqual(line.discount, line.gross)
        self.assertEqual(
            sum(line.line_total for line in pricing.lines),
            pricing.subtotal - pricing.discount,
        )

    def test_full_discount_zeroes_every_line(self):
        pricing = price_sale(
            [(2, "7.50", 0), (1, "5.00", 0)], discount_type="PERCENT", discount_value="100"
        )
        self.assertEqual([line.line_total for line in pricing.lines], [Decimal("0.00")] * 2)
        self.assertEqual(pricing.total, Decimal("0.00"))
