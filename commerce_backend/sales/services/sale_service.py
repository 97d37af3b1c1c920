# sales/services/sale_service.py

"""
SALE PROCESSOR (APPLICATION SERVICE)

Purpose:
- Turn a cart into a committed Sale: FIFO-costed lines, inventory and supply
  consumption, one INCOME posting and customer aggregates. All or nothing.

Phases (one atomic_operation):
1) Validate: account active + owned, event/customer owned, products owned.
2) Plan EVERY line against the locked cost layers. Any shortage raises
   InsufficientStockError before a single row is written.
3) Validate supplies_used.
4) Price: subtotal, discount, tax (tax-inclusive), total.
5) Next sale number from the locked per-tenant sequence.
6) Write: Sale, SaleItems (weighted FIFO unit cost), layer decrements +
   OUT movements, SaleSupplyUsage + supply stock, INCOME transaction,
   customer total_orders / total_spent.

Hard rules:
- Quantities are integer units.
- Money values are computed server-side; callers never send totals.
- INCOME reference is EVENT/<event id> when an event is attached,
  else SALE/<sale id>.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal

from django.db.models import F
from django.utils import timezone

from accounting.models import Transaction
from accounting.services.ledger import lock_account, record_transaction
from core.errors import NotFoundError, ValidationError
from core.money import ZERO, money, to_int_qty
from core.transactions import atomic_operation
from customers.models import Customer
from events.models import Event
from products.models import InventoryMovement, Product
from products.services.cost_layers import CostLayerPlanner
from sales.models import Sale, SaleItem, SaleSupplyUsage
from sales.services.numbering import next_sale_number
from sales.services.pricing import AMOUNT, PERCENT, price_sale
from supplies.services import consume_supplies, resolve_supply_usages

logger = logging.getLogger(__name__)

SALES_CATEGORY = "Sales"


@dataclass(frozen=True)
class CartLine:
    product_id: int
    quantity: int
    unit_price: Decimal | None
    discount: Decimal


def _normalize_lines(items) -> list[CartLine]:
    if not items:
        raise ValidationError("A sale needs at least one product")

    lines = []
    for idx, it in enumerate(items, start=1):
        if it.get("product_id") in (None, ""):
            raise ValidationError(f"Item {idx}: product_id is required")

        qty = to_int_qty(it.get("quantity"))
        if qty <= 0:
            raise ValidationError(f"Item {idx}: quantity must be at least 1")

        price = it.get("unit_price")
        if price not in (None, ""):
            price = money(price)
            if price < ZERO:
                raise ValidationError(f"Item {idx}: unit_price cannot be negative")
        else:
            price = None

        lines.append(
            CartLine(
                product_id=it["product_id"],
                quantity=qty,
                unit_price=price,
                discount=money(it.get("discount")),
            )
        )
    return lines


def _normalize_payment_method(method) -> str:
    m = (method or Sale.PaymentMethod.CASH).strip().upper()
    if m not in Sale.PaymentMethod.values:
        raise ValidationError(f"payment_method must be one of: {', '.join(Sale.PaymentMethod.values)}")
    return m


def _normalize_discount_type(discount_type) -> str:
    t = (discount_type or "").strip().upper()
    if t and t not in (AMOUNT, PERCENT):
        raise ValidationError("discount_type must be AMOUNT or PERCENT")
    return t


def _owned_products(ctx, lines: list[CartLine]) -> dict[str, Product]:
    ids = {str(line.product_id) for line in lines}
    products = {
        str(p.pk): p
        for p in Product.objects.for_tenant(ctx).filter(pk__in=[i for i in ids if i.isdigit()])
    }
    for line in lines:
        product = products.get(str(line.product_id))
        if product is None:
            raise NotFoundError(f"Product not found: {line.product_id}")
        if not product.is_active:
            raise ValidationError(f"Product '{product.name}' is inactive")
    return products


def create_sale(
    ctx,
    *,
    account_id,
    items,
    payment_method: str | None = None,
    customer_id=None,
    event_id=None,
    discount_type: str | None = None,
    discount_value=None,
    shipping_cost=None,
    notes: str = "",
    sold_at=None,
    supplies_used=None,
) -> Sale:
    lines = _normalize_lines(items)
    method = _normalize_payment_method(payment_method)
    discount_type = _normalize_discount_type(discount_type)
    if not discount_type and money(discount_value) != ZERO:
        raise ValidationError("discount_type is required with discount_value")
    sold_at = sold_at or timezone.now()

    with atomic_operation("sale"):
        # ---------------- validate ownership ----------------
        account = lock_account(ctx, account_id)
        event = (
            Event.objects.get_owned(ctx, event_id, label="Event")
            if event_id not in (None, "")
            else None
        )
        customer = (
            Customer.objects.get_owned(ctx, customer_id, label="Customer")
            if customer_id not in (None, "")
            else None
        )
        products = _owned_products(ctx, lines)

        # ---------------- plan every line before writing ----------------
        planner = CostLayerPlanner(ctx)
        reservations = [
            planner.plan(products[str(line.product_id)], line.quantity) for line in lines
        ]

        usages = resolve_supply_usages(ctx, supplies_used)

        # ---------------- price ----------------
        unit_prices = [
            line.unit_price if line.unit_price is not None else products[str(line.product_id)].price
            for line in lines
        ]
        pricing = price_sale(
            [(line.quantity, price, line.discount) for line, price in zip(lines, unit_prices)],
            discount_type=discount_type or None,
            discount_value=discount_value,
            tax_rate=ctx.organization.tax_rate,
            shipping_cost=shipping_cost,
        )

        # ---------------- write ----------------
        sale = Sale(
            organization_id=ctx.organization_id,
            sale_number=next_sale_number(ctx),
            customer=customer,
            event=event,
            account=account,
            subtotal=pricing.subtotal,
            discount_type=discount_type,
            discount_value=money(discount_value) if discount_type else ZERO,
            discount=pricing.discount,
            tax_rate=ctx.organization.tax_rate,
            tax=pricing.tax,
            shipping_cost=pricing.shipping_cost,
            total=pricing.total,
            payment_method=method,
            notes=(notes or "").strip(),
            sold_at=sold_at,
            created_by=getattr(ctx, "user", None),
        )
        sale.save()

        for line, price, priced, reservation in zip(lines, unit_prices, pricing.lines, reservations):
            SaleItem.objects.create(
                organization_id=ctx.organization_id,
                sale=sale,
                product=reservation.product,
                quantity=line.quantity,
                unit_price=money(price),
                unit_cost=reservation.unit_cost,
                discount=priced.discount,
                line_total=priced.line_total,
            )
            planner.apply(
                reservation,
                reference_type=InventoryMovement.ReferenceType.SALE,
                reference_id=sale.pk,
                notes=sale.sale_number,
            )

        for usage in usages:
            SaleSupplyUsage.objects.create(
                organization_id=ctx.organization_id,
                sale=sale,
                supply=usage.supply,
                quantity=usage.quantity,
                unit_cost=usage.unit_cost,
                line_total=usage.line_total,
            )
        consume_supplies(ctx, usages, reference_id=sale.pk)

        if pricing.total > ZERO:
            if event is not None:
                ref_type, ref_id = Transaction.ReferenceType.EVENT, event.pk
            else:
                ref_type, ref_id = Transaction.ReferenceType.SALE, sale.pk
            record_transaction(
                ctx,
                type=Transaction.Type.INCOME,
                account=account,
                amount=pricing.total,
                category=SALES_CATEGORY,
                description=f"Sale {sale.sale_number}",
                reference_type=ref_type,
                reference_id=ref_id,
                occurred_at=sold_at,
            )

        if customer is not None:
            Customer.objects.filter(pk=customer.pk).update(
                total_orders=F("total_orders") + 1,
                total_spent=F("total_spent") + pricing.total,
                updated_at=timezone.now(),
            )

    logger.info(
        "Sale %s committed: %s lines, total %s (org %s)",
        sale.sale_number,
        len(lines),
        sale.total,
        ctx.organization_id,
    )
    return sale
