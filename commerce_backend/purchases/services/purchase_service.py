"""
======================================================
PATH: purchases/services/purchase_service.py
======================================================
PURCHASE PROCESSOR

Turns one purchase request into, atomically:
1) PurchaseBatch header + PurchaseBatchItem rows
2) one InventoryBatch cost layer per line (qty_in = qty_available = quantity)
3) one InventoryMovement(IN) per line
4) one EXPENSE Transaction for the grand total (reference PURCHASE)
5) account balance decrement (through the ledger)

Costing:
- unit_cost_local   = unit_cost * exchange_rate   (foreign currency)
                    = unit_cost                   (local currency)
- shipping_per_unit = shipping / Σ quantities     (whole purchase, not per product)
- final unit cost   = unit_cost_local + shipping_per_unit (4 places)
- line total cost   = unit_cost_local * qty + shipping share of the line (2 places);
                      the last line absorbs rounding so Σ line totals == total

Failure model:
- Validation / not-found errors are raised before any write.
- Everything else runs inside atomic_operation(): one rollback, no compensating deletes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from accounting.models import Transaction
from accounting.services.ledger import lock_account, record_transaction
from core.errors import NotFoundError, ValidationError
from core.money import ZERO, money, to_int_qty, unit_cost as q4
from core.transactions import atomic_operation
from products.models import InventoryMovement, Product
from products.services.cost_layers import add_layer
from purchases.models import PurchaseBatch, PurchaseBatchItem

logger = logging.getLogger(__name__)

EXPENSE_CATEGORY = "Inventory purchase"
RATE_PLACES = Decimal("0.000001")


@dataclass(frozen=True)
class _Line:
    product: Product
    quantity: int
    unit_cost_source: Decimal
    unit_cost_local: Decimal


def _to_decimal(value, field_name: str) -> Decimal:
    try:
        result = Decimal(str(value if value not in (None, "") else "0"))
    except (InvalidOperation, ValueError) as exc:
        raise ValidationError(f"{field_name} must be a number") from exc
    if not result.is_finite():
        raise ValidationError(f"{field_name} must be a number")
    return result


def _resolve_currency(ctx, currency, exchange_rate) -> tuple[str, Decimal, bool]:
    local = (ctx.organization.currency or "").upper()
    code = (currency or local).strip().upper()
    if len(code) != 3:
        raise ValidationError("currency must be a 3-letter code")

    if code == local:
        return code, Decimal("1"), False

    rate = _to_decimal(exchange_rate, "exchange_rate").quantize(RATE_PLACES)
    if rate <= 0:
        raise ValidationError("exchange_rate must be greater than zero for foreign currency purchases")
    return code, rate, True


def _validate_lines(ctx, items, *, rate: Decimal, foreign: bool) -> list[_Line]:
    if not items:
        raise ValidationError("A purchase needs at least one item")

    product_ids = {str(it.get("product_id")) for it in items}
    products = {
        str(p.pk): p
        for p in Product.objects.for_tenant(ctx).filter(
            pk__in=[pid for pid in product_ids if pid.isdigit()]
        )
    }

    lines = []
    for idx, it in enumerate(items, start=1):
        product = products.get(str(it.get("product_id")))
        if product is None:
            raise NotFoundError(f"Product not found: {it.get('product_id')}")
        if not product.is_active:
            raise ValidationError(f"Product '{product.name}' is inactive")

        qty = to_int_qty(it.get("quantity"))
        if qty <= 0:
            raise ValidationError(f"Item {idx}: quantity must be at least 1")

        cost = _to_decimal(it.get("unit_cost"), f"Item {idx} unit_cost")
        if cost < 0:
            raise ValidationError(f"Item {idx}: unit_cost cannot be negative")

        lines.append(
            _Line(
                product=product,
                quantity=qty,
                unit_cost_source=cost,
                unit_cost_local=cost * rate if foreign else cost,
            )
        )
    return lines


def record_purchase(
    ctx,
    *,
    account_id,
    items,
    currency: str | None = None,
    exchange_rate=None,
    shipping=None,
    notes: str = "",
    purchased_at=None,
) -> PurchaseBatch:
    code, rate, foreign = _resolve_currency(ctx, currency, exchange_rate)

    shipping_total = money(shipping)
    if shipping_total < ZERO:
        raise ValidationError("shipping cannot be negative")

    lines = _validate_lines(ctx, items, rate=rate, foreign=foreign)

    total_units = sum(line.quantity for line in lines)
    shipping_per_unit = shipping_total / Decimal(total_units)

    subtotal = money(sum((l.unit_cost_local * l.quantity for l in lines), ZERO))
    total = subtotal + shipping_total

    with atomic_operation("purchase"):
        account = lock_account(ctx, account_id)

        header = PurchaseBatch(
            organization_id=ctx.organization_id,
            account=account,
            currency=code,
            exchange_rate=rate,
            subtotal=subtotal,
            shipping=shipping_total,
            total=total,
            notes=(notes or "").strip(),
        )
        if purchased_at:
            header.purchased_at = purchased_at
        header.save()

        allocated = ZERO
        for idx, line in enumerate(lines):
            final_unit_cost = q4(line.unit_cost_local + shipping_per_unit)
            if idx == len(lines) - 1:
                line_total = total - allocated
            else:
                line_total = money(line.unit_cost_local * line.quantity + shipping_per_unit * line.quantity)
            allocated += line_total

            item = PurchaseBatchItem(
                organization_id=ctx.organization_id,
                purchase_batch=header,
                product=line.product,
                quantity=line.quantity,
                unit_cost_source=q4(line.unit_cost_source),
                unit_cost=final_unit_cost,
                total_cost=line_total,
            )
            item.save()

            add_layer(
                ctx,
                line.product,
                quantity=line.quantity,
                unit_cost=final_unit_cost,
                reference_type=InventoryMovement.ReferenceType.PURCHASE,
                reference_id=header.pk,
                purchase_batch_item=item,
                received_at=header.purchased_at,
                notes=f"Purchase #{header.pk}",
            )

        if total > ZERO:
            record_transaction(
                ctx,
                type=Transaction.Type.EXPENSE,
                account=account,
                amount=total,
                category=EXPENSE_CATEGORY,
                description=f"Purchase #{header.pk}",
                reference_type=Transaction.ReferenceType.PURCHASE,
                reference_id=header.pk,
                occurred_at=header.purchased_at,
            )

    logger.info(
        "Purchase %s recorded: %s lines, total %s (org %s)",
        header.pk,
        len(lines),
        total,
        ctx.organization_id,
    )
    return header
