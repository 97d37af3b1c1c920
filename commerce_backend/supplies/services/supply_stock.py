"""
======================================================
PATH: supplies/services/supply_stock.py
======================================================
SUPPLY STOCK SERVICE

- resolve_supply_usages(): validate a sale's supplies_used BEFORE any write
  (owned supply, quantity >= 1, unit cost defaults to the supply's cost).
- consume_supplies(): decrement stock floored at zero + ONE OUT movement per
  supply. Runs inside the caller's (sale) atomic block.
- record_supply_purchase(): restock; stock += qty, unit_cost = latest cost,
  IN movement; optionally paid from an account (EXPENSE, reference OTHER).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal

from django.db.models import F, Value
from django.db.models.functions import Greatest
from django.utils import timezone

from accounting.models import Transaction
from accounting.services.ledger import lock_account, record_transaction
from core.errors import NotFoundError, ValidationError
from core.money import ZERO, money, to_int_qty, unit_cost as q4
from core.transactions import atomic_operation
from supplies.models import Supply, SupplyMovement, SupplyPurchase, SupplyPurchaseItem

logger = logging.getLogger(__name__)

SUPPLY_EXPENSE_CATEGORY = "Supplies"


@dataclass(frozen=True)
class SupplyUsage:
    supply: Supply
    quantity: int
    unit_cost: Decimal

    @property
    def line_total(self) -> Decimal:
        return money(self.unit_cost * self.quantity)


def _owned_supplies(ctx, rows) -> dict[str, Supply]:
    ids = [str(r.get("supply_id")) for r in rows]
    qs = Supply.objects.for_tenant(ctx).filter(pk__in=[i for i in ids if i.isdigit()])
    return {str(s.pk): s for s in qs}


def resolve_supply_usages(ctx, supplies_used) -> list[SupplyUsage]:
    if not supplies_used:
        return []

    supplies = _owned_supplies(ctx, supplies_used)
    usages = []
    for row in supplies_used:
        supply = supplies.get(str(row.get("supply_id")))
        if supply is None:
            raise NotFoundError(f"Supply not found: {row.get('supply_id')}")

        qty = to_int_qty(row.get("quantity"))
        if qty <= 0:
            raise ValidationError(f"Supply '{supply.name}': quantity must be at least 1")

        cost = row.get("unit_cost")
        cost = supply.unit_cost if cost in (None, "") else q4(cost)
        if cost < 0:
            raise ValidationError(f"Supply '{supply.name}': unit_cost cannot be negative")

        usages.append(SupplyUsage(supply=supply, quantity=qty, unit_cost=q4(cost)))
    return usages


def consume_supplies(ctx, usages: list[SupplyUsage], *, reference_id) -> None:
    for usage in usages:
        Supply.objects.filter(pk=usage.supply.pk).update(
            stock=Greatest(F("stock") - usage.quantity, Value(0)),
            updated_at=timezone.now(),
        )
        SupplyMovement.objects.create(
            organization_id=ctx.organization_id,
            supply=usage.supply,
            movement_type=SupplyMovement.MovementType.OUT,
            quantity=usage.quantity,
            reference_type=SupplyMovement.ReferenceType.SALE,
            reference_id=reference_id,
            performed_by=getattr(ctx, "user", None),
        )


def record_supply_purchase(ctx, *, items, account_id=None, notes: str = "", purchased_at=None) -> SupplyPurchase:
    if not items:
        raise ValidationError("A supply purchase needs at least one item")

    supplies = _owned_supplies(ctx, items)
    lines = []
    for row in items:
        supply = supplies.get(str(row.get("supply_id")))
        if supply is None:
            raise NotFoundError(f"Supply not found: {row.get('supply_id')}")
        qty = to_int_qty(row.get("quantity"))
        if qty <= 0:
            raise ValidationError(f"Supply '{supply.name}': quantity must be at least 1")
        cost = q4(row.get("unit_cost"))
        if cost < 0:
            raise ValidationError(f"Supply '{supply.name}': unit_cost cannot be negative")
        lines.append((supply, qty, cost, money(cost * qty)))

    total = money(sum((line[3] for line in lines), ZERO))

    with atomic_operation("supply purchase"):
        account = lock_account(ctx, account_id) if account_id not in (None, "") else None

        purchase = SupplyPurchase.objects.create(
            organization_id=ctx.organization_id,
            account=account,
            total=total,
            notes=(notes or "").strip(),
            purchased_at=purchased_at or timezone.now(),
        )

        for supply, qty, cost, line_total in lines:
            SupplyPurchaseItem.objects.create(
                organization_id=ctx.organization_id,
                supply_purchase=purchase,
                supply=supply,
                quantity=qty,
                unit_cost=cost,
                line_total=line_total,
            )
            Supply.objects.filter(pk=supply.pk).update(
                stock=F("stock") + qty,
                unit_cost=cost,
                updated_at=timezone.now(),
            )
            SupplyMovement.objects.create(
                organization_id=ctx.organization_id,
                supply=supply,
                movement_type=SupplyMovement.MovementType.IN,
                quantity=qty,
                reference_type=SupplyMovement.ReferenceType.SUPPLY_PURCHASE,
                reference_id=purchase.pk,
                performed_by=getattr(ctx, "user", None),
            )

        if account is not None and total > ZERO:
            record_transaction(
                ctx,
                type=Transaction.Type.EXPENSE,
                account=account,
                amount=total,
                category=SUPPLY_EXPENSE_CATEGORY,
                description=f"Supply purchase #{purchase.pk}",
                occurred_at=purchase.purchased_at,
            )

    logger.info("Supply purchase %s recorded: total %s (org %s)", purchase.pk, total, ctx.organization_id)
    return purchase
