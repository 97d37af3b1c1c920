# products/services/stock_adjustments.py

"""
STOCK ADJUSTMENTS SERVICE

Purpose:
- Correct physical stock outside purchases and sales (counts, breakage, gifts).
- Keep InventoryBatch.qty_available service-managed only.

Rules:
- direction IN  -> append a new cost layer (unit_cost defaults to 0) + IN movement
- direction OUT -> consume FIFO through the cost layer store + ONE OUT movement
- quantity must be a positive integer; a reason note is required
- OUT cannot exceed current stock (InsufficientStockError, nothing written)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal

from core.errors import ValidationError
from core.money import to_int_qty
from core.transactions import atomic_operation
from products.models import InventoryBatch, InventoryMovement, Product
from products.services.cost_layers import CostLayerPlanner, add_layer

logger = logging.getLogger(__name__)

IN = "IN"
OUT = "OUT"


@dataclass(frozen=True)
class AdjustmentResult:
    product: Product
    direction: str
    quantity: int
    batch: InventoryBatch | None
    unit_cost: Decimal


def adjust_stock(ctx, *, product_id, direction: str, quantity, notes: str, unit_cost=None) -> AdjustmentResult:
    direction = (direction or "").strip().upper()
    if direction not in (IN, OUT):
        raise ValidationError("direction must be IN or OUT")

    qty = to_int_qty(quantity)
    if qty <= 0:
        raise ValidationError("quantity must be at least 1")

    notes = (notes or "").strip()
    if not notes:
        raise ValidationError("A reason is required for stock adjustments")

    with atomic_operation("stock adjustment"):
        product = Product.objects.get_owned(ctx, product_id, label="Product")

        if direction == IN:
            batch, _movement = add_layer(
                ctx,
                product,
                quantity=qty,
                unit_cost=unit_cost if unit_cost is not None else Decimal("0"),
                reference_type=InventoryMovement.ReferenceType.ADJUSTMENT,
                reference_id=None,
                notes=notes,
            )
            result = AdjustmentResult(
                product=product, direction=IN, quantity=qty, batch=batch, unit_cost=batch.unit_cost
            )
        else:
            planner = CostLayerPlanner(ctx)
            reservation = planner.plan(product, qty)
            planner.apply(
                reservation,
                reference_type=InventoryMovement.ReferenceType.ADJUSTMENT,
                reference_id=None,
                notes=notes,
            )
            result = AdjustmentResult(
                product=product, direction=OUT, quantity=qty, batch=None, unit_cost=reservation.unit_cost
            )

    logger.info("Stock adjustment %s %s x%s (org %s)", direction, product.pk, qty, ctx.organization_id)
    return result
