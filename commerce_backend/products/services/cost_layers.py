# products/services/cost_layers.py

"""
INVENTORY COST LAYER STORE (FIFO ENGINE)

Purpose:
- Append cost layers (purchases, IN adjustments).
- Consume layers FIFO (oldest received_at first, id as tie-break).
- Report a quantity-weighted unit cost for what was consumed.

Two-phase consumption:
- plan():  lock the product's open layers (SELECT ... FOR UPDATE), check total
           availability, compute which layers give how much. NO writes.
- apply(): decrement each touched layer with a guarded conditional UPDATE
           (qty_available >= take) and append ONE OUT movement.
- reserve() = plan() + apply().

HARD RULES:
- Availability is checked BEFORE any layer is mutated.
- A planner remembers quantities it already planned in the same command, so a
  cart that lists the same product twice cannot oversell.
- Must run inside the caller's atomic block: the row locks taken in plan()
  are held until that block commits.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from decimal import Decimal

from django.db.models import F, Sum
from django.utils import timezone

from core.errors import InsufficientStockError, ValidationError
from core.money import to_int_qty, unit_cost as q4
from products.models import InventoryBatch, InventoryMovement, Product


class LayerConflict(RuntimeError):
    """A planned take no longer fits its layer (concurrent writer)."""


@dataclass(frozen=True)
class LayerTake:
    batch_id: int
    quantity: int
    unit_cost: Decimal


@dataclass
class Reservation:
    product: Product
    quantity: int
    takes: list[LayerTake] = field(default_factory=list)

    @property
    def total_cost(self) -> Decimal:
        return sum((t.unit_cost * t.quantity for t in self.takes), Decimal("0"))

    @property
    def unit_cost(self) -> Decimal:
        """
        Quantity-weighted average of the consumed layers (4 places).
        """
        if not self.quantity:
            return Decimal("0.0000")
        return q4(self.total_cost / Decimal(self.quantity))


class CostLayerPlanner:
    """
    Per-command planning state: locked layers per product and
    quantities already planned against each layer.
    """

    def __init__(self, ctx):
        self.ctx = ctx
        self._layers: dict[int, list[InventoryBatch]] = {}
        self._planned: dict[int, int] = defaultdict(int)

    def _open_layers(self, product: Product) -> list[InventoryBatch]:
        if product.pk not in self._layers:
            self._layers[product.pk] = list(
                InventoryBatch.objects.for_tenant(self.ctx)
                .select_for_update()
                .filter(product_id=product.pk, qty_available__gt=0)
                .order_by("received_at", "id")
            )
        return self._layers[product.pk]

    def available(self, product: Product) -> int:
        return sum(
            int(b.qty_available) - self._planned[b.pk] for b in self._open_layers(product)
        )

    def plan(self, product: Product, quantity) -> Reservation:
        qty = to_int_qty(quantity)
        if qty <= 0:
            raise ValidationError("quantity must be at least 1")

        layers = self._open_layers(product)
        total_available = self.available(product)
        if total_available < qty:
            raise InsufficientStockError(product.name, total_available, qty)

        reservation = Reservation(product=product, quantity=qty)
        remaining = qty

        for batch in layers:
            if remaining <= 0:
                break

            free = int(batch.qty_available) - self._planned[batch.pk]
            if free <= 0:
                continue

            take = free if free <= remaining else remaining
            reservation.takes.append(
                LayerTake(batch_id=batch.pk, quantity=take, unit_cost=batch.unit_cost)
            )
            self._planned[batch.pk] += take
            remaining -= take

        return reservation

    def apply(
        self,
        reservation: Reservation,
        *,
        reference_type: str,
        reference_id: int | None,
        notes: str = "",
    ) -> InventoryMovement:
        for take in reservation.takes:
            updated = InventoryBatch.objects.filter(
                pk=take.batch_id,
                qty_available__gte=take.quantity,
            ).update(qty_available=F("qty_available") - take.quantity)

            if updated != 1:
                raise LayerConflict(
                    f"Layer {take.batch_id} cannot give {take.quantity} units"
                )

        return InventoryMovement.objects.create(
            organization_id=self.ctx.organization_id,
            product=reservation.product,
            movement_type=InventoryMovement.MovementType.OUT,
            quantity=reservation.quantity,
            reference_type=reference_type,
            reference_id=reference_id,
            notes=notes or "",
            performed_by=getattr(self.ctx, "user", None),
        )


def plan(ctx, product: Product, quantity) -> Reservation:
    return CostLayerPlanner(ctx).plan(product, quantity)


def reserve(
    ctx,
    product: Product,
    quantity,
    *,
    reference_type: str,
    reference_id: int | None,
    notes: str = "",
) -> Reservation:
    planner = CostLayerPlanner(ctx)
    reservation = planner.plan(product, quantity)
    planner.apply(
        reservation,
        reference_type=reference_type,
        reference_id=reference_id,
        notes=notes,
    )
    return reservation


def add_layer(
    ctx,
    product: Product,
    *,
    quantity,
    unit_cost,
    reference_type: str,
    reference_id: int | None,
    purchase_batch_item=None,
    received_at=None,
    notes: str = "",
) -> tuple[InventoryBatch, InventoryMovement]:
    """
    Append one cost layer plus its IN movement.
    """
    qty = to_int_qty(quantity)
    if qty <= 0:
        raise ValidationError("quantity must be at least 1")

    batch = InventoryBatch(
        organization_id=ctx.organization_id,
        product=product,
        purchase_batch_item=purchase_batch_item,
        qty_in=qty,
        qty_available=qty,
        unit_cost=q4(unit_cost),
        received_at=received_at or timezone.now(),
    )
    batch.save()

    movement = InventoryMovement.objects.create(
        organization_id=ctx.organization_id,
        product=product,
        movement_type=InventoryMovement.MovementType.IN,
        quantity=qty,
        reference_type=reference_type,
        reference_id=reference_id,
        notes=notes or "",
        performed_by=getattr(ctx, "user", None),
    )
    return batch, movement


def stock_for(ctx, product: Product) -> int:
    total = (
        InventoryBatch.objects.for_tenant(ctx)
        .filter(product_id=product.pk)
        .aggregate(total=Sum("qty_available"))
        .get("total")
    )
    return int(total or 0)
