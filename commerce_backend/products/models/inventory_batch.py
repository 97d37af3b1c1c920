# products/models/inventory_batch.py

"""
INVENTORY BATCH (COST LAYER)

Represents ONE lot of stock at ONE unit cost.

CANONICAL MODEL:
- created by a purchase line (purchase_batch_item) or an IN adjustment
- qty_in and unit_cost are immutable after creation
- qty_available is mutated ONLY by products.services.cost_layers
- 0 <= qty_available <= qty_in (DB check constraints)
- never deleted: exhausted layers stay as audit history
- FIFO order: received_at ascending, id as tie-break
"""

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import F, Q
from django.utils import timezone

from tenants.models import TenantOwnedModel


class InventoryBatch(TenantOwnedModel):
    product = models.ForeignKey(
        "products.Product",
        on_delete=models.PROTECT,
        related_name="inventory_batches",
    )

    purchase_batch_item = models.ForeignKey(
        "purchases.PurchaseBatchItem",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="inventory_batches",
    )

    qty_in = models.PositiveIntegerField(help_text="Quantity received (immutable)")
    qty_available = models.PositiveIntegerField(help_text="Remaining quantity (service-managed only)")

    unit_cost = models.DecimalField(
        max_digits=14,
        decimal_places=4,
        help_text="Landed unit cost in local currency (immutable)",
    )

    received_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "inventory_batches"
        ordering = ["received_at", "id"]
        indexes = [
            models.Index(fields=["product", "received_at"]),
            models.Index(fields=["organization", "product"]),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(qty_in__gt=0),
                name="chk_batch_qty_in_gt_zero",
            ),
            models.CheckConstraint(
                condition=Q(qty_available__gte=0),
                name="chk_batch_qty_available_gte_zero",
            ),
            models.CheckConstraint(
                condition=Q(qty_available__lte=F("qty_in")),
                name="chk_batch_available_lte_in",
            ),
            models.CheckConstraint(
                condition=Q(unit_cost__gte=0),
                name="chk_batch_unit_cost_gte_zero",
            ),
        ]

    def clean(self):
        if self.qty_in is None or self.qty_in <= 0:
            raise ValidationError({"qty_in": "qty_in must be greater than zero"})
        if self.qty_available is None or self.qty_available < 0:
            raise ValidationError({"qty_available": "qty_available cannot be negative"})
        if self.qty_available > self.qty_in:
            raise ValidationError({"qty_available": "qty_available cannot exceed qty_in"})
        if self.unit_cost is None or self.unit_cost < 0:
            raise ValidationError({"unit_cost": "unit_cost cannot be negative"})
        if self.product_id and self.organization_id:
            if self.product.organization_id != self.organization_id:
                raise ValidationError({"product": "product belongs to another organization"})

    def save(self, *args, **kwargs):
        if not self._state.adding:
            original = InventoryBatch.objects.only("qty_in", "unit_cost").get(pk=self.pk)
            if self.qty_in != original.qty_in:
                raise ValidationError({"qty_in": "qty_in is immutable"})
            if self.unit_cost != original.unit_cost:
                raise ValidationError({"unit_cost": "unit_cost is immutable"})
        self.full_clean()
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("Inventory batches are never deleted (audit history).")

    @property
    def remaining_value(self) -> Decimal:
        return self.unit_cost * Decimal(int(self.qty_available or 0))

    def __str__(self):
        return f"{self.product_id} | {self.qty_available}/{self.qty_in} @ {self.unit_cost}"
