# products/models/inventory_movement.py

"""
INVENTORY MOVEMENT (APPEND-ONLY STOCK LEDGER)

GUARANTEES:
- Created ONCE, never edited, never deleted
- One row per product per operation (a FIFO consumption that spans
  several batches is still one OUT movement)
- reference_type/reference_id point at the cause (PURCHASE, SALE, ADJUSTMENT)
"""

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q

from tenants.models import TenantOwnedModel


class InventoryMovement(TenantOwnedModel):
    class MovementType(models.TextChoices):
        IN = "IN", "Stock In"
        OUT = "OUT", "Stock Out"

    class ReferenceType(models.TextChoices):
        PURCHASE = "PURCHASE", "Purchase"
        SALE = "SALE", "Sale"
        ADJUSTMENT = "ADJUSTMENT", "Manual Adjustment"

    product = models.ForeignKey(
        "products.Product",
        on_delete=models.PROTECT,
        related_name="inventory_movements",
    )

    movement_type = models.CharField(max_length=3, choices=MovementType.choices)
    quantity = models.PositiveIntegerField()

    reference_type = models.CharField(max_length=12, choices=ReferenceType.choices)
    reference_id = models.PositiveBigIntegerField(null=True, blank=True)

    notes = models.CharField(max_length=255, blank=True, default="")

    performed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )

    class Meta:
        db_table = "inventory_movements"
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["organization", "created_at"]),
            models.Index(fields=["product", "created_at"]),
            models.Index(fields=["reference_type", "reference_id"]),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(quantity__gt=0),
                name="chk_movement_quantity_gt_zero",
            ),
        ]

    def clean(self):
        if self.quantity is None or self.quantity <= 0:
            raise ValidationError("quantity must be greater than zero")

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("InventoryMovement records are immutable")
        self.full_clean()
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("InventoryMovement records are immutable and cannot be deleted")

    def __str__(self):
        return f"{self.product_id} | {self.movement_type} {self.quantity} | {self.reference_type}:{self.reference_id}"
