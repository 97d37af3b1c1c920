# purchases/models.py

"""
PURCHASES

PurchaseBatch      = one supplier purchase (header), paid from one account.
PurchaseBatchItem  = one product line; each line becomes exactly one
                     InventoryBatch cost layer at its landed unit cost.

Written ONLY by purchases.services.purchase_service (atomic, all-or-nothing).
Rows are immutable once recorded.
"""

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q
from django.utils import timezone

from tenants.models import TenantOwnedModel


class _ImmutableMixin:
    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError(f"{self.__class__.__name__} records are immutable")
        self.full_clean()
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError(f"{self.__class__.__name__} records cannot be deleted")


class PurchaseBatch(_ImmutableMixin, TenantOwnedModel):
    """
    Purchase header.

    Money rules:
    - subtotal  = Σ unit_cost_local * quantity (local currency)
    - shipping  = local currency, spread evenly over every unit in the purchase
    - total     = subtotal + shipping  (posted as ONE EXPENSE transaction)
    """

    account = models.ForeignKey(
        "accounting.Account",
        on_delete=models.PROTECT,
        related_name="purchase_batches",
    )

    currency = models.CharField(max_length=3)
    exchange_rate = models.DecimalField(
        max_digits=14, decimal_places=6, default=Decimal("1")
    )

    subtotal = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    shipping = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    total = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))

    notes = models.TextField(blank=True, default="")
    purchased_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "purchase_batches"
        ordering = ["-purchased_at", "-id"]
        indexes = [
            models.Index(fields=["organization", "purchased_at"]),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(exchange_rate__gt=0),
                name="chk_purchase_exchange_rate_gt_zero",
            ),
            models.CheckConstraint(
                condition=Q(shipping__gte=0),
                name="chk_purchase_shipping_gte_zero",
            ),
            models.CheckConstraint(
                condition=Q(total__gte=0),
                name="chk_purchase_total_gte_zero",
            ),
        ]

    def __str__(self):
        return f"Purchase #{self.pk} ({self.total} {self.currency})"


class PurchaseBatchItem(_ImmutableMixin, TenantOwnedModel):
    purchase_batch = models.ForeignKey(
        PurchaseBatch,
        on_delete=models.CASCADE,
        related_name="items",
    )
    product = models.ForeignKey(
        "products.Product",
        on_delete=models.PROTECT,
        related_name="purchase_items",
    )

    quantity = models.PositiveIntegerField()

    unit_cost_source = models.DecimalField(
        max_digits=14,
        decimal_places=4,
        help_text="Unit cost as invoiced, in the purchase currency",
    )
    unit_cost = models.DecimalField(
        max_digits=14,
        decimal_places=4,
        help_text="Landed unit cost in local currency (converted + shipping share)",
    )
    total_cost = models.DecimalField(max_digits=14, decimal_places=2)

    class Meta:
        db_table = "purchase_batch_items"
        ordering = ["id"]
        constraints = [
            models.CheckConstraint(
                condition=Q(quantity__gt=0),
                name="chk_purchase_item_quantity_gt_zero",
            ),
            models.CheckConstraint(
                condition=Q(unit_cost__gte=0),
                name="chk_purchase_item_unit_cost_gte_zero",
            ),
        ]

    def __str__(self):
        return f"{self.product_id} x{self.quantity} @ {self.unit_cost}"
