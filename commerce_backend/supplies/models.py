# supplies/models.py

"""
SUPPLIES (CONSUMABLES)

Packaging, bags, labels... used up by sales but never sold themselves.

Unlike products there is no cost layering:
- Supply.stock      = one running counter (floored at zero on consumption)
- Supply.unit_cost  = last restock cost
- SupplyMovement    = append-only audit (IN on restock, OUT on sale usage)
"""

from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import F, Q

from tenants.models import TenantOwnedModel, TenantQuerySet


class SupplyQuerySet(TenantQuerySet):
    def below_minimum(self):
        return self.filter(is_active=True, stock__lt=F("min_stock"))


class Supply(TenantOwnedModel):
    name = models.CharField(max_length=255)
    unit_type = models.CharField(max_length=32, default="unit")

    stock = models.PositiveIntegerField(default=0)
    min_stock = models.PositiveIntegerField(default=0)
    unit_cost = models.DecimalField(max_digits=14, decimal_places=4, default=Decimal("0"))

    is_active = models.BooleanField(default=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = SupplyQuerySet.as_manager()

    class Meta:
        db_table = "supplies"
        ordering = ["name", "id"]
        verbose_name_plural = "supplies"
        constraints = [
            models.UniqueConstraint(
                fields=["organization", "name"],
                name="uniq_supply_name_per_org",
            ),
            models.CheckConstraint(
                condition=Q(unit_cost__gte=0),
                name="chk_supply_unit_cost_gte_zero",
            ),
        ]

    def clean(self):
        self.name = (self.name or "").strip()
        if not self.name:
            raise ValidationError({"name": "Name is required"})

    def __str__(self):
        return f"{self.name} ({self.stock} {self.unit_type})"


class SupplyMovement(TenantOwnedModel):
    class MovementType(models.TextChoices):
        IN = "IN", "Stock In"
        OUT = "OUT", "Stock Out"

    class ReferenceType(models.TextChoices):
        SALE = "SALE", "Sale"
        SUPPLY_PURCHASE = "SUPPLY_PURCHASE", "Supply purchase"

    supply = models.ForeignKey(Supply, on_delete=models.PROTECT, related_name="movements")
    movement_type = models.CharField(max_length=3, choices=MovementType.choices)
    quantity = models.PositiveIntegerField()
    reference_type = models.CharField(max_length=16, choices=ReferenceType.choices)
    reference_id = models.PositiveBigIntegerField(null=True, blank=True)

    performed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )

    class Meta:
        db_table = "supply_movements"
        ordering = ["-created_at", "-id"]
        constraints = [
            models.CheckConstraint(
                condition=Q(quantity__gt=0),
                name="chk_supply_movement_quantity_gt_zero",
            ),
        ]

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("SupplyMovement records are immutable")
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("SupplyMovement records cannot be deleted")


class SupplyPurchase(TenantOwnedModel):
    account = models.ForeignKey(
        "accounting.Account",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="supply_purchases",
        help_text="When set, the restock is paid from this account (EXPENSE)",
    )
    total = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    notes = models.TextField(blank=True, default="")
    purchased_at = models.DateTimeField()

    class Meta:
        db_table = "supply_purchases"
        ordering = ["-purchased_at", "-id"]


class SupplyPurchaseItem(TenantOwnedModel):
    supply_purchase = models.ForeignKey(
        SupplyPurchase, on_delete=models.CASCADE, related_name="items"
    )
    supply = models.ForeignKey(Supply, on_delete=models.PROTECT, related_name="purchase_items")
    quantity = models.PositiveIntegerField()
    unit_cost = models.DecimalField(max_digits=14, decimal_places=4)
    line_total = models.DecimalField(max_digits=14, decimal_places=2)

    class Meta:
        db_table = "supply_purchase_items"
        ordering = ["id"]
        constraints = [
            models.CheckConstraint(
                condition=Q(quantity__gt=0),
                name="chk_supply_purchase_item_quantity_gt_zero",
            ),
        ]
