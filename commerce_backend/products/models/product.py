# products/models/product.py

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import F, Q, Sum, DecimalField
from django.db.models.functions import Coalesce

from tenants.models import TenantOwnedModel, TenantQuerySet


class ProductQuerySet(TenantQuerySet):
    def with_stock(self):
        """
        stock = Σ qty_available over the product's cost layers.
        value = Σ qty_available * unit_cost.
        """
        return self.annotate(
            stock=Coalesce(Sum("inventory_batches__qty_available"), 0),
            stock_value=Coalesce(
                Sum(
                    F("inventory_batches__qty_available") * F("inventory_batches__unit_cost"),
                    output_field=DecimalField(max_digits=18, decimal_places=4),
                ),
                Decimal("0"),
                output_field=DecimalField(max_digits=18, decimal_places=4),
            ),
        )


class Product(TenantOwnedModel):
    """
    Represents a sellable product.

    STOCK MODEL (IMPORTANT):
    - Product itself does NOT store stock
    - Stock lives in InventoryBatch cost layers
    - stock(product) = Σ qty_available over its batches
    - price is the current selling price (tax-inclusive); SaleItem snapshots it
    """

    name = models.CharField(max_length=255, db_index=True)
    sku = models.CharField(max_length=128, blank=True, default="")
    description = models.TextField(blank=True, default="")

    price = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))

    low_stock_threshold = models.PositiveIntegerField(
        null=True,
        blank=True,
        help_text="Overrides LOW_STOCK_THRESHOLD for this product",
    )

    is_active = models.BooleanField(default=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = ProductQuerySet.as_manager()

    class Meta:
        db_table = "products"
        ordering = ["name", "id"]
        indexes = [
            models.Index(fields=["organization", "is_active"]),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["organization", "sku"],
                condition=~Q(sku=""),
                name="uniq_product_sku_per_org",
            ),
            models.CheckConstraint(
                condition=Q(price__gte=0),
                name="chk_product_price_gte_zero",
            ),
        ]

    def clean(self):
        self.name = (self.name or "").strip()
        self.sku = (self.sku or "").strip()
        if not self.name:
            raise ValidationError({"name": "name is required"})
        if self.price is None or self.price < 0:
            raise ValidationError({"price": "price cannot be negative"})

    def save(self, *args, **kwargs):
        self.full_clean()
        super().save(*args, **kwargs)

    def __str__(self):
        return self.name
