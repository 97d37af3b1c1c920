# products/services/stock_reports.py

"""
STOCK READ HELPERS

- low_stock_queryset(): active products below their threshold
  (product.low_stock_threshold, else LOW_STOCK_THRESHOLD), lowest first.
- inventory_value(): Σ qty_available * unit_cost over open layers.
"""

from decimal import Decimal

from django.conf import settings
from django.db.models import F, IntegerField, Sum
from django.db.models.functions import Coalesce

from core.money import money
from products.models import InventoryBatch, Product


def low_stock_queryset(ctx):
    return (
        Product.objects.for_tenant(ctx)
        .filter(is_active=True)
        .with_stock()
        .annotate(
            threshold=Coalesce(
                F("low_stock_threshold"),
                settings.LOW_STOCK_THRESHOLD,
                output_field=IntegerField(),
            )
        )
        .filter(stock__lt=F("threshold"))
        .order_by("stock", "name")
    )


def inventory_value(ctx) -> Decimal:
    total = (
        InventoryBatch.objects.for_tenant(ctx)
        .filter(qty_available__gt=0)
        .aggregate(value=Sum(F("qty_available") * F("unit_cost")))
        .get("value")
    )
    return money(total or 0)
