# sales/models/sale_supply_usage.py

from django.db import models

from tenants.models import TenantOwnedModel


class SaleSupplyUsage(TenantOwnedModel):
    """Consumables used to fulfil a sale (packaging, labels...)."""

    sale = models.ForeignKey("sales.Sale", on_delete=models.CASCADE, related_name="supplies_used")
    supply = models.ForeignKey(
        "supplies.Supply",
        on_delete=models.PROTECT,
        related_name="sale_usages",
    )
    quantity = models.PositiveIntegerField()
    unit_cost = models.DecimalField(max_digits=14, decimal_places=4)
    line_total = models.DecimalField(max_digits=14, decimal_places=2)

    class Meta:
        db_table = "sale_supplies"
        ordering = ["id"]
