# sales/models/sale_item.py

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q

from tenants.models import TenantOwnedModel


class SaleItem(TenantOwnedModel):
    """
    One sold product line.

    - unit_price: snapshot of the charged price (tax-inclusive)
    - unit_cost: quantity-weighted FIFO cost of every layer consumed by this line
    - discount: item discount, or this line's share of the global discount
    - line_total = unit_price * quantity - discount
    """

    sale = models.ForeignKey("sales.Sale", on_delete=models.CASCADE, related_name="items")
    product = models.ForeignKey(
        "products.Product",
        on_delete=models.PROTECT,
        related_name="sale_items",
    )

    quantity = models.PositiveIntegerField()
    unit_price = models.DecimalField(max_digits=12, decimal_places=2)
    unit_cost = models.DecimalField(max_digits=14, decimal_places=4, default=Decimal("0"))
    discount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    line_total = models.DecimalField(max_digits=14, decimal_places=2)

    class Meta:
        db_table = "sale_items"
        ordering = ["id"]
        constraints = [
            models.CheckConstraint(
                condition=Q(quantity__gt=0),
                name="chk_sale_item_quantity_gt_zero",
            ),
            models.CheckConstraint(
                condition=Q(line_total__gte=0),
                name="chk_sale_item_line_total_gte_zero",
            ),
        ]

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("SaleItem records are immutable")
        super().save(*args, **kwargs)

    @property
    def gross_amount(self) -> Decimal:
        return self.unit_price * self.quantity

    def __str__(self):
        return f"{self.product_id} x{self.quantity}"
