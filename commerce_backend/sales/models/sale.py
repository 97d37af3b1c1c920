# sales/models/sale.py

from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q
from django.utils import timezone

from tenants.models import TenantOwnedModel


class Sale(TenantOwnedModel):
    """
    Represents a committed sale.

    GUARANTEES:
    - Immutable financial record (written once by the sale processor)
    - total = subtotal - discount + shipping_cost
    - tax is EMBEDDED in the prices (tax-inclusive), never added on top:
      tax = (subtotal - discount) * tax_rate / (1 + tax_rate)
    - Σ items.line_total == subtotal - discount
    """

    class PaymentMethod(models.TextChoices):
        CASH = "CASH", "Cash"
        CARD = "CARD", "Card"
        TRANSFER = "TRANSFER", "Bank transfer"
        OTHER = "OTHER", "Other"

    class DiscountType(models.TextChoices):
        AMOUNT = "AMOUNT", "Fixed amount"
        PERCENT = "PERCENT", "Percentage"

    sale_number = models.CharField(max_length=20)

    customer = models.ForeignKey(
        "customers.Customer",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="sales",
    )
    event = models.ForeignKey(
        "events.Event",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="sales",
    )
    account = models.ForeignKey(
        "accounting.Account",
        on_delete=models.PROTECT,
        related_name="sales",
    )

    subtotal = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))

    discount_type = models.CharField(
        max_length=7, choices=DiscountType.choices, blank=True, default=""
    )
    discount_value = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00"),
        help_text="Raw global discount input (amount, or percent when PERCENT)",
    )
    discount = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00"),
        help_text="Total resolved discount (global or sum of item discounts)",
    )

    tax_rate = models.DecimalField(max_digits=5, decimal_places=4, default=Decimal("0"))
    tax = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))

    shipping_cost = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    total = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))

    payment_method = models.CharField(
        max_length=8, choices=PaymentMethod.choices, default=PaymentMethod.CASH
    )

    notes = models.TextField(blank=True, default="")
    sold_at = models.DateTimeField(default=timezone.now)

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )

    class Meta:
        db_table = "sales"
        ordering = ["-sold_at", "-id"]
        indexes = [
            models.Index(fields=["organization", "sold_at"]),
            models.Index(fields=["organization", "payment_method"]),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["organization", "sale_number"],
                name="uniq_sale_number_per_org",
            ),
            models.CheckConstraint(
                condition=Q(total__gte=0),
                name="chk_sale_total_gte_zero",
            ),
            models.CheckConstraint(
                condition=Q(discount__gte=0) & Q(discount__lte=models.F("subtotal")),
                name="chk_sale_discount_within_subtotal",
            ),
        ]

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("Sale records are immutable")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("Sale records cannot be deleted")

    @property
    def net_amount(self) -> Decimal:
        return self.subtotal - self.discount

    def __str__(self):
        return f"{self.sale_number} ({self.total})"
