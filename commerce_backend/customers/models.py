# customers/models.py

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models

from tenants.models import TenantOwnedModel


class Customer(TenantOwnedModel):
    """
    Buyer directory entry.

    total_orders / total_spent are aggregates maintained by the sale
    processor (F() increments inside the sale transaction). They are never
    written through the API.
    """

    name = models.CharField(max_length=255)
    phone = models.CharField(max_length=32, blank=True, default="")
    email = models.EmailField(blank=True, default="")
    address = models.TextField(blank=True, default="")
    notes = models.TextField(blank=True, default="")

    total_orders = models.PositiveIntegerField(default=0)
    total_spent = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))

    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "customers"
        ordering = ["name", "id"]
        indexes = [
            models.Index(fields=["organization", "created_at"]),
        ]

    def clean(self):
        self.name = (self.name or "").strip()
        if not self.name:
            raise ValidationError({"name": "Name is required"})

    def __str__(self):
        return self.name
