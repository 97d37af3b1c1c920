# tenants/models/organization.py

"""
ORGANIZATION (TENANT)

Every business row belongs to exactly one Organization.

Settings carried here:
- currency: the local currency; purchases in any other currency are converted
  with the purchase exchange rate.
- tax_rate: tax-inclusive sales tax rate (0.15 = 15%). Sales snapshot it.
"""

from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.utils.text import slugify


def _default_currency():
    return getattr(settings, "DEFAULT_CURRENCY", "HNL")


def _default_tax_rate():
    return Decimal(str(getattr(settings, "DEFAULT_TAX_RATE", "0")))


class Organization(models.Model):
    name = models.CharField(max_length=255)
    slug = models.SlugField(max_length=255, unique=True)

    currency = models.CharField(max_length=3, default=_default_currency)
    tax_rate = models.DecimalField(
        max_digits=5,
        decimal_places=4,
        default=_default_tax_rate,
        help_text="Tax-inclusive sales tax rate, e.g. 0.1500 for 15%",
    )

    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "organizations"
        ordering = ["name"]

    def clean(self):
        if self.tax_rate is None or self.tax_rate < 0 or self.tax_rate >= 1:
            raise ValidationError({"tax_rate": "tax_rate must be in [0, 1)"})
        self.currency = (self.currency or "").strip().upper()
        if len(self.currency) != 3:
            raise ValidationError({"currency": "currency must be a 3-letter code"})

    def save(self, *args, **kwargs):
        if not self.slug:
            base = slugify(self.name) or "org"
            candidate = base
            i = 1
            while Organization.objects.filter(slug=candidate).exists():
                i += 1
                candidate = f"{base}-{i}"
            self.slug = candidate
        self.full_clean()
        super().save(*args, **kwargs)

    def __str__(self):
        return self.name
