# sales/models/sale_sequence.py

from django.db import models


class SaleSequence(models.Model):
    """
    Per-tenant sale number counter.

    Locked (SELECT ... FOR UPDATE) and incremented inside the sale
    transaction, so two concurrent sales can never read the same value.
    """

    organization = models.OneToOneField(
        "tenants.Organization",
        on_delete=models.CASCADE,
        related_name="+",
    )
    last_value = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = "sale_sequences"

    def __str__(self):
        return f"{self.organization_id}: {self.last_value}"
