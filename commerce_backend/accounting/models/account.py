# accounting/models/account.py

from __future__ import annotations

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q

from tenants.models import TenantOwnedModel


class Account(TenantOwnedModel):
    """
    A money container (cash box, bank account, credit card).

    Guarantees:
    - balance is mutated ONLY by accounting.services.ledger (F() updates on
      a locked row); save() refuses balance edits.
    - Accounts are never deleted once used; they are deactivated instead.
    """

    class Type(models.TextChoices):
        CASH = "CASH", "Cash"
        BANK = "BANK", "Bank"
        CREDIT_CARD = "CREDIT_CARD", "Credit card"

    name = models.CharField(max_length=150)
    type = models.CharField(max_length=20, choices=Type.choices, default=Type.CASH)
    account_number = models.CharField(max_length=64, blank=True, default="")

    balance = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text="Ledger-managed balance (never edited directly)",
    )

    is_active = models.BooleanField(default=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "accounts"
        ordering = ["created_at", "id"]
        indexes = [
            models.Index(fields=["organization", "is_active"]),
        ]
        constraints = [
            models.CheckConstraint(
                condition=~Q(name=""),
                name="chk_account_name_not_blank",
            ),
        ]

    def clean(self):
        self.name = (self.name or "").strip()
        self.account_number = (self.account_number or "").strip()
        if not self.name:
            raise ValidationError({"name": "name is required"})

    def save(self, *args, **kwargs):
        if not self._state.adding:
            stored = Account.objects.filter(pk=self.pk).values_list("balance", flat=True).first()
            if stored is not None and stored != self.balance:
                raise ValidationError(
                    {"balance": "balance can only change through ledger transactions"}
                )
        self.full_clean()
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("Accounts are deactivated, never deleted.")

    def __str__(self):
        return f"{self.name} ({self.type})"
