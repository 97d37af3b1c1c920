# accounting/models/transaction.py

"""
TRANSACTION (IMMUTABLE LEDGER ROW)

Every balance change is explained by exactly one Transaction:
- INCOME   -> +amount on account
- EXPENSE  -> -amount on account
- TRANSFER -> -amount on account, +amount on to_account

reference_type/reference_id link the posting to what caused it
(SALE, PURCHASE, EVENT, or OTHER for manual entries).

Rows are write-once: no updates, no deletes.
"""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import F, Q
from django.utils import timezone

from tenants.models import TenantOwnedModel


class Transaction(TenantOwnedModel):
    class Type(models.TextChoices):
        INCOME = "INCOME", "Income"
        EXPENSE = "EXPENSE", "Expense"
        TRANSFER = "TRANSFER", "Transfer"

    class ReferenceType(models.TextChoices):
        SALE = "SALE", "Sale"
        PURCHASE = "PURCHASE", "Purchase"
        EVENT = "EVENT", "Event"
        OTHER = "OTHER", "Other"

    type = models.CharField(max_length=10, choices=Type.choices)

    account = models.ForeignKey(
        "accounting.Account",
        on_delete=models.PROTECT,
        related_name="transactions",
    )
    to_account = models.ForeignKey(
        "accounting.Account",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="incoming_transfers",
    )

    amount = models.DecimalField(max_digits=14, decimal_places=2)

    category = models.CharField(max_length=100, blank=True, default="")
    description = models.CharField(max_length=255, blank=True, default="")

    reference_type = models.CharField(
        max_length=10,
        choices=ReferenceType.choices,
        default=ReferenceType.OTHER,
    )
    reference_id = models.PositiveBigIntegerField(null=True, blank=True)

    occurred_at = models.DateTimeField(default=timezone.now)

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )

    class Meta:
        db_table = "transactions"
        ordering = ["-occurred_at", "-id"]
        indexes = [
            models.Index(fields=["organization", "occurred_at"]),
            models.Index(fields=["account", "occurred_at"]),
            models.Index(fields=["reference_type", "reference_id"]),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(amount__gt=0),
                name="chk_transaction_amount_gt_zero",
            ),
            models.CheckConstraint(
                condition=~Q(type="TRANSFER") | Q(to_account__isnull=False),
                name="chk_transfer_has_destination",
            ),
            models.CheckConstraint(
                condition=Q(to_account__isnull=True) | ~Q(to_account=F("account")),
                name="chk_transfer_distinct_accounts",
            ),
        ]

    def clean(self):
        if self.amount is None or self.amount <= 0:
            raise ValidationError({"amount": "amount must be greater than zero"})

        if self.type == self.Type.TRANSFER:
            if not self.to_account_id:
                raise ValidationError({"to_account": "transfer requires a destination account"})
            if self.to_account_id == self.account_id:
                raise ValidationError({"to_account": "destination must differ from origin"})
        elif self.to_account_id:
            raise ValidationError({"to_account": "only transfers carry a destination account"})

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("Transactions are immutable once recorded.")
        self.full_clean()
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("Transactions are immutable and cannot be deleted.")

    def signed_amount_for(self, account_id) -> Decimal:
        """
        Effect of this row on the given account's balance.
        """
        if self.type == self.Type.INCOME and self.account_id == account_id:
            return self.amount
        if self.type == self.Type.EXPENSE and self.account_id == account_id:
            return -self.amount
        if self.type == self.Type.TRANSFER:
            if self.account_id == account_id:
                return -self.amount
            if self.to_account_id == account_id:
                return self.amount
        return Decimal("0.00")

    def __str__(self):
        return f"{self.type} {self.amount} ({self.reference_type}:{self.reference_id})"
