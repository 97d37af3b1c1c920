# accounting/services/ledger.py

"""
ACCOUNT LEDGER (AUTHORITATIVE BALANCE WRITER)

Purpose:
- The ONLY code path that changes Account.balance.
- Every balance change is paired with one immutable Transaction row.

Rules:
- record_transaction() validates BEFORE writing:
  - amount > 0
  - origin account owned by the tenant and active
  - TRANSFER: destination present, owned, active, different from origin
- Balances move with F() expressions on rows locked with SELECT ... FOR UPDATE,
  inside the caller's atomic block (sale / purchase / manual entry).
- reconcile_account() recomputes the balance from transactions; the stored
  balance must always match it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal

from django.db import transaction
from django.db.models import F, Q, Sum
from django.utils import timezone

from accounting.models import Account, Transaction
from core.errors import NotFoundError, ValidationError
from core.money import ZERO, money

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Reconciliation:
    account_id: int
    stored_balance: Decimal
    computed_balance: Decimal

    @property
    def difference(self) -> Decimal:
        return self.stored_balance - self.computed_balance

    @property
    def is_balanced(self) -> bool:
        return self.difference == ZERO


def lock_account(ctx, account_id, *, label: str = "Account", require_active: bool = True) -> Account:
    """
    Tenant-scoped, row-locked account lookup.
    Inactive accounts are rejected for new postings.
    """
    if account_id in (None, ""):
        raise ValidationError(f"{label} is required")
    account = Account.objects.get_owned(ctx, account_id, for_update=True, label=label)
    if require_active and not account.is_active:
        raise ValidationError(f"{label} '{account.name}' is inactive")
    return account


def post(account_id, signed_amount: Decimal) -> None:
    """
    Apply one signed balance delta. Caller holds the row lock.
    """
    updated = Account.objects.filter(pk=account_id).update(
        balance=F("balance") + money(signed_amount),
        updated_at=timezone.now(),
    )
    if updated != 1:
        raise LookupError(f"Account {account_id} vanished during posting")


@transaction.atomic
def record_transaction(
    ctx,
    *,
    type: str,
    account: Account,
    amount,
    to_account: Account | None = None,
    category: str = "",
    description: str = "",
    reference_type: str = Transaction.ReferenceType.OTHER,
    reference_id: int | None = None,
    occurred_at=None,
) -> Transaction:
    amount = money(amount)
    if amount <= ZERO:
        raise ValidationError("amount must be greater than zero")

    if type not in Transaction.Type.values:
        raise ValidationError(f"Unknown transaction type: {type}")

    if account.organization_id != ctx.organization_id:
        raise NotFoundError(f"Account not found: {account.pk}")
    if not account.is_active:
        raise ValidationError(f"Account '{account.name}' is inactive")

    if type == Transaction.Type.TRANSFER:
        if to_account is None:
            raise ValidationError("Transfer requires a destination account")
        if to_account.pk == account.pk:
            raise ValidationError("Transfer destination must differ from the origin account")
        if to_account.organization_id != ctx.organization_id:
            raise NotFoundError(f"Account not found: {to_account.pk}")
        if not to_account.is_active:
            raise ValidationError(f"Destination account '{to_account.name}' is inactive")
    elif to_account is not None:
        raise ValidationError("Only transfers carry a destination account")

    txn = Transaction.objects.create(
        organization_id=ctx.organization_id,
        type=type,
        account=account,
        to_account=to_account,
        amount=amount,
        category=(category or "").strip(),
        description=(description or "").strip(),
        reference_type=reference_type,
        reference_id=reference_id,
        occurred_at=occurred_at or timezone.now(),
        created_by=getattr(ctx, "user", None),
    )

    if type == Transaction.Type.INCOME:
        post(account.pk, amount)
    elif type == Transaction.Type.EXPENSE:
        post(account.pk, -amount)
    else:
        post(account.pk, -amount)
        post(to_account.pk, amount)

    logger.debug("Recorded %s %s on account %s", type, amount, account.pk)
    return txn


def computed_balance(account: Account) -> Decimal:
    T = Transaction.Type
    rows = Transaction.objects.filter(
        Q(account_id=account.pk) | Q(to_account_id=account.pk)
    ).aggregate(
        income=Sum("amount", filter=Q(type=T.INCOME, account_id=account.pk)),
        expense=Sum("amount", filter=Q(type=T.EXPENSE, account_id=account.pk)),
        transfer_out=Sum("amount", filter=Q(type=T.TRANSFER, account_id=account.pk)),
        transfer_in=Sum("amount", filter=Q(type=T.TRANSFER, to_account_id=account.pk)),
    )
    total = (
        (rows["income"] or ZERO)
        - (rows["expense"] or ZERO)
        - (rows["transfer_out"] or ZERO)
        + (rows["transfer_in"] or ZERO)
    )
    return money(total)


def reconcile_account(ctx, account_id) -> Reconciliation:
    account = Account.objects.get_owned(ctx, account_id, label="Account")
    return Reconciliation(
        account_id=account.pk,
        stored_balance=money(account.balance),
        computed_balance=computed_balance(account),
    )
