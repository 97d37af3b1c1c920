# accounting/services/account_service.py

"""
ACCOUNT MANAGEMENT + MANUAL ENTRIES

- create_account(): optional opening balance is posted as a transaction so
  reconciliation holds from day one.
- update_account(): descriptive fields only; balance is ledger-managed.
- deactivate_account(): soft delete (is_active=False).
- record_manual_transaction(): INCOME / EXPENSE / TRANSFER with reference OTHER.
"""

from __future__ import annotations

import logging

from accounting.models import Account, Transaction
from accounting.services.ledger import lock_account, record_transaction
from core.errors import NotFoundError, ValidationError
from core.money import ZERO, money
from core.transactions import atomic_operation

logger = logging.getLogger(__name__)

OPENING_BALANCE_CATEGORY = "Opening balance"

EDITABLE_FIELDS = ("name", "type", "account_number", "is_active")


def create_account(ctx, *, name: str, type: str = Account.Type.CASH, account_number: str = "", opening_balance=None) -> Account:
    opening = money(opening_balance)

    with atomic_operation("create account"):
        account = Account(
            organization_id=ctx.organization_id,
            name=name,
            type=type,
            account_number=account_number or "",
        )
        account.save()

        if opening != ZERO:
            record_transaction(
                ctx,
                type=Transaction.Type.INCOME if opening > ZERO else Transaction.Type.EXPENSE,
                account=account,
                amount=abs(opening),
                category=OPENING_BALANCE_CATEGORY,
                description=f"Opening balance for {account.name}",
            )
            account.refresh_from_db(fields=["balance"])

    logger.info("Account %s created for org %s", account.pk, ctx.organization_id)
    return account


def update_account(ctx, account_id, **changes) -> Account:
    unknown = set(changes) - set(EDITABLE_FIELDS)
    if unknown:
        raise ValidationError(f"Fields not editable: {', '.join(sorted(unknown))}")

    with atomic_operation("update account"):
        account = lock_account(ctx, account_id, require_active=False)
        for field, value in changes.items():
            setattr(account, field, value)
        account.save(update_fields=[*changes.keys(), "updated_at"])
    return account


def deactivate_account(ctx, account_id) -> Account:
    with atomic_operation("deactivate account"):
        account = lock_account(ctx, account_id, require_active=False)
        if account.is_active:
            account.is_active = False
            account.save(update_fields=["is_active", "updated_at"])
    logger.info("Account %s deactivated", account.pk)
    return account


def record_manual_transaction(
    ctx,
    *,
    type: str,
    account_id,
    amount,
    to_account_id=None,
    category: str = "",
    description: str = "",
    occurred_at=None,
) -> Transaction:
    """
    Manual postings always carry reference OTHER.
    Both accounts are locked in id order to keep lock ordering stable.
    """
    if type == Transaction.Type.TRANSFER and to_account_id in (None, ""):
        raise ValidationError("Transfer requires a destination account")
    if type != Transaction.Type.TRANSFER and to_account_id not in (None, ""):
        raise ValidationError("Only transfers carry a destination account")

    lock_order = None
    if type == Transaction.Type.TRANSFER:
        if str(account_id) == str(to_account_id):
            raise ValidationError("Transfer destination must differ from the origin account")
        try:
            lock_order = sorted([int(account_id), int(to_account_id)])
        except (TypeError, ValueError):
            raise NotFoundError("Account not found")

    with atomic_operation("manual transaction"):
        if lock_order is not None:
            first, second = lock_order
            locked = {
                first: lock_account(ctx, first, require_active=False),
                second: lock_account(ctx, second, require_active=False),
            }
            account = locked[int(account_id)]
            to_account = locked[int(to_account_id)]
        else:
            account = lock_account(ctx, account_id, require_active=False)
            to_account = None

        txn = record_transaction(
            ctx,
            type=type,
            account=account,
            to_account=to_account,
            amount=amount,
            category=category,
            description=description,
            reference_type=Transaction.ReferenceType.OTHER,
            occurred_at=occurred_at,
        )

    logger.info("Manual %s %s recorded (txn %s)", type, txn.amount, txn.pk)
    return txn
