# events/services.py

"""
EVENT EXPENSES

An event expense is an EXPENSE transaction tagged reference EVENT/<event id>,
so event profit can subtract it and the paying account stays reconciled.
"""

import logging

from accounting.models import Transaction
from accounting.services.ledger import lock_account, record_transaction
from core.transactions import atomic_operation
from events.models import Event

logger = logging.getLogger(__name__)

EVENT_EXPENSE_CATEGORY = "Event expense"


def add_event_expense(ctx, event_id, *, account_id, amount, description="", occurred_at=None) -> Transaction:
    event = Event.objects.get_owned(ctx, event_id, label="Event")

    with atomic_operation("event expense"):
        account = lock_account(ctx, account_id)
        txn = record_transaction(
            ctx,
            type=Transaction.Type.EXPENSE,
            account=account,
            amount=amount,
            category=EVENT_EXPENSE_CATEGORY,
            description=description or f"Expense for {event.name}",
            reference_type=Transaction.ReferenceType.EVENT,
            reference_id=event.pk,
            occurred_at=occurred_at,
        )

    logger.info("Event %s expense %s recorded on account %s", event.pk, txn.amount, account.pk)
    return txn
