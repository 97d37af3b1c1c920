# accounting/tests/test_ledger.py

from decimal import Decimal

from django.core.exceptions import ValidationError as DjangoValidationError
from django.test import TestCase

from accounting.models import Account, Transaction
from accounting.services.account_service import (
    create_account,
    deactivate_account,
    record_manual_transaction,
)
from accounting.services.ledger import reconcile_account
from core.errors import NotFoundError, ValidationError
from core.testing import make_account, make_tenant


class LedgerTests(TestCase):
    """
    GUARANTEES:
    - Every balance change is one immutable Transaction
    - Stored balance == balance recomputed from transactions
    - Invalid postings write nothing
    """

    def setUp(self):
        self.org, self.user, self.ctx = make_tenant()
        self.cash = make_account(self.ctx, name="Caja", opening_balance="1000")
        self.bank = make_account(self.ctx, name="Banco", type="BANK")

    def _balance(self, account):
        account.refresh_from_db()
        return account.balance

    def test_opening_balance_is_a_transaction(self):
        self.assertEqual(self._balance(self.cash), Decimal("1000.00"))
        txn = Transaction.objects.get(account=self.cash)
        self.assertEqual(txn.type, Transaction.Type.INCOME)
        self.assertEqual(txn.category, "Opening balance")
        self.assertTrue(reconcile_account(self.ctx, self.cash.pk).is_balanced)

    def test_zero_opening_balance_posts_nothing(self):
        self.assertFalse(Transaction.objects.filter(account=self.bank).exists())
        self.assertTrue(reconcile_account(self.ctx, self.bank.pk).is_balanced)

    def test_income_expense_and_transfer(self):
        record_manual_transaction(self.ctx, type="INCOME", account_id=self.cash.pk, amount="50")
        record_manual_transaction(self.ctx, type="EXPENSE", account_id=self.cash.pk, amount="20.5")
        txn = record_manual_transaction(
            self.ctx, type="TRANSFER", account_id=self.cash.pk,
            to_account_id=self.bank.pk, amount="300",
        )

        self.assertEqual(txn.reference_type, Transaction.ReferenceType.OTHER)
        self.assertEqual(self._balance(self.cash), Decimal("729.50"))
        self.assertEqual(self._balance(self.bank), Decimal("300.00"))
        self.assertTrue(reconcile_account(self.ctx, self.cash.pk).is_balanced)
        self.assertTrue(reconcile_account(self.ctx, self.bank.pk).is_balanced)

    def test_transfer_to_same_account_is_rejected(self):
        with self.assertRaises(ValidationError):
            record_manual_transaction(
                self.ctx, type="TRANSFER", account_id=self.cash.pk,
                to_account_id=self.cash.pk, amount="10",
            )
        self.assertEqual(Transaction.objects.count(), 1)

    def test_transfer_requires_destination(self):
        with self.assertRaises(ValidationError):
            record_manual_transaction(self.ctx, type="TRANSFER", account_id=self.cash.pk, amount="10")

    def test_transfer_to_inactive_account_is_rejected(self):
        deactivate_account(self.ctx, self.bank.pk)

        with self.assertRaises(ValidationError):
            record_manual_transaction(
                self.ctx, type="TRANSFER", account_id=self.cash.pk,
                to_account_id=self.bank.pk, amount="10",
            )
        self.assertEqual(self._balance(self.cash), Decimal("1000.00"))

    def test_transfer_to_other_tenant_is_not_found(self):
        _, _, other_ctx = make_tenant("Otra", email="otra@example.com")
        foreign = make_account(other_ctx, name="Ajena")

        with self.assertRaises(NotFoundError):
            record_manual_transaction(
                self.ctx, type="TRANSFER", account_id=self.cash.pk,
                to_account_id=foreign.pk, amount="10",
            )
        self.assertEqual(self._balance(foreign), Decimal("0.00"))

    def test_non_positive_amount_is_rejected(self):
        for amount in ("0", "-5"):
            with self.assertRaises(ValidationError):
                record_manual_transaction(self.ctx, type="INCOME", account_id=self.cash.pk, amount=amount)

    def test_expense_may_overdraw(self):
        record_manual_transaction(self.ctx, type="EXPENSE", account_id=self.bank.pk, amount="25")
        self.assertEqual(self._balance(self.bank), Decimal("-25.00"))

    def test_transactions_are_immutable(self):
        txn = Transaction.objects.get(account=self.cash)
        txn.amount = Decimal("1.00")
        with self.assertRaises(DjangoValidationError):
            txn.save()
        with self.assertRaises(DjangoValidationError):
            txn.delete()

    def test_balance_cannot_be_edited_directly(self):
        self.cash.balance = Decimal("5.00")
        with self.assertRaises(DjangoValidationError):
            self.cash.save()

    def test_negative_opening_balance_posts_expense(self):
        card = create_account(self.ctx, name="Tarjeta", type=Account.Type.CREDIT_CARD, opening_balance="-200")
        self.assertEqual(card.balance, Decimal("-200.00"))
        self.assertEqual(Transaction.objects.get(account=card).type, Transaction.Type.EXPENSE)
