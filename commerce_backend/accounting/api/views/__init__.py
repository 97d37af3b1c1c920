from .accounts import AccountDetailView, AccountListCreateView, AccountReconcileView
from .finances import FinanceSummaryView
from .transactions import TransactionListCreateView, TransactionPeriodsView

__all__ = [
    "AccountListCreateView",
    "AccountDetailView",
    "AccountReconcileView",
    "TransactionListCreateView",
    "TransactionPeriodsView",
    "FinanceSummaryView",
]
