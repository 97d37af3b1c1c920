# accounting/api/urls.py

from django.urls import path

from accounting.api.views import (
    AccountDetailView,
    AccountListCreateView,
    AccountReconcileView,
    FinanceSummaryView,
    TransactionListCreateView,
    TransactionPeriodsView,
)

account_urlpatterns = [
    path("", AccountListCreateView.as_view(), name="accounts"),
    path("<int:account_id>/", AccountDetailView.as_view(), name="account-detail"),
    path("<int:account_id>/reconcile/", AccountReconcileView.as_view(), name="account-reconcile"),
]

transaction_urlpatterns = [
    path("", TransactionListCreateView.as_view(), name="transactions"),
    path("periods/", TransactionPeriodsView.as_view(), name="transaction-periods"),
]

finance_urlpatterns = [
    path("summary/", FinanceSummaryView.as_view(), name="finance-summary"),
]
