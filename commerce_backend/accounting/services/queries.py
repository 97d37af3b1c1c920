# accounting/services/queries.py

"""
FINANCE READ MODELS (READ-ONLY)

- transactions_for_period(): filtered list + totals per type
- finance_summary(): active accounts, period/today totals, daily cash flow
"""

from __future__ import annotations

from django.db.models import Count, Q, Sum
from django.db.models.functions import TruncDate

from accounting.models import Account, Transaction
from core.errors import ValidationError
from core.money import ZERO, money
from core.periods import Period, today_period

T = Transaction.Type


def _type_totals(qs) -> dict:
    agg = qs.aggregate(
        income=Sum("amount", filter=Q(type=T.INCOME)),
        expense=Sum("amount", filter=Q(type=T.EXPENSE)),
        transfer=Sum("amount", filter=Q(type=T.TRANSFER)),
        count=Count("id"),
    )
    return {
        "income": money(agg["income"] or ZERO),
        "expense": money(agg["expense"] or ZERO),
        "transfer": money(agg["transfer"] or ZERO),
        "count": int(agg["count"] or 0),
    }


def transactions_for_period(ctx, *, period: Period, account_id=None, type: str | None = None):
    """
    Returns (queryset, totals). account_id matches origin OR destination.
    """
    qs = Transaction.objects.for_tenant(ctx).select_related("account", "to_account")
    qs = period.filter(qs, "occurred_at")

    if account_id not in (None, ""):
        account = Account.objects.get_owned(ctx, account_id, label="Account")
        qs = qs.filter(Q(account=account) | Q(to_account=account))

    if type:
        if type not in T.values:
            raise ValidationError(f"Unknown transaction type: {type}")
        qs = qs.filter(type=type)

    return qs.order_by("-occurred_at", "-id"), _type_totals(qs)


def finance_summary(ctx, *, period: Period) -> dict:
    accounts = Account.objects.for_tenant(ctx).filter(is_active=True).order_by("created_at", "id")

    base = Transaction.objects.for_tenant(ctx)
    period_qs = period.filter(base, "occurred_at")
    period_totals = _type_totals(period_qs)
    today_totals = _type_totals(today_period().filter(base, "occurred_at"))

    cash_flow = (
        period_qs.exclude(type=T.TRANSFER)
        .annotate(day=TruncDate("occurred_at"))
        .values("day")
        .annotate(
            income=Sum("amount", filter=Q(type=T.INCOME)),
            expense=Sum("amount", filter=Q(type=T.EXPENSE)),
        )
        .order_by("day")
    )

    return {
        "period": period.as_dict(),
        "accounts": [
            {"id": a.pk, "name": a.name, "type": a.type, "balance": money(a.balance)}
            for a in accounts
        ],
        "total_balance": money(sum((a.balance for a in accounts), ZERO)),
        "period_totals": {
            "income": period_totals["income"],
            "expense": period_totals["expense"],
            "net": period_totals["income"] - period_totals["expense"],
        },
        "today": {
            "income": today_totals["income"],
            "expense": today_totals["expense"],
            "count": today_totals["count"],
        },
        "cash_flow": [
            {
                "date": row["day"].isoformat(),
                "income": money(row["income"] or ZERO),
                "expense": money(row["expense"] or ZERO),
            }
            for row in cash_flow
        ],
    }
