# reporting/services/events.py

"""
EVENT SUMMARY

net_profit = Σ sale profit (sales attached to the event)
             - fixed_cost
             - Σ EXPENSE transactions with reference EVENT/<event id>
"""

from __future__ import annotations

from decimal import Decimal

from django.db.models import Count, Sum

from accounting.models import Transaction
from core.money import ZERO, money
from reporting.services.profit import sale_profits
from sales.models import Sale

HUNDRED = Decimal("100")


def event_expenses(ctx, event):
    return (
        Transaction.objects.for_tenant(ctx)
        .filter(
            type=Transaction.Type.EXPENSE,
            reference_type=Transaction.ReferenceType.EVENT,
            reference_id=event.pk,
        )
        .order_by("occurred_at", "id")
    )


def event_sales(ctx, event):
    return (
        Sale.objects.for_tenant(ctx)
        .filter(event_id=event.pk)
        .select_related("customer")
        .annotate(items_count=Count("items"))
        .order_by("sold_at", "id")
    )


def event_profit(ctx, event) -> Decimal:
    return event_summary(ctx, event)["summary"]["net_profit"]


def event_summary(ctx, event) -> dict:
    sales = list(event_sales(ctx, event))
    profits = sale_profits(sales)
    expenses = list(event_expenses(ctx, event))

    total_sales = money(sum((s.total for s in sales), ZERO))
    total_tax = money(sum((s.tax for s in sales), ZERO))
    total_profit = money(sum(profits.values(), ZERO))
    fixed_cost = money(event.fixed_cost)
    tx_expenses = money(sum((e.amount for e in expenses), ZERO))
    total_expenses = fixed_cost + tx_expenses
    net_profit = total_profit - total_expenses

    return {
        "summary": {
            "total_sales": total_sales,
            "total_tax": total_tax,
            "total_profit": total_profit,
            "fixed_cost": fixed_cost,
            "expenses_total": tx_expenses,
            "total_expenses": total_expenses,
            "net_profit": net_profit,
            "roi": money(net_profit / total_expenses * HUNDRED) if total_expenses > ZERO else ZERO,
            "sales_count": len(sales),
        },
        "sales": [
            {
                "id": s.pk,
                "sale_number": s.sale_number,
                "subtotal": s.subtotal,
                "discount": s.discount,
                "tax": s.tax,
                "shipping_cost": s.shipping_cost,
                "total": s.total,
                "payment_method": s.payment_method,
                "sold_at": s.sold_at,
                "customer_name": s.customer.name if s.customer_id else None,
                "items_count": s.items_count,
                "profit": profits[s.pk],
            }
            for s in sales
        ],
        "expenses": [
            {
                "id": e.pk,
                "account_id": e.account_id,
                "description": e.description,
                "amount": e.amount,
                "occurred_at": e.occurred_at,
            }
            for e in expenses
        ],
    }


def event_totals(ctx, events) -> dict[int, dict]:
    """
    List-view totals for many events: INCOME/EXPENSE transactions tagged
    with each event, plus net profit from the shared profit formula.
    """
    events = list(events)
    ids = [e.pk for e in events]
    if not ids:
        return {}

    sales = list(Sale.objects.for_tenant(ctx).filter(event_id__in=ids))
    profits = sale_profits(sales)
    profit_by_event: dict[int, Decimal] = {pk: ZERO for pk in ids}
    sales_by_event: dict[int, Decimal] = {pk: ZERO for pk in ids}
    for s in sales:
        profit_by_event[s.event_id] += profits[s.pk]
        sales_by_event[s.event_id] += s.total

    expense_rows = (
        Transaction.objects.for_tenant(ctx)
        .filter(
            type=Transaction.Type.EXPENSE,
            reference_type=Transaction.ReferenceType.EVENT,
            reference_id__in=ids,
        )
        .values("reference_id")
        .annotate(total=Sum("amount"))
    )
    expenses = {r["reference_id"]: r["total"] or ZERO for r in expense_rows}

    out = {}
    for e in events:
        total_expenses = money(e.fixed_cost) + money(expenses.get(e.pk, ZERO))
        out[e.pk] = {
            "total_sales": money(sales_by_event[e.pk]),
            "total_expenses": total_expenses,
            "net_profit": money(profit_by_event[e.pk]) - total_expenses,
        }
    return out
