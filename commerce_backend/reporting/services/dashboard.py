# reporting/services/dashboard.py

"""
DASHBOARD

All metrics are read from committed rows for one Period (default: current
month) and compared with the previous period. Profit figures come from
reporting.services.profit only.
"""

from __future__ import annotations

import logging
from collections import OrderedDict
from decimal import Decimal

from django.conf import settings
from django.db.models import Count, Sum
from django.utils import timezone

from accounting.models import Account
from core.money import ZERO, money
from customers.models import Customer
from products.models import Product
from products.services.stock_reports import inventory_value, low_stock_queryset
from reporting.services.profit import product_profits, sale_profits
from sales.models import Sale

logger = logging.getLogger(__name__)

HUNDRED = Decimal("100")
TOP_LIMIT = 5


def _change(current: Decimal, previous: Decimal):
    if previous <= ZERO:
        return None
    return money((current - previous) / previous * HUNDRED)


def _sales(ctx, period):
    return period.filter(Sale.objects.for_tenant(ctx), "sold_at")


def inventory_stats(ctx) -> dict:
    products = list(Product.objects.for_tenant(ctx).filter(is_active=True).with_stock())
    threshold = settings.LOW_STOCK_THRESHOLD

    def limit(p):
        return p.low_stock_threshold if p.low_stock_threshold is not None else threshold

    return {
        "total_products": len(products),
        "total_units": sum(int(p.stock) for p in products),
        "total_value": inventory_value(ctx),
        "out_of_stock": sum(1 for p in products if p.stock == 0),
        "low_stock": sum(1 for p in products if 0 < p.stock < limit(p)),
    }


def sales_chart(sales, profits) -> list[dict]:
    days: "OrderedDict[str, dict]" = OrderedDict()
    for sale in sorted(sales, key=lambda s: (s.sold_at, s.pk)):
        day = timezone.localtime(sale.sold_at).date().isoformat()
        row = days.setdefault(day, {"date": day, "revenue": ZERO, "profit": ZERO})
        row["revenue"] += sale.total
        row["profit"] += profits[sale.pk]
    return list(days.values())


def payment_split(ctx, period) -> list[dict]:
    rows = (
        _sales(ctx, period)
        .values("payment_method")
        .annotate(amount=Sum("total"))
        .order_by("-amount")
    )
    return [{"method": r["payment_method"], "amount": money(r["amount"])} for r in rows]


def recent_sales(ctx, period, *, limit: int = TOP_LIMIT) -> list[dict]:
    sales = list(
        _sales(ctx, period)
        .select_related("customer")
        .annotate(items_count=Count("items"))
        .order_by("-sold_at", "-id")[:limit]
    )
    profits = sale_profits(sales)
    return [
        {
            "id": s.pk,
            "sale_number": s.sale_number,
            "total": s.total,
            "payment_method": s.payment_method,
            "sold_at": s.sold_at,
            "customer_name": s.customer.name if s.customer_id else None,
            "items_count": s.items_count,
            "profit": profits[s.pk],
        }
        for s in sales
    ]


def build_dashboard(ctx, period) -> dict:
    current = list(_sales(ctx, period))
    previous = list(_sales(ctx, period.previous()))

    profits = sale_profits(current)
    revenue = money(sum((s.total for s in current), ZERO))
    revenue_prev = money(sum((s.total for s in previous), ZERO))
    profit = money(sum(profits.values(), ZERO))
    profit_prev = money(sum(sale_profits(previous).values(), ZERO))

    customers = Customer.objects.for_tenant(ctx)
    customers_new = period.filter(customers, "created_at").count()

    balance = (
        Account.objects.for_tenant(ctx)
        .filter(is_active=True)
        .aggregate(total=Sum("balance"))
        .get("total")
    )

    low_stock = [
        {"id": p.pk, "name": p.name, "sku": p.sku, "stock": int(p.stock)}
        for p in low_stock_queryset(ctx)[:TOP_LIMIT]
    ]

    logger.debug("Dashboard built for org %s (%s sales)", ctx.organization_id, len(current))

    return {
        "period": period.as_dict(),
        "metrics": {
            "revenue": revenue,
            "revenue_change": _change(revenue, revenue_prev),
            "profit": profit,
            "profit_change": _change(profit, profit_prev),
            "sales_count": len(current),
            "customers_total": customers.count(),
            "customers_new": customers_new,
            "inventory": inventory_stats(ctx),
            "balance": money(balance or ZERO),
        },
        "sales_chart": sales_chart(current, profits),
        "payment_methods": payment_split(ctx, period),
        "top_products": product_profits(current, limit=TOP_LIMIT),
        "recent_sales": recent_sales(ctx, period),
        "low_stock": low_stock,
    }
