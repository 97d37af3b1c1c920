# reporting/services/profit.py

"""
PROFIT (SINGLE SOURCE OF TRUTH FOR EVERY READ PATH)

Sale detail, sale list, dashboard, sales chart, recent sales, top products
and event detail all call into this module, so the same sale always shows
the same profit.

Formulas (prices are tax-inclusive):
- line_profit  = line_total - unit_cost * quantity
- sale_profit  = Σ line_profit - sale.tax            (per sale, then summed)
- tax share    = sale.tax * line_total / (subtotal - discount), 0 when fully discounted
- event_profit = Σ sale_profit - fixed_cost - Σ EVENT expense transactions
"""

from __future__ import annotations

from collections import defaultdict
from decimal import Decimal

from core.money import ZERO, money
from sales.models import SaleItem


def line_profit(line_total, unit_cost, quantity) -> Decimal:
    return Decimal(line_total) - Decimal(unit_cost) * quantity


def product_tax_share(sale_tax, line_total, sale_subtotal, sale_discount) -> Decimal:
    net = Decimal(sale_subtotal) - Decimal(sale_discount)
    if net == 0:
        return ZERO
    return Decimal(sale_tax) * Decimal(line_total) / net


def sale_profits(sales) -> dict[int, Decimal]:
    """
    {sale id: profit} for the given Sale objects, in one items query.
    """
    sales = list(sales)
    if not sales:
        return {}

    margins: dict[int, Decimal] = defaultdict(lambda: ZERO)
    rows = SaleItem.objects.filter(sale_id__in=[s.pk for s in sales]).values_list(
        "sale_id", "line_total", "unit_cost", "quantity"
    )
    for sale_id, line_total, unit_cost, quantity in rows:
        margins[sale_id] += line_profit(line_total, unit_cost, quantity)

    return {s.pk: money(margins[s.pk] - s.tax) for s in sales}


def sale_profit(sale) -> Decimal:
    return sale_profits([sale])[sale.pk]


def total_profit(sales) -> Decimal:
    return money(sum(sale_profits(sales).values(), ZERO))


def product_profits(sales, *, limit: int | None = None) -> list[dict]:
    """
    Per-product units, revenue and profit across the given sales.
    Each line carries its proportional share of its sale's tax, so
    Σ product profit == Σ sale profit (up to cent rounding).
    Sorted by units sold, then revenue.
    """
    sales = {s.pk: s for s in sales}
    if not sales:
        return []

    acc: dict[int, dict] = {}
    items = SaleItem.objects.filter(sale_id__in=list(sales)).select_related("product")
    for item in items:
        sale = sales[item.sale_id]
        row = acc.setdefault(
            item.product_id,
            {
                "id": item.product_id,
                "name": item.product.name,
                "units_sold": 0,
                "revenue": ZERO,
                "profit": ZERO,
            },
        )
        row["units_sold"] += item.quantity
        row["revenue"] += item.line_total
        row["profit"] += line_profit(item.line_total, item.unit_cost, item.quantity) - product_tax_share(
            sale.tax, item.line_total, sale.subtotal, sale.discount
        )

    rows = sorted(acc.values(), key=lambda r: (-r["units_sold"], -r["revenue"], r["id"]))
    for row in rows:
        row["revenue"] = money(row["revenue"])
        row["profit"] = money(row["profit"])
    return rows[:limit] if limit else rows
