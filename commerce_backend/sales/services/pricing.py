# sales/services/pricing.py

"""
SALE PRICING (PURE, NO DB)

Inputs are already-validated lines. Output is every money figure the sale
processor persists.

Rules:
- subtotal = Σ unit_price * quantity
- Item discounts and a global discount are mutually exclusive.
- PERCENT global discount = subtotal * value / 100
- A global discount is spread over the lines in proportion to their gross
  amount with largest-remainder cents, so every line discount stays within
  [0, gross] and Σ line_total == subtotal - discount.
- Prices are tax-inclusive: tax = net * rate / (1 + rate); shipping untaxed.
- total = subtotal - discount + shipping_cost
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from core.errors import ValidationError
from core.money import ZERO, money

AMOUNT = "AMOUNT"
PERCENT = "PERCENT"
HUNDRED = Decimal("100")


@dataclass(frozen=True)
class PricedLine:
    gross: Decimal
    discount: Decimal

    @property
    def line_total(self) -> Decimal:
        return self.gross - self.discount


@dataclass(frozen=True)
class SalePricing:
    lines: list[PricedLine]
    subtotal: Decimal
    discount: Decimal
    tax: Decimal
    shipping_cost: Decimal
    total: Decimal

    @property
    def net(self) -> Decimal:
        return self.subtotal - self.discount


def resolve_global_discount(subtotal: Decimal, discount_type: str | None, value) -> Decimal:
    if not discount_type:
        return ZERO
    value = money(value)
    if value < ZERO:
        raise ValidationError("discount cannot be negative")
    if discount_type == PERCENT:
        if value > HUNDRED:
            raise ValidationError("percent discount cannot exceed 100")
        return money(subtotal * value / HUNDRED)
    if discount_type == AMOUNT:
        return value
    raise ValidationError("discount_type must be AMOUNT or PERCENT")


def _cents(value: Decimal) -> int:
    return int(money(value) * 100)


def _spread(discount: Decimal, grosses: list[Decimal], subtotal: Decimal) -> list[Decimal]:
    """
    Largest-remainder allocation in whole cents: every line first gets the
    floor of its proportional share, then the leftover cents go to the lines
    with the largest remainders (earlier line wins a tie).
    Each share stays within [0, gross] and Σ shares == discount.
    """
    shares = [ZERO for _ in grosses]
    if discount == ZERO or subtotal == ZERO:
        return shares

    total = _cents(discount)
    base = _cents(subtotal)
    floors = []
    remainders = []
    for gross in grosses:
        q, r = divmod(total * _cents(gross), base)
        floors.append(q)
        remainders.append(r)

    leftover = total - sum(floors)
    order = sorted(range(len(grosses)), key=lambda i: (-remainders[i], i))
    for i in order[:leftover]:
        floors[i] += 1

    return [money(Decimal(c) / 100) for c in floors]


def tax_included(net: Decimal, rate: Decimal) -> Decimal:
    if not rate:
        return ZERO
    return money(net * rate / (Decimal("1") + rate))


def price_sale(
    lines,
    *,
    discount_type: str | None = None,
    discount_value=None,
    tax_rate=ZERO,
    shipping_cost=ZERO,
) -> SalePricing:
    """
    lines: iterable of (quantity, unit_price, item_discount)
    """
    lines = list(lines)
    grosses = [money(Decimal(qty) * money(price)) for qty, price, _ in lines]
    item_discounts = [money(d) for _, _, d in lines]
    subtotal = money(sum(grosses, ZERO))

    if any(d < ZERO for d in item_discounts):
        raise ValidationError("item discount cannot be negative")
    for gross, d in zip(grosses, item_discounts):
        if d > gross:
            raise ValidationError("item discount cannot exceed the line amount")

    has_item_discounts = any(d > ZERO for d in item_discounts)
    global_discount = resolve_global_discount(subtotal, discount_type, discount_value)
    if has_item_discounts and (discount_type or global_discount > ZERO):
        raise ValidationError("Use either a global discount or item discounts, not both")

    if global_discount > subtotal:
        raise ValidationError("discount cannot exceed the subtotal")

    if has_item_discounts:
        discounts = item_discounts
        total_discount = money(sum(item_discounts, ZERO))
    else:
        discounts = _spread(global_discount, grosses, subtotal)
        total_discount = global_discount

    shipping = money(shipping_cost)
    if shipping < ZERO:
        raise ValidationError("shipping_cost cannot be negative")

    net = subtotal - total_discount
    return SalePricing(
        lines=[PricedLine(gross=g, discount=d) for g, d in zip(grosses, discounts)],
        subtotal=subtotal,
        discount=total_discount,
        tax=tax_included(net, Decimal(tax_rate or 0)),
        shipping_cost=shipping,
        total=net + shipping,
    )
