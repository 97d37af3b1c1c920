# sales/services/numbering.py

"""
SALE NUMBERS: VTA-00001, VTA-00002, ... per tenant.

Must be called inside the sale transaction: the counter row stays locked
until commit, and a rollback gives the number back.
"""

from sales.models import SaleSequence

PREFIX = "VTA"


def format_sale_number(value: int) -> str:
    return f"{PREFIX}-{value:05d}"


def next_sale_number(ctx) -> str:
    SaleSequence.objects.get_or_create(organization_id=ctx.organization_id)
    seq = SaleSequence.objects.select_for_update().get(organization_id=ctx.organization_id)
    seq.last_value += 1
    seq.save(update_fields=["last_value"])
    return format_sale_number(seq.last_value)
