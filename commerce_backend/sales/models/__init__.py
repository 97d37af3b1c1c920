# sales/models/__init__.py

"""
SALES MODELS PACKAGE EXPORTS
"""

from .sale import Sale
from .sale_item import SaleItem
from .sale_sequence import SaleSequence
from .sale_supply_usage import SaleSupplyUsage

__all__ = [
    "Sale",
    "SaleItem",
    "SaleSequence",
    "SaleSupplyUsage",
]
