# products/views/__init__.py

"""
Products views package exports.
"""

from .inventory import (
    InventoryAdjustView,
    InventoryBatchViewSet,
    InventoryMovementListView,
    InventoryMovementPeriodsView,
)
from .product import ProductViewSet

__all__ = [
    "ProductViewSet",
    "InventoryBatchViewSet",
    "InventoryMovementListView",
    "InventoryMovementPeriodsView",
    "InventoryAdjustView",
]
