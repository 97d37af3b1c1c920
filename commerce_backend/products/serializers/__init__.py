# products/serializers/__init__.py

from .inventory import (
    InventoryAdjustSerializer,
    InventoryBatchSerializer,
    InventoryMovementSerializer,
)
from .product import ProductSerializer

__all__ = [
    "ProductSerializer",
    "InventoryBatchSerializer",
    "InventoryMovementSerializer",
    "InventoryAdjustSerializer",
]
