from .sale import (
    SaleCreateSerializer,
    SaleDetailSerializer,
    SaleItemSerializer,
    SaleListSerializer,
    SaleSupplyUsageSerializer,
)

__all__ = [
    "SaleCreateSerializer",
    "SaleDetailSerializer",
    "SaleItemSerializer",
    "SaleListSerializer",
    "SaleSupplyUsageSerializer",
]
