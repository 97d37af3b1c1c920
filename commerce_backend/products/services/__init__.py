from .cost_layers import (
    CostLayerPlanner,
    LayerTake,
    Reservation,
    add_layer,
    plan,
    reserve,
    stock_for,
)
from .stock_adjustments import AdjustmentResult, adjust_stock
from .stock_reports import inventory_value, low_stock_queryset

__all__ = [
    "CostLayerPlanner",
    "LayerTake",
    "Reservation",
    "add_layer",
    "plan",
    "reserve",
    "stock_for",
    "AdjustmentResult",
    "adjust_stock",
    "inventory_value",
    "low_stock_queryset",
]
