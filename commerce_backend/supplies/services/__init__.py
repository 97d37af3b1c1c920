from supplies.services.supply_stock import (
    SupplyUsage,
    consume_supplies,
    record_supply_purchase,
    resolve_supply_usages,
)

__all__ = [
    "SupplyUsage",
    "consume_supplies",
    "record_supply_purchase",
    "resolve_supply_usages",
]
