from .sale import SaleDetailView, SaleListCreateView, SalePeriodsView

__all__ = ["SaleDetailView", "SaleListCreateView", "SalePeriodsView"]
