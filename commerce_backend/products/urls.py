# products/urls.py

"""
PRODUCTS + INVENTORY URLS

- /api/products/...   (router)
- /api/inventory/...  (inventory_urlpatterns, mounted by backend/urls.py)
"""

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from products.views import (
    InventoryAdjustView,
    InventoryBatchViewSet,
    InventoryMovementListView,
    InventoryMovementPeriodsView,
    ProductViewSet,
)

router = SimpleRouter()
router.register(r"", ProductViewSet, basename="products")

batch_router = SimpleRouter()
batch_router.register(r"batches", InventoryBatchViewSet, basename="inventory-batches")

urlpatterns = [
    path("", include(router.urls)),
]

inventory_urlpatterns = [
    path("adjust/", InventoryAdjustView.as_view(), name="inventory-adjust"),
    path("movements/", InventoryMovementListView.as_view(), name="inventory-movements"),
    path(
        "movements/periods/",
        InventoryMovementPeriodsView.as_view(),
        name="inventory-movement-periods",
    ),
    path("", include(batch_router.urls)),
]
