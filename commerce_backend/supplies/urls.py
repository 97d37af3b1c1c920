# supplies/urls.py

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from supplies.views import SupplyPurchaseListCreateView, SupplyViewSet

router = SimpleRouter()
router.register(r"", SupplyViewSet, basename="supplies")

urlpatterns = [
    path("", include(router.urls)),
]

supply_purchase_urlpatterns = [
    path("", SupplyPurchaseListCreateView.as_view(), name="supply-purchases"),
]
