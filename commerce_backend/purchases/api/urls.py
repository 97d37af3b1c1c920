# purchases/api/urls.py

from django.urls import path

from purchases.api.views import PurchaseDetailView, PurchaseListCreateView

urlpatterns = [
    path("", PurchaseListCreateView.as_view(), name="purchase-list"),
    path("<int:purchase_id>/", PurchaseDetailView.as_view(), name="purchase-detail"),
]
