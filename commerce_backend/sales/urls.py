# sales/urls.py

from django.urls import path

from sales.views import SaleDetailView, SaleListCreateView, SalePeriodsView

urlpatterns = [
    path("", SaleListCreateView.as_view(), name="sale-list"),
    path("periods/", SalePeriodsView.as_view(), name="sale-periods"),
    path("<int:sale_id>/", SaleDetailView.as_view(), name="sale-detail"),
]
