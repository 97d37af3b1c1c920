# reporting/urls.py

from django.urls import path

from reporting.views import DashboardPeriodsView, DashboardView

urlpatterns = [
    path("", DashboardView.as_view(), name="dashboard"),
    path("periods/", DashboardPeriodsView.as_view(), name="dashboard-periods"),
]
