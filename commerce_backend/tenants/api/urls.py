# tenants/api/urls.py

from django.urls import path

from tenants.api.views import OrganizationSettingsView

urlpatterns = [
    path("", OrganizationSettingsView.as_view(), name="organization-settings"),
]
