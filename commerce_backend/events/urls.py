# events/urls.py

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from events.views import EventViewSet

router = SimpleRouter()
router.register(r"", EventViewSet, basename="events")

urlpatterns = [
    path("", include(router.urls)),
]
