"""URL routing for worker profiles."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import WorkerProfileViewSet

router = DefaultRouter()
router.register(r"", WorkerProfileViewSet, basename="worker")

urlpatterns = [
    path("", include(router.urls)),
]
