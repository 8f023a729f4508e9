"""URL routing for application settings and the admin console."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import SimpleRouter  # type: ignore

from .views import AdministrationViewSet, PublicSettingsView

router = SimpleRouter()
router.register(r"admin", AdministrationViewSet, basename="administration")

urlpatterns = [
    path("settings/public/", PublicSettingsView.as_view(), name="settings-public"),
    path("", include(router.urls)),
]
