"""Maintenance mode gate for the HTTP API."""

from __future__ import annotations

import logging

from django.http import JsonResponse  # type: ignore
from rest_framework.exceptions import AuthenticationFailed  # type: ignore
from rest_framework_simplejwt.authentication import JWTAuthentication  # type: ignore

from apps.users.permissions import is_platform_admin

from .services import is_maintenance_mode

logger = logging.getLogger(__name__)

# Paths that stay reachable while maintenance mode is on
EXEMPT_PREFIXES = (
    "/api/v1/auth/",
    "/api/v1/settings/public/",
    "/api/v1/admin/sign-in",
    "/api/v1/admin/credentials/reset/",
    "/api/schema/",
    "/api/docs/",
)


class MaintenanceModeMiddleware:
    """Returns 503 for API requests of non-admins while maintenance mode is on."""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        if self._should_block(request):
            return JsonResponse(
                {
                    "detail": "The application is under maintenance. Please try again later.",
                    "code": "maintenance_mode",
                },
                status=503,
            )
        return self.get_response(request)

    def _should_block(self, request) -> bool:
        path = request.path
        if not path.startswith("/api/") or path.startswith(EXEMPT_PREFIXES):
            return False
        if not is_maintenance_mode():
            return False
        return not is_platform_admin(self._resolve_user(request))

    @staticmethod
    def _resolve_user(request):
        # DRF authenticates inside the view, so the bearer token is checked here
        user = getattr(request, "user", None)
        if user is not None and user.is_authenticated:
            return user
        try:
            result = JWTAuthentication().authenticate(request)
        except AuthenticationFailed:
            return None
        return result[0] if result else None
