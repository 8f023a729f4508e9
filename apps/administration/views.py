"""API views for application settings, admin sign-in and credentials."""

from __future__ import annotations

import logging

from rest_framework import permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from apps.users.permissions import IsPlatformAdmin

from . import services
from .serializers import (
    AdminCredentialsSerializer,
    AdminSignInPageSerializer,
    AdminSignInSerializer,
    AppSettingsSerializer,
    CredentialsResetSerializer,
    PublicSettingsSerializer,
    RecoveryPhoneSerializer,
    SubscriptionFeeSerializer,
)

logger = logging.getLogger(__name__)


class PublicSettingsView(APIView):
    """Settings any visitor may read: app name, maintenance flag and fee."""

    permission_classes = [permissions.AllowAny]
    authentication_classes: list = []

    def get(self, request):
        return Response(PublicSettingsSerializer(services.get_app_settings()).data)


class AdministrationViewSet(viewsets.ViewSet):
    """Admin console endpoints.

    Sign-in page texts, the configured flag and credential reset are public;
    sign-in, session and sign-out need an authenticated caller; everything
    else requires an admin.
    """

    public_actions = {"sign_in_page", "sign_in_page_with_check", "sign_in_configured", "reset_credentials"}
    authenticated_actions = {"sign_in", "session", "sign_out"}

    def get_permissions(self):  # type: ignore
        if self.action in self.public_actions:
            if self.action == "sign_in_page" and self.request.method != "GET":
                return [permissions.IsAuthenticated(), IsPlatformAdmin()]
            return [permissions.AllowAny()]
        if self.action in self.authenticated_actions:
            return [permissions.IsAuthenticated()]
        return [permissions.IsAuthenticated(), IsPlatformAdmin()]

    @action(detail=False, methods=["get", "patch"], url_path="settings")
    def app_settings(self, request):
        app_settings = services.get_app_settings()
        if request.method == "GET":
            return Response(AppSettingsSerializer(app_settings).data)

        serializer = AppSettingsSerializer(app_settings, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        logger.info("Application settings updated by user %s: %s", request.user.pk, sorted(serializer.validated_data))
        return Response(serializer.data)

    @action(detail=False, methods=["put"], url_path="settings/subscription-fee")
    def subscription_fee(self, request):
        serializer = SubscriptionFeeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        app_settings = services.update_subscription_fee(serializer.validated_data["subscription_fee_cents"])
        return Response({"subscription_fee_cents": app_settings.subscription_fee_cents})

    @action(detail=False, methods=["get", "put"], url_path="sign-in-page")
    def sign_in_page(self, request):
        app_settings = services.get_app_settings()
        if request.method == "GET":
            return Response(AdminSignInPageSerializer(app_settings).data)

        serializer = AdminSignInPageSerializer(app_settings, data=request.data)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data)

    @action(detail=False, methods=["get"], url_path="sign-in-page/with-credentials-check")
    def sign_in_page_with_check(self, request):
        return Response(
            {
                "has_credentials": services.is_admin_sign_in_configured(),
                "settings": AdminSignInPageSerializer(services.get_app_settings()).data,
            }
        )

    @action(detail=False, methods=["get"], url_path="sign-in/configured")
    def sign_in_configured(self, request):
        return Response({"configured": services.is_admin_sign_in_configured()})

    @action(detail=False, methods=["post"], url_path="sign-in")
    def sign_in(self, request):
        serializer = AdminSignInSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            services.sign_in_with_credentials(
                request.user,
                serializer.validated_data["username"],
                serializer.validated_data["password"],
            )
        except services.AdminSignInError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return Response({"success": True})

    @action(detail=False, methods=["get"], url_path="session")
    def session(self, request):
        return Response({"logged_in": services.is_admin_logged_in(request.user)})

    @action(detail=False, methods=["post"], url_path="sign-out")
    def sign_out(self, request):
        services.log_out_admin(request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=False, methods=["put"], url_path="credentials")
    def credentials(self, request):
        serializer = AdminCredentialsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        credentials = services.update_admin_credentials(
            serializer.validated_data["username"],
            serializer.validated_data["password"],
        )
        return Response({"username": credentials.username})

    @action(detail=False, methods=["post"], url_path="credentials/reset")
    def reset_credentials(self, request):
        """Replaces the admin credentials when the recovery phone matches.

        Always answers 200 with `{"reset": bool}` so the phone cannot be probed
        through status codes.
        """
        serializer = CredentialsResetSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        reset = services.reset_credentials_by_phone(
            serializer.validated_data["phone"],
            serializer.validated_data["username"],
            serializer.validated_data["password"],
        )
        return Response({"reset": reset})

    @action(detail=False, methods=["get", "put"], url_path="recovery-phone")
    def recovery_phone(self, request):
        if request.method == "GET":
            phone = services.get_admin_credentials().recovery_phone
            return Response({"recovery_phone": phone or None})

        serializer = RecoveryPhoneSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        credentials = services.update_recovery_phone(serializer.validated_data["recovery_phone"])
        return Response({"recovery_phone": credentials.recovery_phone})
