"""Permission classes shared by the HandyConnect apps."""

from __future__ import annotations

from django.utils.translation import gettext_lazy as _  # type: ignore
from rest_framework import permissions, status  # type: ignore
from rest_framework.exceptions import APIException  # type: ignore


class PaymentRequired(APIException):
    """Raised when the caller's grace period is over and no payment exists.

    Clients treat 402 as final and must not retry the request.
    """

    status_code = status.HTTP_402_PAYMENT_REQUIRED
    default_detail = _("Your grace period has expired. Complete the subscription payment to continue.")
    default_code = "payment_required"

    def __init__(self, detail=None, code=None):
        super().__init__(detail, code)
        # Clients key off the "code" field of the body
        self.detail = {"detail": self.detail, "code": self.detail.code}


def is_platform_admin(user) -> bool:
    if not user or not user.is_authenticated:
        return False
    return hasattr(user, "is_platform_admin") and user.is_platform_admin()


class IsPlatformAdmin(permissions.BasePermission):
    """Only admins (by role, superuser flag or admin session) may access."""

    message = _("Administrator privileges are required.")

    def has_permission(self, request, view) -> bool:  # type: ignore
        return is_platform_admin(request.user)


class IsPlatformAdminOrReadOnly(permissions.BasePermission):
    """Anyone may read, only admins may write."""

    def has_permission(self, request, view) -> bool:  # type: ignore
        if request.method in permissions.SAFE_METHODS:
            return True
        return is_platform_admin(request.user)


class IsClient(permissions.BasePermission):
    message = _("Only client accounts can perform this action.")

    def has_permission(self, request, view) -> bool:  # type: ignore
        user = request.user
        return bool(user and user.is_authenticated and user.is_client())


class IsWorker(permissions.BasePermission):
    message = _("Only worker accounts can perform this action.")

    def has_permission(self, request, view) -> bool:  # type: ignore
        user = request.user
        return bool(user and user.is_authenticated and user.is_worker())


class HasAccountType(permissions.BasePermission):
    """The caller finished onboarding (admins are exempt)."""

    message = _("Complete onboarding by choosing an account type first.")

    def has_permission(self, request, view) -> bool:  # type: ignore
        user = request.user
        if not user or not user.is_authenticated:
            return False
        return bool(user.account_type) or is_platform_admin(user)


class HasActiveSubscription(permissions.BasePermission):
    """Paywall: grace period, completed payment or admin."""

    def has_permission(self, request, view) -> bool:  # type: ignore
        user = request.user
        if not user or not user.is_authenticated:
            return False

        from apps.payments.services import has_active_subscription

        if not has_active_subscription(user):
            raise PaymentRequired()
        return True
