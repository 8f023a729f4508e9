"""Domain services for application settings and admin credentials."""

from __future__ import annotations

import logging

from django.db import transaction  # type: ignore

from apps.users.models import normalize_phone

from .models import AdminCredentials, AdminSession, AppSettings

logger = logging.getLogger(__name__)

MIN_ADMIN_PASSWORD_LENGTH = 6


class AdminSignInError(Exception):
    """Raised when the admin credential sign-in is rejected."""


def get_app_settings() -> AppSettings:
    return AppSettings.load()


def is_maintenance_mode() -> bool:
    return get_app_settings().maintenance_mode


def get_subscription_fee_cents() -> int:
    return get_app_settings().subscription_fee_cents


def update_subscription_fee(fee_cents: int) -> AppSettings:
    app_settings = get_app_settings()
    app_settings.subscription_fee_cents = fee_cents
    app_settings.save(update_fields=["subscription_fee_cents", "updated_at"])
    logger.info("Subscription fee set to %s cents", fee_cents)
    return app_settings


def configure_stripe(secret_key: str, allowed_countries: list[str]) -> AppSettings:
    app_settings = get_app_settings()
    app_settings.stripe_secret_key = secret_key
    app_settings.stripe_allowed_countries = [code.upper() for code in allowed_countries]
    app_settings.save(update_fields=["stripe_secret_key", "stripe_allowed_countries", "updated_at"])
    logger.info("Stripe configuration updated (%s allowed countries)", len(allowed_countries))
    return app_settings


def get_admin_credentials() -> AdminCredentials:
    return AdminCredentials.load()


def is_admin_sign_in_configured() -> bool:
    return get_admin_credentials().is_configured


def sign_in_with_credentials(user, username: str, password: str) -> AdminSession:
    """Open an admin session for ``user`` when the shared credentials match."""

    credentials = get_admin_credentials()
    if not credentials.is_configured:
        raise AdminSignInError("Admin sign-in has not been configured yet.")
    if not credentials.check_credentials(username, password):
        logger.warning("Rejected admin sign-in for user %s", user.pk)
        raise AdminSignInError("Invalid username or password.")

    session = AdminSession.objects.create(user=user)
    logger.info("Admin session opened for user %s", user.pk)
    return session


def is_admin_logged_in(user) -> bool:
    return AdminSession.objects.filter(user=user).exists()


def log_out_admin(user) -> int:
    deleted, _detail = AdminSession.objects.filter(user=user).delete()
    if deleted:
        logger.info("Admin session closed for user %s", user.pk)
    return deleted


@transaction.atomic
def update_admin_credentials(username: str, password: str) -> AdminCredentials:
    credentials = get_admin_credentials()
    credentials.set_credentials(username, password)
    logger.info("Admin credentials updated (username %s)", username)
    return credentials


def update_recovery_phone(phone: str) -> AdminCredentials:
    credentials = get_admin_credentials()
    credentials.recovery_phone = normalize_phone(phone)
    credentials.save(update_fields=["recovery_phone", "updated_at"])
    return credentials


def reset_credentials_by_phone(phone: str, username: str, password: str) -> bool:
    """Replace the admin credentials when ``phone`` matches the recovery phone."""

    credentials = get_admin_credentials()
    if not credentials.recovery_phone or normalize_phone(phone) != credentials.recovery_phone:
        logger.warning("Rejected admin credentials reset: recovery phone mismatch")
        return False
    if not username or len(password) < MIN_ADMIN_PASSWORD_LENGTH:
        return False

    update_admin_credentials(username, password)
    return True
