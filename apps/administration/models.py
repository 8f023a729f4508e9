"""Administration models for HandyConnect."""

from __future__ import annotations

from django.conf import settings  # type: ignore
from django.contrib.auth.hashers import check_password, make_password  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

DEFAULT_APP_NAME = "HandyConnect"
DEFAULT_SUBSCRIPTION_FEE_CENTS = 999
DEFAULT_ADMIN_SIGN_IN_TITLE = "Welcome to the Admin Portal"
DEFAULT_ADMIN_SIGN_IN_SUBTITLE = "Please enter your credentials to access the admin console."
DEFAULT_ADMIN_SIGN_IN_HELPER_TEXT = "Contact your super admin if you encounter login issues."


class SingletonModel(models.Model):
    """Model with exactly one row (pk=1)."""

    class Meta:
        abstract = True

    def save(self, *args, **kwargs):  # type: ignore
        self.pk = 1
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):  # type: ignore
        return (0, {})

    @classmethod
    def load(cls):
        obj, _created = cls.objects.get_or_create(pk=1)
        return obj


class AppSettings(SingletonModel):
    """Platform-wide settings edited from the admin console."""

    app_name = models.CharField(max_length=100, default=DEFAULT_APP_NAME)
    maintenance_mode = models.BooleanField(
        default=False,
        help_text=_("When enabled, non-admin users cannot access the application."),
    )
    subscription_fee_cents = models.PositiveIntegerField(
        default=DEFAULT_SUBSCRIPTION_FEE_CENTS,
        help_text=_("One-time subscription fee charged during onboarding, in cents."),
    )
    subscription_currency = models.CharField(max_length=3, default="usd")
    admin_sign_in_title = models.CharField(max_length=200, default=DEFAULT_ADMIN_SIGN_IN_TITLE)
    admin_sign_in_subtitle = models.TextField(default=DEFAULT_ADMIN_SIGN_IN_SUBTITLE, blank=True)
    admin_sign_in_helper_text = models.TextField(default=DEFAULT_ADMIN_SIGN_IN_HELPER_TEXT, blank=True)
    stripe_secret_key = models.CharField(max_length=255, blank=True)
    stripe_allowed_countries = models.JSONField(default=list, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Application settings")
        verbose_name_plural = _("Application settings")

    def __str__(self) -> str:
        return self.app_name

    @property
    def effective_stripe_secret_key(self) -> str:
        return self.stripe_secret_key or getattr(settings, "STRIPE_SECRET_KEY", "")

    @property
    def is_stripe_configured(self) -> bool:
        return bool(self.effective_stripe_secret_key)


class AdminCredentials(SingletonModel):
    """Shared username/password for the admin console sign-in page."""

    username = models.CharField(max_length=150, blank=True)
    password = models.CharField(max_length=128, blank=True)
    recovery_phone = models.CharField(max_length=20, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Admin credentials")
        verbose_name_plural = _("Admin credentials")

    def __str__(self) -> str:
        return self.username or "(not configured)"

    @property
    def is_configured(self) -> bool:
        return bool(self.username and self.password)

    def set_credentials(self, username: str, raw_password: str) -> None:
        self.username = username
        self.password = make_password(raw_password)
        self.save(update_fields=["username", "password", "updated_at"])

    def check_credentials(self, username: str, raw_password: str) -> bool:
        if not self.is_configured or username != self.username:
            return False
        return check_password(raw_password, self.password)


class AdminSession(models.Model):
    """Admin access granted to a user who signed in with the admin credentials."""

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="admin_sessions",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Admin session")
        verbose_name_plural = _("Admin sessions")
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"Admin session for {self.user_id}"
