"""User domain models for HandyConnect.

Every account is either a client (requests home services) or a worker
(offers them); the choice is made once during onboarding. Independently of
the account type a user holds a platform role: a regular user or an admin
who manages application settings and other users.
"""

from __future__ import annotations

from typing import Any

from django.contrib.auth.models import AbstractUser, BaseUserManager  # type: ignore
from django.core.validators import RegexValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


PHONE_VALIDATOR = RegexValidator(
    regex=r"^\+?\d{7,15}$",
    message=_("Invalid phone number. Use the international format without spaces."),
)


def normalize_phone(phone: str) -> str:
    """Strip spaces, dashes and brackets so phones compare reliably."""
    return "".join(ch for ch in phone if ch not in " -()")


class CustomUserManager(BaseUserManager):
    """User manager that uses the e-mail address as the login."""

    use_in_migrations = True

    def _create_user(self, email: str, password: str | None, **extra_fields: Any):
        if not email:
            raise ValueError("An e-mail address is required to create a user.")
        email = self.normalize_email(email)

        phone = extra_fields.get("phone")
        if phone:
            extra_fields["phone"] = normalize_phone(phone)

        user = self.model(email=email, **extra_fields)
        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()
        user.save(using=self._db)
        return user

    def create_user(self, email: str, password: str | None = None, **extra_fields: Any):
        extra_fields.setdefault("is_staff", False)
        extra_fields.setdefault("is_superuser", False)
        extra_fields.setdefault("role", CustomUser.Role.USER)
        return self._create_user(email, password, **extra_fields)

    def create_superuser(self, email: str, password: str | None = None, **extra_fields: Any):
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        extra_fields.setdefault("role", CustomUser.Role.ADMIN)

        if extra_fields.get("is_staff") is not True:
            raise ValueError("Superuser must have is_staff=True.")
        if extra_fields.get("is_superuser") is not True:
            raise ValueError("Superuser must have is_superuser=True.")

        return self._create_user(email, password, **extra_fields)

    def admins(self):
        return self.filter(is_active=True).filter(
            models.Q(role=CustomUser.Role.ADMIN) | models.Q(is_superuser=True)
        )


class CustomUser(AbstractUser):
    """Platform account with an account type and a platform role."""

    class AccountType(models.TextChoices):
        CLIENT = "client", _("Client")
        WORKER = "worker", _("Worker")

    class Role(models.TextChoices):
        USER = "user", _("User")
        ADMIN = "admin", _("Admin")

    username = None
    email = models.EmailField(_("Email"), unique=True)
    name = models.CharField(
        _("Display name"),
        max_length=150,
        blank=True,
        help_text=_("Filled in during onboarding."),
    )
    phone = models.CharField(
        _("Phone"),
        max_length=20,
        unique=True,
        null=True,
        blank=True,
        validators=[PHONE_VALIDATOR],
    )
    account_type = models.CharField(
        _("Account type"),
        max_length=10,
        choices=AccountType.choices,
        blank=True,
    )
    role = models.CharField(
        _("Role"),
        max_length=10,
        choices=Role.choices,
        default=Role.USER,
    )
    failed_login_attempts = models.PositiveIntegerField(default=0)
    locked_until = models.DateTimeField(_("Locked until"), null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = CustomUserManager()

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS: list[str] = []

    class Meta:
        verbose_name = _("User")
        verbose_name_plural = _("Users")
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{self.email} ({self.get_role_display()})"

    # --- Domain helpers ------------------------------------------------------
    @property
    def has_profile(self) -> bool:
        return bool(self.name or self.account_type)

    def is_client(self) -> bool:
        return self.account_type == self.AccountType.CLIENT

    def is_worker(self) -> bool:
        return self.account_type == self.AccountType.WORKER

    def has_admin_role(self) -> bool:
        return self.role == self.Role.ADMIN or self.is_superuser

    def is_platform_admin(self) -> bool:
        """Admin by role or through a credential-based admin session."""
        if self.has_admin_role():
            return True
        return self.admin_sessions.exists()

    @property
    def is_locked(self) -> bool:
        return bool(self.locked_until and self.locked_until > timezone.now())

    def lock(self, minutes: int = 15) -> None:
        self.locked_until = timezone.now() + timezone.timedelta(minutes=minutes)
        self.failed_login_attempts = 0
        self.save(update_fields=["locked_until", "failed_login_attempts"])

    def unlock(self) -> None:
        self.locked_until = None
        self.failed_login_attempts = 0
        self.save(update_fields=["locked_until", "failed_login_attempts"])

    def register_failed_attempt(self, threshold: int = 5) -> None:
        self.failed_login_attempts += 1
        if self.failed_login_attempts >= threshold:
            self.lock()
            return
        self.save(update_fields=["failed_login_attempts"])


class AdminRoleChange(models.Model):
    """Audit record written every time a user gains or loses the admin role."""

    user = models.ForeignKey(
        CustomUser,
        on_delete=models.CASCADE,
        related_name="admin_role_changes",
    )
    changed_by = models.ForeignKey(
        CustomUser,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    is_admin = models.BooleanField()
    admin_count = models.PositiveIntegerField(
        help_text=_("Number of admins right after the change."),
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Admin role change")
        verbose_name_plural = _("Admin role changes")
        ordering = ["-created_at", "-id"]

    def __str__(self) -> str:
        action = "granted" if self.is_admin else "revoked"
        return f"Admin {action} for {self.user_id}"


# Short alias used in tests and services
User = CustomUser
