"""Worker profile models."""

from __future__ import annotations

import uuid

from django.conf import settings  # type: ignore
from django.core.validators import MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

DEFAULT_OTHER_CATEGORY = "Other Service"


def worker_image_upload_to(instance: "WorkerProfile", filename: str) -> str:
    ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else "jpg"
    return f"workers/{instance.owner_id}/{uuid.uuid4().hex[:12]}.{ext}"


class WorkerProfileQuerySet(models.QuerySet):
    def active(self):
        return self.filter(is_active=True)


class WorkerProfile(models.Model):
    """Public listing of a worker: what they do, where, and for how much."""

    class Category(models.TextChoices):
        PLUMBING = "plumbing", _("Plumbing")
        ELECTRICAL = "electrical", _("Electrical")
        CLEANING = "cleaning", _("Cleaning")
        GARDENING = "gardening", _("Gardening")
        OTHER = "other", _("Other")

    owner = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="worker_profile",
    )
    display_name = models.CharField(_("Display name"), max_length=150)
    category = models.CharField(_("Category"), max_length=20, choices=Category.choices)
    other_category = models.CharField(
        _("Other category"),
        max_length=100,
        blank=True,
        help_text=_("Service name shown when the category is 'other'."),
    )
    description = models.TextField(_("Description"))
    service_area = models.CharField(_("Service area"), max_length=255)
    hourly_rate = models.PositiveIntegerField(
        _("Hourly rate"),
        validators=[MinValueValidator(0)],
    )
    phone_number = models.CharField(_("Phone number"), max_length=20)
    is_active = models.BooleanField(_("Active"), default=True)
    profile_image = models.ImageField(
        _("Profile image"),
        upload_to=worker_image_upload_to,
        blank=True,
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = WorkerProfileQuerySet.as_manager()

    class Meta:
        verbose_name = _("Worker profile")
        verbose_name_plural = _("Worker profiles")
        ordering = ["display_name", "owner_id"]
        indexes = [
            models.Index(fields=["category", "is_active"], name="workers_wor_categor_3b1c2e_idx"),
            models.Index(fields=["hourly_rate"], name="workers_wor_hourly__8f0d4a_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.display_name} ({self.category_label})"

    @property
    def category_label(self) -> str:
        if self.category == self.Category.OTHER:
            return self.other_category or DEFAULT_OTHER_CATEGORY
        return self.get_category_display()
