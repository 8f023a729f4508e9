"""Booking domain models for HandyConnect."""

from __future__ import annotations

from django.conf import settings  # type: ignore
from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class BookingQuerySet(models.QuerySet):
    def involving(self, user):
        """Bookings where ``user`` is the client or the worker."""
        return self.filter(models.Q(client=user) | models.Q(worker=user))


class Booking(models.Model):
    """A client's request for a job by a worker."""

    class Status(models.TextChoices):
        REQUESTED = "requested", _("Requested")
        ACCEPTED = "accepted", _("Accepted")
        DECLINED = "declined", _("Declined")
        COMPLETED = "completed", _("Completed")
        CANCELLED = "cancelled", _("Cancelled")

    client = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="client_bookings",
    )
    worker = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="worker_bookings",
    )
    job_details = models.TextField(_("Job details"))
    date_time = models.CharField(
        _("Requested date and time"),
        max_length=100,
        help_text=_("As entered by the client, e.g. 'Monday, Feb 10, 2026 at 2:00 PM'."),
    )
    location = models.CharField(_("Location"), max_length=255)
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.REQUESTED,
    )
    status_changed_at = models.DateTimeField(default=timezone.now)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = BookingQuerySet.as_manager()

    class Meta:
        verbose_name = _("Booking")
        verbose_name_plural = _("Bookings")
        ordering = ["-created_at", "-id"]
        constraints = [
            models.CheckConstraint(
                condition=~models.Q(client=models.F("worker")),
                name="booking_client_is_not_worker",
            ),
        ]
        indexes = [
            models.Index(fields=["status"], name="bookings_bo_status_5c1f0e_idx"),
        ]

    def __str__(self) -> str:
        return f"Booking #{self.pk} ({self.status})"

    def is_party(self, user) -> bool:
        return user.pk in (self.client_id, self.worker_id)

    def counterpart_of(self, user):
        """The other party of the booking."""
        return self.worker if user.pk == self.client_id else self.client
