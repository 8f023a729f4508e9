"""Subscription payment models."""

from __future__ import annotations

from django.conf import settings  # type: ignore
from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class SubscriptionPayment(models.Model):
    """The subscription payment state of one user.

    A row is `pending` from the moment a checkout session is opened and
    becomes `completed` once Stripe reports the session as paid.
    """

    class Status(models.TextChoices):
        PENDING = "pending", _("Pending")
        COMPLETED = "completed", _("Completed")

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="subscription_payment",
    )
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)
    session_id = models.CharField(_("Checkout session id"), max_length=255, db_index=True)
    amount_cents = models.PositiveIntegerField(default=0)
    currency = models.CharField(max_length=3, default="usd")
    created_at = models.DateTimeField(default=timezone.now)
    completed_at = models.DateTimeField(null=True, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Subscription payment")
        verbose_name_plural = _("Subscription payments")
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"Subscription of {self.user_id}: {self.status}"

    @property
    def is_completed(self) -> bool:
        return self.status == self.Status.COMPLETED

    def mark_completed(self, session_id: str | None = None) -> None:
        if session_id:
            self.session_id = session_id
        self.status = self.Status.COMPLETED
        self.completed_at = timezone.now()
        self.save(update_fields=["status", "session_id", "completed_at", "updated_at"])
