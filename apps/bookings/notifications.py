"""E-mail notifications for booking events."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from django.conf import settings  # type: ignore
from django.core.mail import send_mail  # type: ignore
from django.utils.html import strip_tags  # type: ignore

if TYPE_CHECKING:  # pragma: no cover
    from .models import Booking

logger = logging.getLogger(__name__)


def send_email_notification(
    recipient_email: str,
    subject: str,
    message: str,
    *,
    html_message: str | None = None,
) -> bool:
    """Send one e-mail.

    Returns:
        bool: True if the message was handed to the mail backend
    """
    if not recipient_email:
        return False
    try:
        send_mail(
            subject=subject,
            message=strip_tags(html_message) if html_message else message,
            from_email=settings.DEFAULT_FROM_EMAIL,
            recipient_list=[recipient_email],
            html_message=html_message,
            fail_silently=False,
        )
    except Exception:
        logger.error("Failed to send email to %s: %s", recipient_email, subject, exc_info=True)
        return False

    logger.info("Email sent to %s: %s", recipient_email, subject)
    return True


def _display_name(user) -> str:
    return user.name or user.email


def send_booking_requested_email(booking: "Booking") -> bool:
    """Tell the worker about a new booking request."""
    subject = f"New booking request #{booking.pk}"
    message = (
        f"Hello {_display_name(booking.worker)},\n\n"
        f"{_display_name(booking.client)} requested a job.\n\n"
        f"When: {booking.date_time}\n"
        f"Where: {booking.location}\n"
        f"Details: {booking.job_details}\n\n"
        "Open your dashboard to accept or decline the request."
    )
    return send_email_notification(booking.worker.email, subject, message)


def send_booking_status_email(booking: "Booking", recipient, previous_status: str) -> bool:
    """Tell the other party that the booking status changed."""
    subject = f"Booking #{booking.pk} is now {booking.get_status_display().lower()}"
    message = (
        f"Hello {_display_name(recipient)},\n\n"
        f"The booking for {booking.date_time} at {booking.location} "
        f"changed from {previous_status} to {booking.status}."
    )
    return send_email_notification(recipient.email, subject, message)
