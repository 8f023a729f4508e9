"""Celery tasks for the booking domain."""

from __future__ import annotations

import logging

from celery import shared_task  # type: ignore
from django.contrib.auth import get_user_model  # type: ignore

from . import notifications
from .models import Booking

logger = logging.getLogger(__name__)


@shared_task(name="bookings.send_booking_requested_email")
def send_booking_requested_email(booking_id: int) -> bool:
    try:
        booking = Booking.objects.select_related("client", "worker").get(pk=booking_id)
    except Booking.DoesNotExist:
        logger.warning("Booking %s vanished before the request e-mail was sent", booking_id)
        return False
    return notifications.send_booking_requested_email(booking)


@shared_task(name="bookings.send_booking_status_email")
def send_booking_status_email(booking_id: int, recipient_id: int, previous_status: str) -> bool:
    try:
        booking = Booking.objects.get(pk=booking_id)
        recipient = get_user_model().objects.get(pk=recipient_id)
    except (Booking.DoesNotExist, get_user_model().DoesNotExist):
        logger.warning("Booking %s or user %s vanished before the status e-mail was sent", booking_id, recipient_id)
        return False
    return notifications.send_booking_status_email(booking, recipient, previous_status)
