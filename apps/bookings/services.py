"""Domain services for booking workflows."""

from __future__ import annotations

import logging

from django.db import transaction  # type: ignore
from django.utils import timezone  # type: ignore

from apps.workers.services import has_active_profile

from .models import Booking
from .tasks import send_booking_requested_email, send_booking_status_email

logger = logging.getLogger(__name__)

CLIENT = "client"
WORKER = "worker"

# (current status, new status) -> party allowed to make the change
TRANSITIONS: dict[tuple[str, str], str] = {
    (Booking.Status.REQUESTED, Booking.Status.ACCEPTED): WORKER,
    (Booking.Status.REQUESTED, Booking.Status.DECLINED): WORKER,
    (Booking.Status.REQUESTED, Booking.Status.CANCELLED): CLIENT,
    (Booking.Status.ACCEPTED, Booking.Status.COMPLETED): WORKER,
}


class BookingRequestError(Exception):
    """Raised when a booking request cannot be created."""


class BookingTransitionError(Exception):
    """Raised when a status change is not part of the booking workflow."""


class BookingPermissionError(Exception):
    """Raised when the caller may not change the booking status."""


@transaction.atomic
def create_booking_request(client, worker, *, job_details: str, date_time: str, location: str) -> Booking:
    if worker.pk == client.pk:
        raise BookingRequestError("You cannot book yourself.")
    if not has_active_profile(worker):
        raise BookingRequestError("This worker is not accepting bookings.")

    booking = Booking.objects.create(
        client=client,
        worker=worker,
        job_details=job_details,
        date_time=date_time,
        location=location,
    )
    logger.info("Booking %s requested by client %s for worker %s", booking.pk, client.pk, worker.pk)
    transaction.on_commit(lambda: send_booking_requested_email.delay(booking.pk))
    return booking


def allowed_next_statuses(booking: Booking, user) -> list[str]:
    """Statuses ``user`` may move the booking to from its current status."""

    role = WORKER if user.pk == booking.worker_id else CLIENT if user.pk == booking.client_id else None
    return [new for (current, new), party in TRANSITIONS.items() if current == booking.status and party == role]


@transaction.atomic
def update_booking_status(booking: Booking, new_status: str, actor) -> Booking:
    """Move ``booking`` to ``new_status`` on behalf of ``actor``."""

    booking = Booking.objects.select_for_update().get(pk=booking.pk)
    if not booking.is_party(actor):
        raise BookingPermissionError("Only the client or the worker of this booking can change its status.")

    previous = booking.status
    party = TRANSITIONS.get((previous, new_status))
    if party is None:
        raise BookingTransitionError(f"Cannot change booking status from '{previous}' to '{new_status}'.")

    actor_role = WORKER if actor.pk == booking.worker_id else CLIENT
    if party != actor_role:
        raise BookingPermissionError(f"Only the booking {party} can change the status to '{new_status}'.")

    booking.status = new_status
    booking.status_changed_at = timezone.now()
    booking.save(update_fields=["status", "status_changed_at", "updated_at"])
    logger.info("Booking %s moved from %s to %s by user %s", booking.pk, previous, new_status, actor.pk)

    recipient = booking.counterpart_of(actor)
    transaction.on_commit(lambda: send_booking_status_email.delay(booking.pk, recipient.pk, previous))
    return booking
