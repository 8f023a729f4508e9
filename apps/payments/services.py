"""Domain services for the subscription paywall and Stripe payments."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Any

from django.conf import settings  # type: ignore
from django.db import transaction  # type: ignore
from django.utils import timezone  # type: ignore

from apps.administration.services import get_app_settings
from apps.users.permissions import is_platform_admin

from . import stripe_service
from .models import SubscriptionPayment

logger = logging.getLogger(__name__)

SUBSCRIPTION_PRODUCT_NAME = "HandyConnect Subscription"
SUBSCRIPTION_PRODUCT_DESCRIPTION = "One-time subscription fee to join HandyConnect platform"


class CheckoutValidationError(Exception):
    """Raised when checkout items are rejected."""


class PaymentVerificationError(Exception):
    """Raised when Stripe does not confirm a session for the caller."""


def grace_period() -> timedelta:
    return timedelta(days=getattr(settings, "SUBSCRIPTION_GRACE_DAYS", 2))


def pending_lifetime() -> timedelta:
    return timedelta(hours=getattr(settings, "PENDING_PAYMENT_TTL_HOURS", 24))


def grace_period_ends_at(user) -> datetime:
    return user.date_joined + grace_period()


def get_payment(user) -> SubscriptionPayment | None:
    return SubscriptionPayment.objects.filter(user=user).first()


def has_completed_payment(user) -> bool:
    return SubscriptionPayment.objects.filter(user=user, status=SubscriptionPayment.Status.COMPLETED).exists()


def has_active_subscription(user) -> bool:
    """Admins, paying users and users inside the grace period have access."""

    if is_platform_admin(user):
        return True
    if has_completed_payment(user):
        return True
    return timezone.now() < grace_period_ends_at(user)


def subscription_item(fee_cents: int | None = None) -> dict[str, Any]:
    app_settings = get_app_settings()
    return {
        "product_name": SUBSCRIPTION_PRODUCT_NAME,
        "product_description": SUBSCRIPTION_PRODUCT_DESCRIPTION,
        "currency": app_settings.subscription_currency,
        "price_in_cents": app_settings.subscription_fee_cents if fee_cents is None else fee_cents,
        "quantity": 1,
    }


def checkout_total(items: list[dict[str, Any]]) -> int:
    if not items:
        raise CheckoutValidationError("At least one item is required.")
    currencies = {item["currency"].lower() for item in items}
    if len(currencies) > 1:
        raise CheckoutValidationError("All items must use the same currency.")
    total = 0
    for item in items:
        if item["quantity"] <= 0:
            raise CheckoutValidationError("Item quantity must be positive.")
        if item["price_in_cents"] < 0:
            raise CheckoutValidationError("Item price cannot be negative.")
        total += item["price_in_cents"] * item["quantity"]
    return total


def start_checkout(user, items: list[dict[str, Any]], success_url: str, cancel_url: str) -> dict[str, str]:
    """Open a Stripe Checkout session and mark the user's payment as pending."""

    if has_completed_payment(user):
        raise CheckoutValidationError("The subscription has already been paid.")

    fee = get_app_settings().subscription_fee_cents
    total = checkout_total(items)
    if total < fee:
        raise CheckoutValidationError(f"The checkout total must cover the subscription fee of {fee} cents.")

    app_settings = get_app_settings()
    session = stripe_service.create_checkout_session(
        line_items=items,
        success_url=success_url,
        cancel_url=cancel_url,
        client_reference_id=str(user.pk),
        allowed_countries=app_settings.stripe_allowed_countries,
    )

    # Stripe is called outside any transaction; only the row update is atomic
    SubscriptionPayment.objects.update_or_create(
        user=user,
        defaults={
            "status": SubscriptionPayment.Status.PENDING,
            "session_id": session["id"],
            "amount_cents": total,
            "currency": items[0]["currency"].lower(),
            "created_at": timezone.now(),
            "completed_at": None,
        },
    )
    logger.info("Subscription checkout %s started for user %s (%s cents)", session["id"], user.pk, total)
    return session


def session_status(session_id: str) -> dict[str, Any]:
    """`completed` with a summary when Stripe reports the session as paid, else `failed`."""

    try:
        session = stripe_service.retrieve_session(session_id)
    except stripe_service.StripePaymentError as exc:
        return {"status": "failed", "error": str(exc)}

    if not stripe_service.is_session_paid(session):
        return {
            "status": "failed",
            "error": f"Payment status is '{session.get('payment_status') or 'unknown'}'.",
        }
    return {
        "status": "completed",
        "response": {
            "id": session.get("id"),
            "payment_status": session.get("payment_status"),
            "amount_total": session.get("amount_total"),
            "currency": session.get("currency"),
        },
        "user": session.get("client_reference_id"),
    }


@transaction.atomic
def confirm_payment(user, session_id: str) -> SubscriptionPayment:
    """Complete the caller's payment after Stripe confirms the session. Idempotent."""

    payment = SubscriptionPayment.objects.select_for_update().filter(user=user).first()
    if payment is not None and payment.is_completed and payment.session_id == session_id:
        return payment

    session = stripe_service.retrieve_session(session_id)
    if session.get("client_reference_id") != str(user.pk):
        raise PaymentVerificationError("This checkout session belongs to another account.")
    if not stripe_service.is_session_paid(session):
        raise PaymentVerificationError("The checkout session has not been paid.")

    if payment is None:
        # The pending row may already have been cleared as expired
        payment = SubscriptionPayment.objects.create(
            user=user,
            status=SubscriptionPayment.Status.COMPLETED,
            session_id=session_id,
            amount_cents=session.get("amount_total") or 0,
            currency=session.get("currency") or "usd",
            completed_at=timezone.now(),
        )
    else:
        payment.mark_completed(session_id)
    logger.info("Subscription payment completed for user %s (session %s)", user.pk, session_id)
    return payment


def pending_payments():
    return SubscriptionPayment.objects.filter(status=SubscriptionPayment.Status.PENDING).select_related("user")


def clear_expired_pending() -> list[dict[str, Any]]:
    """Delete pending rows older than the pending lifetime."""

    cutoff = timezone.now() - pending_lifetime()
    expired = list(pending_payments().filter(created_at__lt=cutoff))
    updates = [
        {"user": payment.user_id, "previous_status": payment.status, "updated_status": None}
        for payment in expired
    ]
    if expired:
        SubscriptionPayment.objects.filter(pk__in=[payment.pk for payment in expired]).delete()
        logger.info("Cleared %s expired pending payments", len(expired))
    return updates


def force_check_pending() -> list[dict[str, Any]]:
    """Ask Stripe about every pending session and complete the paid ones."""

    results = []
    for payment in pending_payments():
        if payment.session_id:
            try:
                session = stripe_service.retrieve_session(payment.session_id)
            except (stripe_service.StripePaymentError, stripe_service.StripeNotConfiguredError):
                logger.warning("Could not re-check payment session for user %s", payment.user_id)
            else:
                if stripe_service.is_session_paid(session):
                    payment.mark_completed()
                    logger.info("Payment for user %s completed on re-check", payment.user_id)
        results.append({"user": payment.user_id, "status": payment.status})
    return results
