"""Stripe Checkout integration."""

from __future__ import annotations

import logging
from typing import Any, Iterable

import stripe

from apps.administration.services import get_app_settings

logger = logging.getLogger(__name__)

SESSION_ID_PLACEHOLDER = "session_id={CHECKOUT_SESSION_ID}"


class StripeNotConfiguredError(Exception):
    """Raised when no Stripe secret key is available."""


class StripePaymentError(Exception):
    """Raised when a Stripe API call fails."""


def get_secret_key() -> str:
    return get_app_settings().effective_stripe_secret_key


def is_configured() -> bool:
    return bool(get_secret_key())


def _require_key() -> str:
    key = get_secret_key()
    if not key:
        raise StripeNotConfiguredError("Stripe is not configured.")
    return key


def with_session_placeholder(success_url: str) -> str:
    """Append `session_id={CHECKOUT_SESSION_ID}` so Stripe fills in the id on redirect."""
    if SESSION_ID_PLACEHOLDER in success_url:
        return success_url
    separator = "&" if "?" in success_url else "?"
    return f"{success_url}{separator}{SESSION_ID_PLACEHOLDER}"


def create_checkout_session(
    *,
    line_items: Iterable[dict[str, Any]],
    success_url: str,
    cancel_url: str,
    client_reference_id: str,
    allowed_countries: list[str] | None = None,
) -> dict[str, str]:
    """Open a Checkout session in `payment` mode.

    Returns:
        dict: {"id": session id, "url": hosted checkout page}
    """
    key = _require_key()
    params: dict[str, Any] = {
        "mode": "payment",
        "payment_method_types": ["card"],
        "line_items": [
            {
                "price_data": {
                    "currency": item["currency"],
                    "product_data": {
                        "name": item["product_name"],
                        "description": item["product_description"],
                    },
                    "unit_amount": item["price_in_cents"],
                },
                "quantity": item["quantity"],
            }
            for item in line_items
        ],
        "success_url": with_session_placeholder(success_url),
        "cancel_url": cancel_url,
        "client_reference_id": client_reference_id,
        "metadata": {"user_id": client_reference_id},
    }
    if allowed_countries:
        params["billing_address_collection"] = "required"
        params["shipping_address_collection"] = {"allowed_countries": allowed_countries}

    try:
        session = stripe.checkout.Session.create(api_key=key, **params)
    except stripe.StripeError as exc:
        logger.error("Stripe checkout session creation failed for user %s", client_reference_id, exc_info=True)
        raise StripePaymentError(f"Could not create checkout session: {exc}") from exc

    logger.info("Created Stripe checkout session %s for user %s", session["id"], client_reference_id)
    return {"id": session["id"], "url": session["url"]}


def retrieve_session(session_id: str):
    key = _require_key()
    try:
        return stripe.checkout.Session.retrieve(session_id, api_key=key)
    except stripe.StripeError as exc:
        logger.error("Stripe session lookup failed for %s", session_id, exc_info=True)
        raise StripePaymentError(f"Could not retrieve checkout session: {exc}") from exc


def is_session_paid(session) -> bool:
    return session.get("payment_status") == "paid"
