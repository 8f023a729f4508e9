"""Celery tasks for subscription payments (run by Celery Beat)."""

from __future__ import annotations

import logging

from celery import shared_task  # type: ignore

from .services import clear_expired_pending, force_check_pending

logger = logging.getLogger(__name__)


@shared_task(name="payments.clear_expired_pending_statuses")
def clear_expired_pending_statuses() -> dict[str, int]:
    """Drop pending payments whose checkout session was never completed.

    Returns:
        dict: {"cleared": number of deleted pending rows}
    """
    updates = clear_expired_pending()
    return {"cleared": len(updates)}


@shared_task(name="payments.force_check_subscription_statuses")
def force_check_subscription_statuses() -> dict[str, int]:
    """Re-query Stripe for pending sessions.

    Returns:
        dict: {"checked": pending rows looked at, "completed": rows now completed}
    """
    results = force_check_pending()
    completed = sum(1 for result in results if result["status"] == "completed")
    if completed:
        logger.info("Completed %s pending payments during the periodic check", completed)
    return {"checked": len(results), "completed": completed}
