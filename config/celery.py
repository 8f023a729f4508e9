import os

from celery import Celery
from celery.schedules import crontab  # type: ignore

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.dev")

app = Celery("handyconnect")

app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()


# ============================================================================
# CELERY BEAT SCHEDULE (Periodic Tasks)
# ============================================================================

app.conf.beat_schedule = {
    # Drop checkout sessions that were never completed - every hour
    "clear-expired-pending-payments": {
        "task": "payments.clear_expired_pending_statuses",
        "schedule": crontab(minute=5),
    },
    # Re-check pending checkout sessions against Stripe - every 15 minutes
    "force-check-subscription-statuses": {
        "task": "payments.force_check_subscription_statuses",
        "schedule": crontab(minute="*/15"),
        "options": {"expires": 600},
    },
}

app.conf.timezone = "UTC"
