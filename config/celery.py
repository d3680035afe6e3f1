import os

from celery import Celery
from celery.schedules import crontab  # type: ignore

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.dev")

app = Celery("tripmarket")

app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()


# ============================================================================
# CELERY BEAT SCHEDULE (Periodic Tasks)
# ============================================================================

app.conf.beat_schedule = {
    # Auto-decline pending bookings the provider never answered - every hour at :30
    "expire-pending-bookings": {
        "task": "bookings.expire_pending_bookings",
        "schedule": crontab(minute=30),
    },
    # Expire unanswered inquiry responses - daily at 03:00
    "mark-expired-inquiries": {
        "task": "inquiries.mark_expired_inquiries",
        "schedule": crontab(minute=0, hour=3),
    },
}

app.conf.timezone = "Asia/Tbilisi"
