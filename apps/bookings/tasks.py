"""Celery tasks for the booking domain."""

from __future__ import annotations

import logging
from datetime import timedelta

from celery import shared_task  # type: ignore
from django.conf import settings  # type: ignore
from django.utils import timezone  # type: ignore

from shared.application.uow import DjangoUnitOfWork

from .repositories import booking_repo

logger = logging.getLogger(__name__)

EXPIRED_DECLINE_REASON = "Expired - provider did not respond in time"


# ============================================================================
# PERIODIC TASKS (run by Celery Beat)
# ============================================================================

@shared_task(name="bookings.expire_pending_bookings")
def expire_pending_bookings() -> dict[str, int]:
    """
    Auto-decline bookings the provider never answered.

    Looks for PENDING bookings older than BOOKING_PENDING_EXPIRATION_HOURS
    and declines each one in its own transaction, so the customer hears
    back instead of waiting forever.

    Runs hourly at minute 30 via Celery Beat.

    Returns:
        dict: {"expired": declined bookings, "errors": bookings that failed}
    """
    hours = getattr(settings, "BOOKING_PENDING_EXPIRATION_HOURS", 48)
    cutoff = timezone.now() - timedelta(hours=hours)
    expired_count = 0
    error_count = 0

    for booking in booking_repo.find_expired_pending(cutoff):
        try:
            with DjangoUnitOfWork() as uow:
                booking.decline(EXPIRED_DECLINE_REASON)
                booking_repo.decline_booking(booking)
                uow.collect_events(booking)
            expired_count += 1
            logger.info(
                "Auto-declined expired booking %s (%s)",
                booking.id,
                booking.reference_number,
            )
        except Exception:
            error_count += 1
            logger.error("Failed to auto-decline booking %s", booking.id, exc_info=True)

    if expired_count:
        logger.info("Auto-declined %d expired pending bookings", expired_count)

    return {"expired": expired_count, "errors": error_count}
