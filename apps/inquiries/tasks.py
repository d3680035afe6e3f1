"""Celery tasks for inquiries."""

from __future__ import annotations

import logging

from celery import shared_task  # type: ignore

from . import services
from .conversion import convert_inquiry_to_bookings
from .models import Inquiry

logger = logging.getLogger(__name__)


@shared_task(name="inquiries.convert_accepted_inquiry")
def convert_accepted_inquiry(inquiry_id: str) -> dict[str, int]:
    """Create the bookings of an accepted inquiry. Never raises."""
    try:
        inquiry = Inquiry.objects.get(pk=inquiry_id)
        bookings = convert_inquiry_to_bookings(inquiry)
    except Exception:
        logger.error("Failed to convert inquiry %s into bookings", inquiry_id, exc_info=True)
        return {"created": 0}
    logger.info("Inquiry %s converted into %d bookings", inquiry_id, len(bookings))
    return {"created": len(bookings)}


# ============================================================================
# PERIODIC TASKS (run by Celery Beat)
# ============================================================================

@shared_task(name="inquiries.mark_expired_inquiries")
def mark_expired_inquiries() -> dict[str, int]:
    """Expire unanswered responses of inquiries past their expiry. Runs daily."""
    return {"expired": services.mark_expired_inquiries()}
