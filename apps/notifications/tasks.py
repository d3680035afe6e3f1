"""Celery tasks delivering notifications."""

from __future__ import annotations

import logging

from celery import shared_task  # type: ignore
from django.contrib.auth import get_user_model  # type: ignore

from . import services

logger = logging.getLogger(__name__)

CUSTOMER_BOOKING_NOTIFICATIONS = {
    "confirmed": services.send_booking_confirmed_notification,
    "declined": services.send_booking_declined_notification,
    "completed": services.send_booking_completed_notification,
}

PROVIDER_BOOKING_NOTIFICATIONS = {
    "requested": services.send_booking_request_notification,
    "cancelled": services.send_booking_cancelled_notification,
}


@shared_task(name="notifications.send_booking_notification")
def send_booking_notification(booking_id: str, kind: str, recipient_id: int | None = None) -> dict[str, bool]:
    """
    Deliver one booking notification.

    Customer notifications go to the booking's customer; provider
    notifications go to ``recipient_id``. Failures are logged and never
    raised: the booking change is already committed.
    """
    from apps.bookings.models import Booking

    try:
        booking = Booking.objects.select_related("user").get(pk=booking_id)
        if kind in CUSTOMER_BOOKING_NOTIFICATIONS:
            return CUSTOMER_BOOKING_NOTIFICATIONS[kind](booking)
        if kind in PROVIDER_BOOKING_NOTIFICATIONS:
            if recipient_id is None:
                logger.warning("No provider to notify about booking %s (%s)", booking_id, kind)
                return {}
            provider = get_user_model().objects.get(pk=recipient_id)
            return PROVIDER_BOOKING_NOTIFICATIONS[kind](booking, provider)
        logger.warning("Unknown booking notification kind %s for booking %s", kind, booking_id)
    except Exception:
        logger.error("Failed to send %s notification for booking %s", kind, booking_id, exc_info=True)
    return {}


@shared_task(name="notifications.send_inquiry_received_notification")
def send_inquiry_received_notification(inquiry_id: str, recipient_id: int) -> dict[str, bool]:
    from apps.inquiries.models import Inquiry

    try:
        inquiry = Inquiry.objects.select_related("user").get(pk=inquiry_id)
        recipient = get_user_model().objects.get(pk=recipient_id)
        return services.send_inquiry_received_notification(inquiry, recipient)
    except Exception:
        logger.error(
            "Failed to notify user %s about inquiry %s", recipient_id, inquiry_id, exc_info=True
        )
    return {}


@shared_task(name="notifications.send_inquiry_response_notification")
def send_inquiry_response_notification(response_id: str) -> dict[str, bool]:
    from apps.inquiries.models import InquiryResponse

    try:
        response = InquiryResponse.objects.select_related("inquiry__user", "recipient").get(pk=response_id)
        return services.send_inquiry_response_notification(response)
    except Exception:
        logger.error("Failed to send inquiry response notification %s", response_id, exc_info=True)
    return {}
