"""
Notification Event Handlers

Subscribe to booking and inquiry events and hand the delivery to Celery.
Handlers run after the triggering transaction commits; a failing dispatch
is logged by the message bus and never reaches the caller.
"""

from __future__ import annotations

import logging

from shared.application.message_bus import message_bus
from apps.bookings.domain.events import (
    BookingCancelled,
    BookingCompleted,
    BookingConfirmed,
    BookingCreated,
    BookingDeclined,
    BookingRequested,
)
from apps.inquiries.domain.events import InquiryCreated, InquiryResponded

from .tasks import (
    send_booking_notification,
    send_inquiry_received_notification,
    send_inquiry_response_notification,
)

logger = logging.getLogger(__name__)


@message_bus.subscribe(BookingRequested)
def notify_provider_of_request(event: BookingRequested):
    send_booking_notification.delay(str(event.booking_id), "requested", event.provider_user_id)


@message_bus.subscribe(BookingConfirmed, BookingCreated)
def notify_customer_of_confirmation(event):  # type: ignore
    send_booking_notification.delay(str(event.booking_id), "confirmed")


@message_bus.subscribe(BookingDeclined)
def notify_customer_of_decline(event: BookingDeclined):
    send_booking_notification.delay(str(event.booking_id), "declined")


@message_bus.subscribe(BookingCancelled)
def notify_provider_of_cancellation(event: BookingCancelled):
    if event.provider_user_id is None:
        logger.info("Booking %s has no recorded provider, skipping cancellation notice", event.booking_id)
        return
    send_booking_notification.delay(str(event.booking_id), "cancelled", event.provider_user_id)


@message_bus.subscribe(BookingCompleted)
def notify_customer_of_completion(event: BookingCompleted):
    send_booking_notification.delay(str(event.booking_id), "completed")


@message_bus.subscribe(InquiryCreated)
def notify_inquiry_recipients(event: InquiryCreated):
    for recipient_id in event.recipient_ids:
        send_inquiry_received_notification.delay(str(event.inquiry_id), recipient_id)


@message_bus.subscribe(InquiryResponded)
def notify_inquiry_sender(event: InquiryResponded):
    send_inquiry_response_notification.delay(str(event.response_id))
