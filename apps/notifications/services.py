"""Notification services for sending emails and in-app notifications."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from django.conf import settings  # type: ignore
from django.core.mail import send_mail  # type: ignore
from django.template.loader import render_to_string  # type: ignore
from django.utils.html import escape, strip_tags  # type: ignore

from apps.bookings.domain.entities import EXPLORE_PATHS

from .models import Notification

if TYPE_CHECKING:  # pragma: no cover
    from apps.bookings.models import Booking
    from apps.inquiries.models import Inquiry, InquiryResponse
    from apps.users.models import CustomUser

logger = logging.getLogger(__name__)

SIGNATURE = "<p>Best regards,<br>The TripMarket team</p>"


# ============================================================================
# EMAIL NOTIFICATIONS
# ============================================================================

def send_email_notification(
    recipient_email: str,
    subject: str,
    template_name: str | None,
    context: dict,
    *,
    html_message: str | None = None,
) -> bool:
    """
    Send a single e-mail.

    Args:
        recipient_email: Recipient address
        subject: Subject line
        template_name: Django template to render (optional)
        context: Template context
        html_message: Ready HTML body (optional)

    Returns:
        bool: True when the e-mail was handed to the backend
    """
    try:
        if html_message:
            text_message = strip_tags(html_message)
        elif template_name:
            html_message = render_to_string(template_name, context)
            text_message = strip_tags(html_message)
        else:
            text_message = context.get("message", "")
            html_message = None

        send_mail(
            subject=subject,
            message=text_message,
            from_email=settings.DEFAULT_FROM_EMAIL,
            recipient_list=[recipient_email],
            html_message=html_message,
            fail_silently=False,
        )

        logger.info("Email sent successfully to %s: %s", recipient_email, subject)
        return True

    except Exception as e:
        logger.error("Failed to send email to %s: %s", recipient_email, e, exc_info=True)
        return False


# ============================================================================
# IN-APP NOTIFICATIONS
# ============================================================================

def create_in_app_notification(
    user: "CustomUser",
    title: str,
    message: str,
    *,
    notification_type: str,
    data: dict | None = None,
) -> bool:
    """
    Store an in-app notification.

    Returns:
        bool: True when the notification row was created
    """
    try:
        Notification.objects.create(
            user=user,
            type=notification_type,
            title=title,
            message=message,
            data=data or {},
        )

        logger.info("In-app notification %s created for user %s: %s", notification_type, user.pk, title)
        return True

    except Exception as e:
        logger.error("Failed to create in-app notification for user %s: %s", user.pk, e, exc_info=True)
        return False


def notify_user(
    user: "CustomUser",
    notification_type: str,
    title: str,
    message: str,
    *,
    data: dict | None = None,
    email_subject: str | None = None,
    email_html: str | None = None,
) -> dict[str, bool]:
    """
    Notify a user in-app and, when they allow it, by e-mail.

    Returns:
        dict: Delivery result per channel
    """
    results = {"in_app": False, "email": False}

    results["in_app"] = create_in_app_notification(
        user, title, message, notification_type=notification_type, data=data
    )

    if email_html and user.wants_email():
        results["email"] = send_email_notification(
            recipient_email=user.email,
            subject=email_subject or title,
            template_name=None,
            context={"message": message},
            html_message=email_html,
        )
    elif email_html:
        logger.debug("User %s has e-mail notifications disabled", user.pk)

    return results


# ============================================================================
# BOOKING NOTIFICATIONS
# ============================================================================

def review_url(booking: "Booking") -> str:
    """Public page of the booked entity, where the customer leaves a review."""
    return f"{settings.FRONTEND_URL}/explore/{EXPLORE_PATHS[booking.entity_type]}/{booking.entity_id}"


def _booking_data(booking: "Booking") -> dict:
    return {
        "booking_id": str(booking.id),
        "reference_number": booking.reference_number,
        "entity_type": booking.entity_type,
        "entity_id": str(booking.entity_id),
    }


def _booking_details_html(booking: "Booking") -> str:
    date_line = f"<li><strong>Date:</strong> {booking.date:%d.%m.%Y}</li>" if booking.date else ""
    return f"""
        <h3>Booking details:</h3>
        <ul>
            <li><strong>Reference:</strong> {booking.reference_number}</li>
            <li><strong>Booked:</strong> {escape(booking.entity_name or booking.entity_type.title())}</li>
            {date_line}
            <li><strong>Guests:</strong> {booking.guests}</li>
            <li><strong>Total:</strong> {booking.total_price} {booking.currency}</li>
        </ul>
    """


def _entity_label(booking: "Booking") -> str:
    return booking.entity_name or booking.entity_type.title()


def send_booking_request_notification(booking: "Booking", provider: "CustomUser") -> dict[str, bool]:
    """New booking request for the provider."""
    customer_name = booking.user.full_name
    subject = f"New booking request {booking.reference_number}"
    html_message = f"""
    <html>
    <body>
        <h2>Hello, {escape(provider.full_name)}!</h2>
        <p><strong>{escape(customer_name)}</strong> would like to book
        <strong>{escape(_entity_label(booking))}</strong>.</p>
        {_booking_details_html(booking)}
        {f"<p><strong>Notes:</strong> {escape(booking.notes)}</p>" if booking.notes else ""}
        {f"<p><strong>Contact phone:</strong> {escape(booking.contact_phone)}</p>" if booking.contact_phone else ""}
        <p>Please confirm or decline the request in your dashboard.</p>
        {SIGNATURE}
    </body>
    </html>
    """
    return notify_user(
        provider,
        Notification.Type.BOOKING_REQUEST,
        "New booking request",
        f"{customer_name} requested to book {_entity_label(booking)}",
        data=_booking_data(booking),
        email_subject=subject,
        email_html=html_message,
    )


def send_booking_confirmed_notification(booking: "Booking") -> dict[str, bool]:
    """Booking confirmed, either by the provider or by accepting an inquiry."""
    customer = booking.user
    subject = f"Booking {booking.reference_number} confirmed!"
    html_message = f"""
    <html>
    <body>
        <h2>Hello, {escape(customer.full_name)}!</h2>
        <p>Your booking for <strong>{escape(_entity_label(booking))}</strong> has been confirmed.</p>
        {_booking_details_html(booking)}
        {f"<p><strong>Notes from the provider:</strong> {escape(booking.provider_notes)}</p>" if booking.provider_notes else ""}
        {SIGNATURE}
    </body>
    </html>
    """
    return notify_user(
        customer,
        Notification.Type.BOOKING_CONFIRMED,
        "Booking confirmed",
        f"Your booking for {_entity_label(booking)} has been confirmed",
        data=_booking_data(booking),
        email_subject=subject,
        email_html=html_message,
    )


def send_booking_declined_notification(booking: "Booking") -> dict[str, bool]:
    customer = booking.user
    subject = f"Booking {booking.reference_number} declined"
    html_message = f"""
    <html>
    <body>
        <h2>Hello, {escape(customer.full_name)}!</h2>
        <p>Unfortunately your booking for <strong>{escape(_entity_label(booking))}</strong> was declined.</p>
        {f"<p><strong>Reason:</strong> {escape(booking.declined_reason)}</p>" if booking.declined_reason else ""}
        <p>You can look for other dates or providers at any time.</p>
        {SIGNATURE}
    </body>
    </html>
    """
    message = f"Your booking for {_entity_label(booking)} was declined"
    if booking.declined_reason:
        message = f"{message}: {booking.declined_reason}"
    return notify_user(
        customer,
        Notification.Type.BOOKING_DECLINED,
        "Booking declined",
        message,
        data=_booking_data(booking),
        email_subject=subject,
        email_html=html_message,
    )


def send_booking_cancelled_notification(booking: "Booking", provider: "CustomUser") -> dict[str, bool]:
    """The customer cancelled; tell the provider."""
    customer_name = booking.user.full_name
    subject = f"Booking {booking.reference_number} cancelled"
    html_message = f"""
    <html>
    <body>
        <h2>Hello, {escape(provider.full_name)}!</h2>
        <p><strong>{escape(customer_name)}</strong> cancelled the booking for
        <strong>{escape(_entity_label(booking))}</strong>.</p>
        {_booking_details_html(booking)}
        {SIGNATURE}
    </body>
    </html>
    """
    return notify_user(
        provider,
        Notification.Type.BOOKING_CANCELLED,
        "Booking cancelled",
        f"{customer_name} cancelled the booking for {_entity_label(booking)}",
        data=_booking_data(booking),
        email_subject=subject,
        email_html=html_message,
    )


def send_booking_completed_notification(booking: "Booking") -> dict[str, bool]:
    """Booking completed; invite the customer to leave a review."""
    customer = booking.user
    link = review_url(booking)
    subject = f"How was {_entity_label(booking)}?"
    html_message = f"""
    <html>
    <body>
        <h2>Hello, {escape(customer.full_name)}!</h2>
        <p>Your booking {booking.reference_number} for
        <strong>{escape(_entity_label(booking))}</strong> is completed.</p>
        <p>We would love to hear how it went: <a href="{link}">leave a review</a>.</p>
        {SIGNATURE}
    </body>
    </html>
    """
    data = _booking_data(booking)
    data["review_url"] = link
    return notify_user(
        customer,
        Notification.Type.BOOKING_COMPLETED,
        "Booking completed",
        f"Your booking for {_entity_label(booking)} is completed. Leave a review!",
        data=data,
        email_subject=subject,
        email_html=html_message,
    )


# ============================================================================
# INQUIRY NOTIFICATIONS
# ============================================================================

def send_inquiry_received_notification(inquiry: "Inquiry", recipient: "CustomUser") -> dict[str, bool]:
    sender_name = inquiry.user.full_name
    html_message = f"""
    <html>
    <body>
        <h2>Hello, {escape(recipient.full_name)}!</h2>
        <p><strong>{escape(sender_name)}</strong> sent you an inquiry:</p>
        <p><strong>{escape(inquiry.subject)}</strong></p>
        <p>{escape(inquiry.message)}</p>
        <p>Reply from your dashboard before {inquiry.expires_at:%d.%m.%Y}.</p>
        {SIGNATURE}
    </body>
    </html>
    """
    return notify_user(
        recipient,
        Notification.Type.INQUIRY_RECEIVED,
        "New inquiry",
        f"{sender_name} sent you an inquiry",
        data={"inquiry_id": str(inquiry.id)},
        email_subject=f"New inquiry: {inquiry.subject}",
        email_html=html_message,
    )


RESPONSE_VERBS = {
    "RESPONDED": "responded to",
    "ACCEPTED": "accepted",
    "DECLINED": "declined",
}


def send_inquiry_response_notification(response: "InquiryResponse") -> dict[str, bool]:
    """Tell the inquiry sender that a recipient answered."""
    inquiry = response.inquiry
    sender = inquiry.user
    responder_name = response.recipient.full_name
    verb = RESPONSE_VERBS.get(response.status, "responded to")
    html_message = f"""
    <html>
    <body>
        <h2>Hello, {escape(sender.full_name)}!</h2>
        <p><strong>{escape(responder_name)}</strong> {verb} your inquiry
        <strong>{escape(inquiry.subject)}</strong>.</p>
        {f"<p>{escape(response.message)}</p>" if response.message else ""}
        {SIGNATURE}
    </body>
    </html>
    """
    return notify_user(
        sender,
        Notification.Type.INQUIRY_RESPONSE,
        "Inquiry response",
        f"{responder_name} {verb} your inquiry",
        data={"inquiry_id": str(inquiry.id), "response_id": str(response.id), "status": response.status},
        email_subject=f"Response to your inquiry: {inquiry.subject}",
        email_html=html_message,
    )
