"""
Booking Domain Events

Events that represent things that have happened in the booking domain.
These are published after successful transaction commits and drive the
customer and provider notifications.
"""

from dataclasses import dataclass
from uuid import UUID


from shared.domain.base import DomainEvent


@dataclass(kw_only=True)
class BookingEvent(DomainEvent):
    """Common payload of every booking event"""
    booking_id: UUID
    customer_id: int
    provider_user_id: int | None = None


@dataclass(kw_only=True)
class BookingRequested(BookingEvent):
    """
    Event: A customer requested a booking (-> PENDING)

    Triggers:
    - Notify the provider (in-app and e-mail)
    """


@dataclass(kw_only=True)
class BookingCreated(BookingEvent):
    """
    Event: A booking was created already confirmed (inquiry accepted)

    Triggers:
    - Notify the customer (in-app and e-mail)
    """
    inquiry_id: UUID | None = None


@dataclass(kw_only=True)
class BookingConfirmed(BookingEvent):
    """
    Event: Provider confirmed the booking (PENDING -> CONFIRMED)

    Triggers:
    - Notify the customer
    """
    provider_notes: str | None = None


@dataclass(kw_only=True)
class BookingDeclined(BookingEvent):
    """
    Event: Provider declined the booking or it expired (PENDING -> DECLINED)

    Triggers:
    - Notify the customer
    """
    declined_reason: str = ''


@dataclass(kw_only=True)
class BookingCancelled(BookingEvent):
    """
    Event: Customer cancelled the booking

    Triggers:
    - Notify the provider, when one is recorded on the booking
    """


@dataclass(kw_only=True)
class BookingCompleted(BookingEvent):
    """
    Event: Provider marked the booking as completed

    Triggers:
    - Notify the customer with a link to leave a review
    """
