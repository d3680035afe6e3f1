"""
Booking Domain Entities

Core business concepts of the booking domain:
- BookingStatus: FSM states for the booking lifecycle
- EntityType: which catalog table a booking points at
- BookableEntity / EntitySnapshot: what the entity lookup resolves
- Transition guards raising stable error codes
- Reference number generation
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
import secrets
import string

from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from shared.domain.base import ValueObject
from shared.domain.exceptions import BadRequestError
from shared.domain.value_objects import Money

REFERENCE_ALPHABET = string.digits + string.ascii_uppercase
REFERENCE_SUFFIX_LENGTH = 4


class BookingStatus(models.TextChoices):
    """
    Booking Status Finite State Machine

    State transitions:
    - PENDING -> CONFIRMED (provider accepted)
    - PENDING -> DECLINED (provider refused or request expired)
    - CONFIRMED -> COMPLETED (service delivered)
    - CONFIRMED -> CANCELLED (customer cancelled)

    Bookings created from an accepted inquiry start at CONFIRMED.
    """
    PENDING = 'PENDING', _('Pending')
    CONFIRMED = 'CONFIRMED', _('Confirmed')
    COMPLETED = 'COMPLETED', _('Completed')
    CANCELLED = 'CANCELLED', _('Cancelled')
    DECLINED = 'DECLINED', _('Declined')


# Statuses whose guests occupy tour capacity
CAPACITY_HOLDING_STATUSES = (BookingStatus.PENDING, BookingStatus.CONFIRMED)


class EntityType(models.TextChoices):
    TOUR = 'TOUR', _('Tour')
    GUIDE = 'GUIDE', _('Guide')
    DRIVER = 'DRIVER', _('Driver')


# Path segment of the public entity pages, used in review links
EXPLORE_PATHS = {
    EntityType.TOUR: 'tours',
    EntityType.GUIDE: 'guides',
    EntityType.DRIVER: 'drivers',
}


@dataclass(frozen=True)
class BookableEntity(ValueObject):
    """Ownership, activity and pricing of a bookable entity"""
    owner_id: int
    is_active: bool
    price: Decimal
    currency: str = 'GEL'

    def total_for(self, guests: int) -> Money:
        return Money(self.price, self.currency or 'GEL') * guests


@dataclass(frozen=True)
class EntitySnapshot(ValueObject):
    """Display fields copied onto a booking when it is created"""
    entity_name: str | None = None
    entity_image: str | None = None
    provider_user_id: int | None = None
    provider_name: str | None = None


def entity_not_found_code(entity_type: str) -> str:
    return f"{entity_type}_NOT_FOUND"


def ensure_can_respond(status: str):
    """Confirm and decline are only valid for pending bookings"""
    if status != BookingStatus.PENDING:
        raise BadRequestError(
            f"Cannot change booking with status {status}",
            code="INVALID_BOOKING_STATUS",
        )


def ensure_can_cancel(status: str):
    if status == BookingStatus.CANCELLED:
        raise BadRequestError("Booking is already cancelled", code="BOOKING_ALREADY_CANCELLED")
    if status == BookingStatus.COMPLETED:
        raise BadRequestError("Cannot cancel a completed booking", code="BOOKING_COMPLETED")
    if status == BookingStatus.DECLINED:
        raise BadRequestError("Cannot cancel a declined booking", code="BOOKING_DECLINED")


def ensure_can_complete(status: str):
    if status == BookingStatus.COMPLETED:
        raise BadRequestError("Booking is already completed", code="BOOKING_ALREADY_COMPLETED")
    if status == BookingStatus.CANCELLED:
        raise BadRequestError("Cannot complete a cancelled booking", code="BOOKING_CANCELLED")


def generate_reference_number(today: date | None = None) -> str:
    """Human-readable booking reference: BK-YYMMDD-XXXX"""
    today = today or date.today()
    suffix = ''.join(secrets.choice(REFERENCE_ALPHABET) for _ in range(REFERENCE_SUFFIX_LENGTH))
    return f"BK-{today:%y%m%d}-{suffix}"
