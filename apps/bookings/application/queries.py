"""
Booking Queries

Read-side use cases. Queries never change state and are called directly
by the views instead of going through the message bus.
"""

from uuid import UUID
import logging

from shared.domain.exceptions import ForbiddenError, NotFoundError
from apps.bookings.lookup import verify_entity_ownership
from apps.bookings.models import Booking
from apps.bookings.repositories import BookingFilters, Page, booking_repo

logger = logging.getLogger(__name__)


def get_booking_by_id(booking_id: UUID, requester_id: int) -> Booking:
    """
    Load a booking visible to the requester

    Visible to the customer and to the provider recorded on the booking.
    Rows created before providers were recorded fall back to the entity's
    current owner.
    """
    booking = booking_repo.find_by_id(booking_id)
    if booking is None:
        raise NotFoundError("Booking not found", code="BOOKING_NOT_FOUND")

    if booking.user_id == requester_id or booking.provider_user_id == requester_id:
        return booking

    if booking.provider_user_id is None and verify_entity_ownership(
        booking.entity_type, booking.entity_id, requester_id
    ):
        return booking

    logger.info("User %s denied access to booking %s", requester_id, booking_id)
    raise ForbiddenError("You do not have access to this booking")


def get_user_bookings(user_id: int, page: int, limit: int, filters: BookingFilters | None = None) -> Page:
    """Bookings the user made as a customer, newest first"""
    return booking_repo.find_by_user(user_id, page, limit, filters or BookingFilters())


def get_received_bookings(provider_user_id: int, page: int, limit: int, filters: BookingFilters | None = None) -> Page:
    """Bookings for entities the provider owns, newest first"""
    return booking_repo.find_received_by_provider(provider_user_id, page, limit, filters or BookingFilters())
