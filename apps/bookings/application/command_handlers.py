"""
Booking Command Handlers

These are the use cases for the booking domain.
They orchestrate domain operations within transactions.

Commands:
- CreateDirectBookingCommand: Customer requests a booking (-> PENDING)
- CreateBookingCommand: Create an already confirmed booking (inquiry accepted)
- ConfirmBookingCommand: Provider confirms a pending booking
- DeclineBookingCommand: Provider declines a pending booking
- CancelBookingCommand: Customer cancels a booking
- CompleteBookingCommand: Provider marks a booking as completed

Side effects (notifications, e-mails) are driven by the domain events the
handlers collect; they run after commit and never affect the result.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from uuid import UUID
import logging

from shared.application.uow import DjangoUnitOfWork
from shared.domain.exceptions import BadRequestError, ForbiddenError, NotFoundError
from apps.bookings.domain.entities import BookingStatus, EntityType, entity_not_found_code
from apps.bookings.domain.events import BookingCreated, BookingRequested
from apps.bookings.lookup import lookup_entity, lookup_entity_info, verify_entity_ownership
from apps.bookings.models import Booking
from apps.bookings.repositories import BookingRepository
from apps.bookings.services import check_tour_availability

logger = logging.getLogger(__name__)


# ===== Commands =====

@dataclass
class CreateDirectBookingCommand:
    """
    Command to request a booking directly from an entity page

    This is the primary entry point for customers.
    """
    customer_id: int
    entity_type: str
    entity_id: UUID
    date: date | None = None
    guests: int = 1
    notes: str | None = None
    contact_phone: str | None = None


@dataclass
class CreateBookingCommand:
    """Command to store a booking that needs no provider confirmation"""
    customer_id: int
    entity_type: str
    entity_id: UUID
    total_price: Decimal
    currency: str = 'GEL'
    guests: int = 1
    date: date | None = None
    notes: str | None = None
    inquiry_id: UUID | None = None


@dataclass
class ConfirmBookingCommand:
    booking_id: UUID
    provider_id: int
    provider_notes: str | None = None


@dataclass
class DeclineBookingCommand:
    booking_id: UUID
    provider_id: int
    declined_reason: str


@dataclass
class CancelBookingCommand:
    """Command to cancel a booking; only the customer may do this"""
    booking_id: UUID
    requester_id: int


@dataclass
class CompleteBookingCommand:
    booking_id: UUID
    provider_id: int


# ===== Command Handlers =====

def _load_booking(booking_repo: BookingRepository, booking_id: UUID) -> Booking:
    booking = booking_repo.find_by_id(booking_id)
    if booking is None:
        raise NotFoundError("Booking not found", code="BOOKING_NOT_FOUND")
    return booking


def _ensure_entity_owner(booking: Booking, provider_id: int):
    if not verify_entity_ownership(booking.entity_type, booking.entity_id, provider_id):
        raise ForbiddenError("You do not own this booking's entity")


class CreateDirectBookingHandler:
    """
    Handler for CreateDirectBooking command

    Checks, in order:
    1. The entity exists
    2. The entity is active
    3. The customer is not its owner
    4. For tours, the date rule and remaining capacity

    The availability check and the insert are not serialized; two requests
    for the last spots may both succeed.
    """

    def __init__(self, booking_repo: BookingRepository):
        self.booking_repo = booking_repo

    def handle(self, command: CreateDirectBookingCommand) -> Booking:
        logger.info(
            "Creating direct booking for %s %s by user %s",
            command.entity_type, command.entity_id, command.customer_id,
        )

        entity = lookup_entity(command.entity_type, command.entity_id)
        if entity is None:
            raise NotFoundError(
                f"{command.entity_type.title()} not found",
                code=entity_not_found_code(command.entity_type),
            )

        if not entity.is_active:
            raise BadRequestError("This listing is not available for booking", code="ENTITY_INACTIVE")

        if entity.owner_id == command.customer_id:
            raise BadRequestError("You cannot book your own listing", code="SELF_BOOKING")

        if command.entity_type == EntityType.TOUR:
            if command.date is None:
                raise BadRequestError("A date is required to book a tour", code="DATE_REQUIRED")
            availability = check_tour_availability(command.entity_id, command.date, command.guests)
            if not availability.available:
                raise BadRequestError(
                    availability.reason or "Not enough availability",
                    code="INSUFFICIENT_AVAILABILITY",
                )
            total = entity.total_for(command.guests)
        else:
            total = entity.total_for(0)

        snapshot = lookup_entity_info(command.entity_type, command.entity_id)

        with DjangoUnitOfWork() as uow:
            booking = self.booking_repo.create_direct_booking(
                user_id=command.customer_id,
                entity_type=command.entity_type,
                entity_id=command.entity_id,
                date=command.date,
                guests=command.guests,
                total_price=total.quantized(),
                currency=total.currency,
                notes=command.notes,
                contact_phone=command.contact_phone,
                entity_name=snapshot.entity_name,
                entity_image=snapshot.entity_image,
                provider_user_id=snapshot.provider_user_id,
                provider_name=snapshot.provider_name,
            )
            booking.add_event(BookingRequested(
                aggregate_id=booking.id,
                booking_id=booking.id,
                customer_id=booking.user_id,
                provider_user_id=booking.provider_user_id or entity.owner_id,
            ))
            uow.collect_events(booking)

        logger.info(
            "Booking %s (%s) requested by user %s, total %s %s",
            booking.id, booking.reference_number, command.customer_id,
            booking.total_price, booking.currency,
        )
        return booking


class CreateBookingHandler:
    """Handler for the simple creation path used by inquiry conversion"""

    def __init__(self, booking_repo: BookingRepository):
        self.booking_repo = booking_repo

    def handle(self, command: CreateBookingCommand) -> Booking:
        snapshot = lookup_entity_info(command.entity_type, command.entity_id)

        with DjangoUnitOfWork() as uow:
            booking = self.booking_repo.create(
                user_id=command.customer_id,
                entity_type=command.entity_type,
                entity_id=command.entity_id,
                inquiry_id=command.inquiry_id,
                date=command.date,
                guests=command.guests,
                total_price=command.total_price,
                currency=command.currency or 'GEL',
                notes=command.notes,
                status=BookingStatus.CONFIRMED,
                entity_name=snapshot.entity_name,
                entity_image=snapshot.entity_image,
                provider_user_id=snapshot.provider_user_id,
                provider_name=snapshot.provider_name,
            )
            booking.add_event(BookingCreated(
                aggregate_id=booking.id,
                booking_id=booking.id,
                customer_id=booking.user_id,
                provider_user_id=booking.provider_user_id,
                inquiry_id=command.inquiry_id,
            ))
            uow.collect_events(booking)

        logger.info(
            "Booking %s created confirmed for user %s (inquiry %s)",
            booking.id, command.customer_id, command.inquiry_id,
        )
        return booking


class ConfirmBookingHandler:
    """Handler for the provider confirming a pending booking"""

    def __init__(self, booking_repo: BookingRepository):
        self.booking_repo = booking_repo

    def handle(self, command: ConfirmBookingCommand) -> Booking:
        booking = _load_booking(self.booking_repo, command.booking_id)
        _ensure_entity_owner(booking, command.provider_id)

        with DjangoUnitOfWork() as uow:
            booking.confirm(command.provider_notes)
            self.booking_repo.confirm_booking(booking)
            uow.collect_events(booking)

        logger.info("Booking %s confirmed by provider %s", booking.id, command.provider_id)
        return booking


class DeclineBookingHandler:
    """Handler for the provider declining a pending booking"""

    def __init__(self, booking_repo: BookingRepository):
        self.booking_repo = booking_repo

    def handle(self, command: DeclineBookingCommand) -> Booking:
        booking = _load_booking(self.booking_repo, command.booking_id)
        _ensure_entity_owner(booking, command.provider_id)

        with DjangoUnitOfWork() as uow:
            booking.decline(command.declined_reason)
            self.booking_repo.decline_booking(booking)
            uow.collect_events(booking)

        logger.info("Booking %s declined by provider %s", booking.id, command.provider_id)
        return booking


class CancelBookingHandler:
    """Handler for the customer cancelling their booking"""

    def __init__(self, booking_repo: BookingRepository):
        self.booking_repo = booking_repo

    def handle(self, command: CancelBookingCommand) -> Booking:
        booking = _load_booking(self.booking_repo, command.booking_id)
        if booking.user_id != command.requester_id:
            raise ForbiddenError("You can only cancel your own bookings")

        with DjangoUnitOfWork() as uow:
            booking.cancel()
            self.booking_repo.update_status(booking)
            uow.collect_events(booking)

        logger.info("Booking %s cancelled by user %s", booking.id, command.requester_id)
        return booking


class CompleteBookingHandler:
    """Handler for the provider marking a booking as completed"""

    def __init__(self, booking_repo: BookingRepository):
        self.booking_repo = booking_repo

    def handle(self, command: CompleteBookingCommand) -> Booking:
        booking = _load_booking(self.booking_repo, command.booking_id)
        _ensure_entity_owner(booking, command.provider_id)

        with DjangoUnitOfWork() as uow:
            booking.complete()
            self.booking_repo.complete_booking(booking)
            uow.collect_events(booking)

        logger.info("Booking %s completed by provider %s", booking.id, command.provider_id)
        return booking


COMMAND_HANDLERS = {
    CreateDirectBookingCommand: CreateDirectBookingHandler,
    CreateBookingCommand: CreateBookingHandler,
    ConfirmBookingCommand: ConfirmBookingHandler,
    DeclineBookingCommand: DeclineBookingHandler,
    CancelBookingCommand: CancelBookingHandler,
    CompleteBookingCommand: CompleteBookingHandler,
}
