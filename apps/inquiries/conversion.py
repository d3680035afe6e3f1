"""Turn an accepted inquiry into confirmed bookings."""

from __future__ import annotations

import logging
from decimal import Decimal

from apps.bookings.application.command_handlers import CreateBookingCommand
from apps.bookings.lookup import lookup_entity
from apps.bookings.models import Booking
from shared.application.message_bus import message_bus

from .domain.entities import BOOKABLE_TARGET_TYPES
from .models import Inquiry

logger = logging.getLogger(__name__)


def convert_inquiry_to_bookings(inquiry: Inquiry) -> list[Booking]:
    """Create one confirmed booking per target of the inquiry.

    Accepting already confirms the deal, so the bookings skip the pending
    step. Company inquiries produce nothing. A failing target is logged and
    the remaining targets are still converted.
    """
    entity_type = BOOKABLE_TARGET_TYPES.get(inquiry.target_type)
    if entity_type is None:
        logger.info("Inquiry %s targets %s, nothing to book", inquiry.id, inquiry.target_type)
        return []

    bookings = []
    for target_id in inquiry.parsed_target_ids:
        try:
            entity = lookup_entity(entity_type, target_id)
            price = entity.price if entity else Decimal("0")
            currency = entity.currency if entity else "GEL"
            booking = message_bus.handle_command(
                CreateBookingCommand(
                    customer_id=inquiry.user_id,
                    entity_type=entity_type,
                    entity_id=target_id,
                    guests=1,
                    total_price=price,
                    currency=currency,
                    inquiry_id=inquiry.id,
                )
            )
            bookings.append(booking)
        except Exception:
            logger.error(
                "Failed to create booking for %s %s from inquiry %s",
                entity_type, target_id, inquiry.id, exc_info=True,
            )
    return bookings
