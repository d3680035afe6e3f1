"""Domain services for booking workflows."""

from __future__ import annotations

import logging
from datetime import date

from django.conf import settings  # type: ignore
from django.core.exceptions import ValidationError  # type: ignore

from apps.catalog.models import Tour
from shared.domain.exceptions import NotFoundError

from .domain.availability import AvailabilityResult, capacity_verdict, date_rule_violation
from .repositories import booking_repo

logger = logging.getLogger(__name__)


def _load_tour(tour_id) -> Tour:  # type: ignore
    try:
        return Tour.objects.get(pk=tour_id)
    except (Tour.DoesNotExist, ValidationError, ValueError):
        raise NotFoundError("Tour not found", code="TOUR_NOT_FOUND")


def check_tour_availability(tour_id, on: date, guests: int) -> AvailabilityResult:  # type: ignore
    """Can ``guests`` more people join the tour on the given date?

    Pure read: the verdict is computed from the tour's flags, its date rule
    and the guests already holding a spot that day.
    """
    tour = _load_tour(tour_id)

    if not tour.is_active:
        return AvailabilityResult(available=False, remaining_spots=0, reason="Tour is no longer available")

    violation = date_rule_violation(tour.availability_type, tour.available_dates, on)
    if violation:
        return AvailabilityResult(available=False, remaining_spots=0, reason=violation)

    booked = 0 if tour.max_people is None else booking_repo.count_booked_guests(tour.id, on)
    result = capacity_verdict(tour.max_people, booked, guests, settings.BOOKING_UNLIMITED_CAPACITY)
    logger.debug(
        "Availability for tour %s on %s (%d guests): %s",
        tour.id, on, guests, result,
    )
    return result
