"""
Tour Availability Rules

Pure date and capacity rules for tours. Nothing here touches the database:
the service layer loads the tour and the booked guest count and asks these
functions for a verdict.
"""

from dataclasses import dataclass
from datetime import date
import json
import logging

from shared.domain.base import ValueObject

logger = logging.getLogger(__name__)

SATURDAY = 5


@dataclass(frozen=True)
class AvailabilityResult(ValueObject):
    available: bool
    remaining_spots: int
    reason: str | None = None

    def to_dict(self) -> dict:
        data = {'available': self.available, 'remaining_spots': self.remaining_spots}
        if self.reason:
            data['reason'] = self.reason
        return data


def parse_available_dates(raw: str | None) -> list[str]:
    """
    Parse the stored JSON array of ``YYYY-MM-DD`` strings

    Bad stored data means "no dates", never an error.
    """
    if not raw:
        return []
    try:
        parsed = json.loads(raw)
    except (TypeError, ValueError):
        logger.warning("Malformed available_dates value: %r", raw)
        return []
    if not isinstance(parsed, list):
        return []
    return [str(value) for value in parsed]


def date_rule_violation(availability_type: str, available_dates: str | None, on: date) -> str | None:
    """
    Check a date against the tour's availability type

    Returns the reason the date is not bookable, or None when it is.
    Unknown types are treated like BY_REQUEST.
    """
    if availability_type == 'WEEKDAYS':
        if on.weekday() >= SATURDAY:
            return "This tour is only available on weekdays"
    elif availability_type == 'WEEKENDS':
        if on.weekday() < SATURDAY:
            return "This tour is only available on weekends"
    elif availability_type == 'SPECIFIC_DATES':
        if on.isoformat() not in parse_available_dates(available_dates):
            return "This tour is not available on the selected date"
    return None


def capacity_verdict(max_people: int | None, booked_guests: int, guests: int, unlimited: int) -> AvailabilityResult:
    """Compare requested guests with what is left of the tour's capacity"""
    if max_people is None:
        return AvailabilityResult(available=True, remaining_spots=unlimited)

    remaining = max_people - booked_guests
    if guests > remaining:
        if remaining <= 0:
            reason = "No spots available for this date"
        else:
            reason = f"Only {remaining} spot(s) remaining for this date"
        return AvailabilityResult(available=False, remaining_spots=remaining, reason=reason)

    return AvailabilityResult(available=True, remaining_spots=remaining)
