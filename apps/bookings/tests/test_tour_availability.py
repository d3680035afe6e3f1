"""Tour availability through the service and the availability endpoint."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from apps.bookings.application.command_handlers import (
    CancelBookingCommand,
    CompleteBookingCommand,
    DeclineBookingCommand,
)
from apps.bookings.models import Booking
from apps.bookings.services import check_tour_availability
from apps.catalog.models import Tour
from apps.catalog.tests.factories import make_tour, make_user
from shared.application.message_bus import message_bus
from shared.domain.exceptions import NotFoundError

TOUR_DATE = date(2030, 6, 12)
SATURDAY = date(2030, 6, 15)


def _book(tour: Tour, customer, guests: int, status: str = Booking.Status.CONFIRMED, on: date = TOUR_DATE) -> Booking:
    return Booking.objects.create(
        user=customer,
        entity_type=Booking.EntityType.TOUR,
        entity_id=tour.id,
        date=on,
        guests=guests,
        total_price=tour.price * guests,
        status=status,
    )


@pytest.fixture
def owner():
    return make_user("Giorgi", "Kapanadze")


@pytest.fixture
def customer():
    return make_user("Nino", "Beridze")


@pytest.fixture
def tour(owner):
    return make_tour(owner, max_people=10)


@pytest.mark.django_db
def test_remaining_spots_after_existing_bookings(tour, customer) -> None:
    _book(tour, customer, guests=7)

    fits = check_tour_availability(tour.id, TOUR_DATE, 3)
    too_many = check_tour_availability(tour.id, TOUR_DATE, 4)

    assert fits.available is True
    assert fits.remaining_spots == 3
    assert too_many.available is False
    assert too_many.remaining_spots == 3
    assert too_many.reason == "Only 3 spot(s) remaining for this date"


@pytest.mark.django_db
def test_pending_bookings_hold_capacity(tour, customer) -> None:
    _book(tour, customer, guests=4, status=Booking.Status.PENDING)
    _book(tour, customer, guests=6)

    result = check_tour_availability(tour.id, TOUR_DATE, 1)

    assert result.available is False
    assert result.remaining_spots == 0
    assert result.reason == "No spots available for this date"


@pytest.mark.django_db
def test_other_dates_do_not_count(tour, customer) -> None:
    _book(tour, customer, guests=10, on=date(2030, 6, 13))

    result = check_tour_availability(tour.id, TOUR_DATE, 10)

    assert result.available is True
    assert result.remaining_spots == 10


@pytest.mark.django_db
def test_cancelling_frees_capacity(tour, customer) -> None:
    booking = _book(tour, customer, guests=8)
    assert check_tour_availability(tour.id, TOUR_DATE, 1).remaining_spots == 2

    message_bus.handle_command(CancelBookingCommand(booking_id=booking.id, requester_id=customer.id))

    assert check_tour_availability(tour.id, TOUR_DATE, 1).remaining_spots == 10


@pytest.mark.django_db
def test_declined_and_completed_bookings_free_capacity(tour, owner, customer) -> None:
    declined = _book(tour, customer, guests=3, status=Booking.Status.PENDING)
    completed = _book(tour, customer, guests=5)
    assert check_tour_availability(tour.id, TOUR_DATE, 1).remaining_spots == 2

    message_bus.handle_command(
        DeclineBookingCommand(booking_id=declined.id, provider_id=owner.id, declined_reason="Fully booked")
    )
    assert check_tour_availability(tour.id, TOUR_DATE, 1).remaining_spots == 5

    message_bus.handle_command(CompleteBookingCommand(booking_id=completed.id, provider_id=owner.id))
    assert check_tour_availability(tour.id, TOUR_DATE, 1).remaining_spots == 10


@pytest.mark.django_db
def test_inactive_tour_unavailable(tour) -> None:
    tour.is_active = False
    tour.save()

    result = check_tour_availability(tour.id, TOUR_DATE, 1)

    assert result.to_dict() == {
        "available": False,
        "remaining_spots": 0,
        "reason": "Tour is no longer available",
    }


@pytest.mark.django_db
@pytest.mark.parametrize(
    ("availability_type", "on", "reason"),
    [
        (Tour.AvailabilityType.WEEKDAYS, SATURDAY, "This tour is only available on weekdays"),
        (Tour.AvailabilityType.WEEKENDS, TOUR_DATE, "This tour is only available on weekends"),
    ],
)
def test_date_rules_applied(tour, availability_type, on, reason) -> None:
    tour.availability_type = availability_type
    tour.save()

    result = check_tour_availability(tour.id, on, 1)

    assert result.available is False
    assert result.remaining_spots == 0
    assert result.reason == reason


@pytest.mark.django_db
def test_specific_dates(owner) -> None:
    tour = make_tour(
        owner,
        availability_type=Tour.AvailabilityType.SPECIFIC_DATES,
        available_dates=["2030-06-12", "2030-06-20"],
        max_people=5,
    )

    assert check_tour_availability(tour.id, TOUR_DATE, 2).available is True
    missing = check_tour_availability(tour.id, date(2030, 6, 14), 2)
    assert missing.available is False
    assert missing.reason == "This tour is not available on the selected date"


@pytest.mark.django_db
def test_malformed_available_dates_mean_no_dates(owner) -> None:
    tour = make_tour(
        owner,
        availability_type=Tour.AvailabilityType.SPECIFIC_DATES,
        available_dates="not json",
    )

    result = check_tour_availability(tour.id, TOUR_DATE, 1)

    assert result.available is False
    assert result.reason == "This tour is not available on the selected date"


@pytest.mark.django_db
def test_unlimited_capacity(owner, customer) -> None:
    tour = make_tour(owner, max_people=None, price=Decimal("50.00"))
    _book(tour, customer, guests=40)

    result = check_tour_availability(tour.id, TOUR_DATE, 25)

    assert result.available is True
    assert result.remaining_spots == 999


@pytest.mark.django_db
def test_unknown_tour() -> None:
    with pytest.raises(NotFoundError) as excinfo:
        check_tour_availability("00000000-0000-0000-0000-000000000000", TOUR_DATE, 1)

    assert excinfo.value.code == "TOUR_NOT_FOUND"


@pytest.mark.django_db
def test_availability_endpoint(tour, customer) -> None:
    _book(tour, customer, guests=7)
    client = APIClient()
    client.force_authenticate(customer)
    url = reverse("tour-availability", args=[tour.id])

    ok = client.get(url, {"date": "2030-06-12", "guests": 3})
    full = client.get(url, {"date": "2030-06-12", "guests": 4})
    missing_date = client.get(url, {"guests": 1})

    assert ok.status_code == status.HTTP_200_OK
    assert ok.data == {"available": True, "remaining_spots": 3}
    assert full.data["available"] is False
    assert full.data["reason"] == "Only 3 spot(s) remaining for this date"
    assert missing_date.status_code == status.HTTP_400_BAD_REQUEST


@pytest.mark.django_db
def test_availability_endpoint_unknown_tour(customer) -> None:
    client = APIClient()
    client.force_authenticate(customer)

    response = client.get(
        reverse("tour-availability", args=["00000000-0000-0000-0000-000000000000"]),
        {"date": "2030-06-12"},
    )

    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.data["code"] == "TOUR_NOT_FOUND"
