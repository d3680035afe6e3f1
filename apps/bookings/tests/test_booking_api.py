"""Integration tests for booking API endpoints."""

from __future__ import annotations

import re
from datetime import date, timedelta
from decimal import Decimal

from django.core import mail
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.bookings.models import Booking
from apps.catalog.models import Tour
from apps.catalog.tests.factories import make_driver, make_guide, make_tour, make_user
from apps.notifications.models import Notification

TOUR_DATE = date(2030, 6, 12)


class BookingAPITests(APITestCase):
    """Covers direct booking creation and the provider/customer lifecycle."""

    def setUp(self) -> None:
        self.customer = make_user("Nino", "Beridze", email="customer@example.com")
        self.owner = make_user("Giorgi", "Kapanadze", email="owner@example.com")
        self.stranger = make_user("Ana", "Lomidze", email="stranger@example.com")
        self.tour = make_tour(self.owner, title="Kazbegi day trip", price=Decimal("100.00"), max_people=10)
        self.client.force_authenticate(self.customer)
        self.list_url = reverse("booking-list")

    def _payload(self, **overrides) -> dict:  # type: ignore
        payload = {
            "entity_type": "TOUR",
            "entity_id": str(self.tour.id),
            "date": str(TOUR_DATE),
            "guests": 4,
        }
        payload.update(overrides)
        return payload

    def _create_booking(self, **overrides) -> Booking:  # type: ignore
        self.client.force_authenticate(self.customer)
        response = self.client.post(self.list_url, self._payload(**overrides), format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        return Booking.objects.get(pk=response.data["id"])

    def _patch(self, booking: Booking, action: str, user, data=None):  # type: ignore
        self.client.force_authenticate(user)
        url = reverse(f"booking-{action}", args=[booking.id])
        with self.captureOnCommitCallbacks(execute=True):
            return self.client.patch(url, data or {}, format="json")

    def test_customer_creates_pending_tour_booking(self) -> None:
        with self.captureOnCommitCallbacks(execute=True):
            response = self.client.post(self.list_url, self._payload(), format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["status"], "PENDING")
        self.assertEqual(Decimal(response.data["total_price"]), Decimal("400"))
        self.assertEqual(response.data["currency"], "GEL")
        self.assertRegex(response.data["reference_number"], r"^BK-\d{6}-[0-9A-Z]{4}$")

        booking = Booking.objects.get(pk=response.data["id"])
        self.assertEqual(booking.entity_name, "Kazbegi day trip")
        self.assertEqual(booking.provider_user, self.owner)
        self.assertEqual(booking.provider_name, "Giorgi Kapanadze")

        notification = Notification.objects.get(user=self.owner)
        self.assertEqual(notification.type, Notification.Type.BOOKING_REQUEST)
        self.assertEqual(notification.data["booking_id"], str(booking.id))
        self.assertEqual([message.to for message in mail.outbox], [["owner@example.com"]])

    def test_provider_email_skipped_when_disabled(self) -> None:
        self.owner.email_notifications = False
        self.owner.save(update_fields=["email_notifications"])

        with self.captureOnCommitCallbacks(execute=True):
            response = self.client.post(self.list_url, self._payload(), format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertTrue(Notification.objects.filter(user=self.owner).exists())
        self.assertEqual(len(mail.outbox), 0)

    def test_self_booking_rejected_before_availability_check(self) -> None:
        self.tour.availability_type = Tour.AvailabilityType.WEEKENDS
        self.tour.max_people = 1
        self.tour.save()
        self.client.force_authenticate(self.owner)

        response = self.client.post(self.list_url, self._payload(), format="json")

        self.assertEqual(response.status_code, status.HTTP_422_UNPROCESSABLE_ENTITY, response.data)
        self.assertEqual(response.data["code"], "SELF_BOOKING")
        self.assertEqual(Booking.objects.count(), 0)

    def test_booking_over_capacity_rejected(self) -> None:
        self._create_booking(guests=7)

        response = self.client.post(self.list_url, self._payload(guests=4), format="json")

        self.assertEqual(response.status_code, status.HTTP_422_UNPROCESSABLE_ENTITY, response.data)
        self.assertEqual(response.data["code"], "INSUFFICIENT_AVAILABILITY")
        self.assertEqual(response.data["detail"], "Only 3 spot(s) remaining for this date")

    def test_tour_booking_requires_date(self) -> None:
        response = self.client.post(self.list_url, self._payload(date=None), format="json")

        self.assertEqual(response.status_code, status.HTTP_422_UNPROCESSABLE_ENTITY, response.data)
        self.assertEqual(response.data["code"], "DATE_REQUIRED")
        self.assertEqual(Booking.objects.count(), 0)

    def test_inactive_tour_rejected(self) -> None:
        self.tour.is_active = False
        self.tour.save()

        response = self.client.post(self.list_url, self._payload(), format="json")

        self.assertEqual(response.status_code, status.HTTP_422_UNPROCESSABLE_ENTITY, response.data)
        self.assertEqual(response.data["code"], "ENTITY_INACTIVE")

    def test_unknown_entity_not_found(self) -> None:
        response = self.client.post(
            self.list_url,
            self._payload(entity_type="GUIDE", entity_id="00000000-0000-0000-0000-000000000000"),
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND, response.data)
        self.assertEqual(response.data["code"], "GUIDE_NOT_FOUND")

    def test_guide_and_driver_bookings_are_free(self) -> None:
        guide = make_guide(make_user("Levan", "Guide"), price_per_day=Decimal("150.00"))
        driver = make_driver(make_user("Dato", "Driver"))

        guide_booking = self._create_booking(entity_type="GUIDE", entity_id=str(guide.id), guests=2)
        driver_booking = self._create_booking(entity_type="DRIVER", entity_id=str(driver.id), date=None)

        self.assertEqual(guide_booking.total_price, Decimal("0"))
        self.assertEqual(driver_booking.total_price, Decimal("0"))
        self.assertEqual(guide_booking.entity_name, "Levan Guide")
        self.assertEqual(driver_booking.provider_user_id, driver.user_id)

    def test_invalid_payload_keeps_default_validation(self) -> None:
        response = self.client.post(self.list_url, self._payload(guests=0), format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
        self.assertIn("guests", response.data)

    def test_provider_confirms_pending_booking(self) -> None:
        booking = self._create_booking()
        mail.outbox.clear()

        response = self._patch(booking, "confirm", self.owner, {"provider_notes": "Bring warm clothes"})

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        booking.refresh_from_db()
        self.assertEqual(booking.status, Booking.Status.CONFIRMED)
        self.assertEqual(booking.provider_notes, "Bring warm clothes")
        notification = Notification.objects.get(user=self.customer)
        self.assertEqual(notification.type, Notification.Type.BOOKING_CONFIRMED)
        self.assertEqual(mail.outbox[-1].to, ["customer@example.com"])
        self.assertIn("Bring warm clothes", mail.outbox[-1].alternatives[0][0])

    def test_confirm_twice_reports_current_status(self) -> None:
        booking = self._create_booking()
        self._patch(booking, "confirm", self.owner)

        response = self._patch(booking, "confirm", self.owner)

        self.assertEqual(response.status_code, status.HTTP_422_UNPROCESSABLE_ENTITY, response.data)
        self.assertEqual(response.data["code"], "INVALID_BOOKING_STATUS")
        self.assertIn("CONFIRMED", response.data["detail"])

    def test_only_entity_owner_can_confirm_decline_or_complete(self) -> None:
        booking = self._create_booking()

        for action in ("confirm", "complete"):
            response = self._patch(booking, action, self.stranger)
            self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN, response.data)
            self.assertEqual(response.data["code"], "FORBIDDEN")
        response = self._patch(booking, "decline", self.stranger, {"declined_reason": "Busy"})
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN, response.data)

        booking.refresh_from_db()
        self.assertEqual(booking.status, Booking.Status.PENDING)

    def test_provider_declines_with_reason(self) -> None:
        booking = self._create_booking()

        response = self._patch(booking, "decline", self.owner, {"declined_reason": "Fully booked"})

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["status"], "DECLINED")
        self.assertEqual(response.data["declined_reason"], "Fully booked")
        self.assertEqual(
            Notification.objects.get(user=self.customer).type,
            Notification.Type.BOOKING_DECLINED,
        )

    def test_decline_requires_reason(self) -> None:
        booking = self._create_booking()
        response = self._patch(booking, "decline", self.owner, {})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)

    def test_cancel_twice_fails(self) -> None:
        booking = self._create_booking()

        first = self._patch(booking, "cancel", self.customer)
        second = self._patch(booking, "cancel", self.customer)

        self.assertEqual(first.status_code, status.HTTP_200_OK, first.data)
        self.assertIsNotNone(first.data["cancelled_at"])
        self.assertEqual(second.status_code, status.HTTP_422_UNPROCESSABLE_ENTITY, second.data)
        self.assertEqual(second.data["code"], "BOOKING_ALREADY_CANCELLED")
        self.assertEqual(
            Notification.objects.filter(user=self.owner, type=Notification.Type.BOOKING_CANCELLED).count(),
            1,
        )

    def test_only_customer_can_cancel(self) -> None:
        booking = self._create_booking()

        response = self._patch(booking, "cancel", self.owner)

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN, response.data)

    def test_cancel_rejected_for_completed_and_declined(self) -> None:
        completed = self._create_booking(guests=1)
        self._patch(completed, "confirm", self.owner)
        self._patch(completed, "complete", self.owner)
        declined = self._create_booking(guests=1)
        self._patch(declined, "decline", self.owner, {"declined_reason": "No"})

        response = self._patch(completed, "cancel", self.customer)
        self.assertEqual(response.data["code"], "BOOKING_COMPLETED")
        response = self._patch(declined, "cancel", self.customer)
        self.assertEqual(response.data["code"], "BOOKING_DECLINED")

    def test_complete_twice_and_complete_cancelled_fail(self) -> None:
        booking = self._create_booking(guests=1)
        self._patch(booking, "confirm", self.owner)
        self.assertEqual(self._patch(booking, "complete", self.owner).status_code, status.HTTP_200_OK)

        response = self._patch(booking, "complete", self.owner)
        self.assertEqual(response.data["code"], "BOOKING_ALREADY_COMPLETED")

        cancelled = self._create_booking(guests=1)
        self._patch(cancelled, "cancel", self.customer)
        response = self._patch(cancelled, "complete", self.owner)
        self.assertEqual(response.data["code"], "BOOKING_CANCELLED")

    def test_completion_email_links_to_review_page(self) -> None:
        booking = self._create_booking(guests=1)
        self._patch(booking, "confirm", self.owner)
        mail.outbox.clear()

        self._patch(booking, "complete", self.owner)

        notification = Notification.objects.get(user=self.customer, type=Notification.Type.BOOKING_COMPLETED)
        self.assertTrue(notification.data["review_url"].endswith(f"/explore/tours/{self.tour.id}"))
        self.assertIn(f"/explore/tours/{self.tour.id}", mail.outbox[-1].alternatives[0][0])

    def test_booking_detail_visibility(self) -> None:
        booking = self._create_booking()
        url = reverse("booking-detail", args=[booking.id])

        for user, expected in (
            (self.customer, status.HTTP_200_OK),
            (self.owner, status.HTTP_200_OK),
            (self.stranger, status.HTTP_403_FORBIDDEN),
        ):
            self.client.force_authenticate(user)
            response = self.client.get(url)
            self.assertEqual(response.status_code, expected, response.data)

        response = self.client.get(reverse("booking-detail", args=["00000000-0000-0000-0000-000000000000"]))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data["code"], "BOOKING_NOT_FOUND")

    def test_malformed_booking_id_is_not_found(self) -> None:
        malformed = "-" * 36
        self.client.force_authenticate(self.customer)

        detail = self.client.get(f"{self.list_url}{malformed}/")
        cancel = self.client.patch(f"{self.list_url}{malformed}/cancel/", {}, format="json")

        self.assertEqual(detail.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(detail.data["code"], "BOOKING_NOT_FOUND")
        self.assertEqual(cancel.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(cancel.data["code"], "BOOKING_NOT_FOUND")

    def test_legacy_booking_visible_to_current_owner(self) -> None:
        booking = self._create_booking()
        Booking.objects.filter(pk=booking.pk).update(provider_user=None)
        self.client.force_authenticate(self.owner)

        response = self.client.get(reverse("booking-detail", args=[booking.id]))

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)

    def test_customer_and_provider_lists(self) -> None:
        first = self._create_booking(guests=1)
        second = self._create_booking(guests=2)
        Booking.objects.filter(pk=first.pk).update(created_at=second.created_at - timedelta(minutes=5))
        self._patch(first, "confirm", self.owner)

        self.client.force_authenticate(self.customer)
        response = self.client.get(self.list_url, {"limit": 1})
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["total_items"], 2)
        self.assertEqual(response.data["total_pages"], 2)
        self.assertEqual(response.data["items"][0]["id"], str(second.id))

        self.client.force_authenticate(self.owner)
        response = self.client.get(reverse("booking-received"), {"status": "CONFIRMED"})
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual([item["id"] for item in response.data["items"]], [str(first.id)])

        self.client.force_authenticate(self.stranger)
        response = self.client.get(reverse("booking-received"))
        self.assertEqual(response.data["total_items"], 0)

    def test_list_limit_is_bounded(self) -> None:
        response = self.client.get(self.list_url, {"limit": 51})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_reference_numbers_are_unique(self) -> None:
        references = {self._create_booking(guests=1).reference_number for _ in range(3)}
        self.assertEqual(len(references), 3)
        for reference in references:
            self.assertTrue(re.fullmatch(r"BK-\d{6}-[0-9A-Z]{4}", reference))
