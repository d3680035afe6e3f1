"""Integration tests for inquiry API endpoints and inquiry conversion."""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.bookings.models import Booking
from apps.catalog.tests.factories import make_company, make_driver, make_guide, make_tour, make_user
from apps.inquiries import services
from apps.inquiries.models import Inquiry, InquiryResponse
from apps.notifications.models import Notification
from shared.domain.exceptions import BadRequestError


class InquiryAPITests(APITestCase):
    def setUp(self) -> None:
        self.customer = make_user("Nino", "Beridze", email="customer@example.com")
        self.guide_user = make_user("Levan", "Chkheidze", email="levan@example.com")
        self.second_guide_user = make_user("Tamar", "Gelashvili", email="tamar@example.com")
        self.guide = make_guide(self.guide_user, price_per_day=Decimal("150.00"))
        self.second_guide = make_guide(self.second_guide_user)
        self.client.force_authenticate(self.customer)
        self.list_url = reverse("inquiry-list")

    def _payload(self, **overrides) -> dict:  # type: ignore
        payload = {
            "target_type": "GUIDE",
            "target_ids": [str(self.guide.id)],
            "subject": "Trip to Svaneti",
            "message": "Are you free for a four day hike in early July?",
        }
        payload.update(overrides)
        return payload

    def _create_inquiry(self, **overrides) -> Inquiry:  # type: ignore
        self.client.force_authenticate(self.customer)
        with self.captureOnCommitCallbacks(execute=True):
            response = self.client.post(self.list_url, self._payload(**overrides), format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        return Inquiry.objects.get(pk=response.data["id"])

    def _respond(self, inquiry: Inquiry, user, data):  # type: ignore
        self.client.force_authenticate(user)
        url = reverse("inquiry-respond", args=[inquiry.id])
        with self.captureOnCommitCallbacks(execute=True):
            return self.client.post(url, data, format="json")

    def test_create_inquiry_notifies_recipients(self) -> None:
        inquiry = self._create_inquiry(target_ids=[str(self.guide.id), str(self.second_guide.id)])

        self.assertFalse(inquiry.requires_payment)
        self.assertEqual(
            sorted(inquiry.parsed_target_ids),
            sorted([str(self.guide.id), str(self.second_guide.id)]),
        )
        self.assertEqual(
            set(inquiry.responses.values_list("recipient_id", "status")),
            {(self.guide_user.id, "PENDING"), (self.second_guide_user.id, "PENDING")},
        )
        self.assertAlmostEqual(
            inquiry.expires_at,
            timezone.now() + timedelta(days=30),
            delta=timedelta(minutes=1),
        )
        received = Notification.objects.filter(type=Notification.Type.INQUIRY_RECEIVED)
        self.assertEqual(
            set(received.values_list("user_id", flat=True)),
            {self.guide_user.id, self.second_guide_user.id},
        )

    def test_targets_resolved_by_user_id(self) -> None:
        inquiry = self._create_inquiry(target_ids=[str(self.guide_user.id), "not-an-id"])

        self.assertEqual(inquiry.parsed_target_ids, [str(self.guide.id)])
        self.assertEqual(inquiry.responses.get().recipient_id, self.guide_user.id)

    def test_more_than_two_targets_require_payment(self) -> None:
        third = make_guide(make_user("Dato", "Mikadze"))

        inquiry = self._create_inquiry(
            target_ids=[str(self.guide.id), str(self.second_guide.id), str(third.id)],
        )

        self.assertTrue(inquiry.requires_payment)

    def test_no_valid_targets(self) -> None:
        response = self.client.post(
            self.list_url,
            self._payload(target_ids=["00000000-0000-0000-0000-000000000000"]),
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_422_UNPROCESSABLE_ENTITY, response.data)
        self.assertEqual(response.data["code"], "NO_VALID_TARGETS")
        self.assertFalse(Inquiry.objects.exists())

    def test_payload_validation(self) -> None:
        response = self.client.post(
            self.list_url,
            self._payload(target_ids=[], subject="Hi", message="short"),
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("target_ids", response.data)
        self.assertIn("subject", response.data)
        self.assertIn("message", response.data)

    def test_accepted_guide_inquiry_becomes_confirmed_booking(self) -> None:
        inquiry = self._create_inquiry()
        Inquiry.objects.filter(pk=inquiry.pk).update(created_at=timezone.now() - timedelta(minutes=90))

        response = self._respond(inquiry, self.guide_user, {"status": "ACCEPTED", "message": "Yes, see you!"})

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["status"], "ACCEPTED")
        self.assertIsNotNone(response.data["responded_at"])

        booking = Booking.objects.get(inquiry=inquiry)
        self.assertEqual(booking.status, Booking.Status.CONFIRMED)
        self.assertEqual(booking.entity_type, Booking.EntityType.GUIDE)
        self.assertEqual(booking.entity_id, self.guide.id)
        self.assertEqual(booking.user, self.customer)
        self.assertEqual(booking.guests, 1)
        self.assertEqual(booking.total_price, Decimal("150.00"))
        self.assertEqual(booking.provider_user, self.guide_user)
        self.assertRegex(booking.reference_number, r"^BK-\d{6}-[0-9A-Z]{4}$")

        self.guide.refresh_from_db()
        self.assertEqual(self.guide.response_count, 1)
        self.assertEqual(self.guide.avg_response_time_minutes, 90)

        customer_types = set(Notification.objects.filter(user=self.customer).values_list("type", flat=True))
        self.assertEqual(
            customer_types,
            {Notification.Type.INQUIRY_RESPONSE, Notification.Type.BOOKING_CONFIRMED},
        )

    def test_declined_inquiry_creates_no_booking(self) -> None:
        inquiry = self._create_inquiry()

        response = self._respond(inquiry, self.guide_user, {"status": "DECLINED"})

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertFalse(Booking.objects.exists())
        self.guide.refresh_from_db()
        self.assertEqual(self.guide.response_count, 1)

    def test_accepted_company_inquiry_creates_no_booking(self) -> None:
        company_user = make_user("Irakli", "Tsereteli")
        company = make_company(company_user)
        inquiry = self._create_inquiry(target_type="COMPANY", target_ids=[str(company.id)])

        response = self._respond(inquiry, company_user, {"status": "ACCEPTED"})

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertFalse(Booking.objects.exists())
        company.refresh_from_db()
        self.assertEqual(company.response_count, 1)

    def test_tour_inquiry_uses_tour_price(self) -> None:
        owner = make_user("Giorgi", "Kapanadze")
        tour = make_tour(owner, price=Decimal("80.00"), currency="USD")
        inquiry = self._create_inquiry(target_type="TOUR", target_ids=[str(tour.id)])

        self._respond(inquiry, owner, {"status": "ACCEPTED"})

        booking = Booking.objects.get(inquiry=inquiry)
        self.assertEqual(booking.total_price, Decimal("80.00"))
        self.assertEqual(booking.currency, "USD")
        self.assertEqual(booking.entity_name, tour.title)

    def test_answering_after_decision_rejected(self) -> None:
        inquiry = self._create_inquiry()
        self._respond(inquiry, self.guide_user, {"status": "DECLINED"})

        response = self._respond(inquiry, self.guide_user, {"status": "ACCEPTED"})

        self.assertEqual(response.status_code, status.HTTP_422_UNPROCESSABLE_ENTITY, response.data)
        self.assertEqual(response.data["code"], "INQUIRY_ALREADY_ANSWERED")
        self.assertEqual(response.data["detail"], "You have already declined this inquiry")
        self.assertEqual(inquiry.responses.get().status, "DECLINED")
        self.assertFalse(Booking.objects.exists())

    def test_accepting_after_reply_counts_response_once(self) -> None:
        inquiry = self._create_inquiry()
        Inquiry.objects.filter(pk=inquiry.pk).update(created_at=timezone.now() - timedelta(minutes=30))
        self._respond(inquiry, self.guide_user, {"status": "RESPONDED", "message": "Which dates exactly?"})

        response = self._respond(inquiry, self.guide_user, {"status": "ACCEPTED"})

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(Booking.objects.filter(inquiry=inquiry, status=Booking.Status.CONFIRMED).count(), 1)
        self.guide.refresh_from_db()
        self.assertEqual(self.guide.response_count, 1)
        self.assertEqual(self.guide.avg_response_time_minutes, 30)

    def test_response_time_updates_every_profile_of_recipient(self) -> None:
        driver = make_driver(self.guide_user)
        company = make_company(self.guide_user)
        inquiry = self._create_inquiry()
        Inquiry.objects.filter(pk=inquiry.pk).update(created_at=timezone.now() - timedelta(minutes=45))

        self._respond(inquiry, self.guide_user, {"status": "DECLINED"})

        for profile in (self.guide, driver, company):
            profile.refresh_from_db()
            self.assertEqual(profile.response_count, 1)
            self.assertEqual(profile.avg_response_time_minutes, 45)

    def test_only_recipients_respond(self) -> None:
        inquiry = self._create_inquiry()

        response = self._respond(inquiry, self.second_guide_user, {"status": "ACCEPTED"})

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN, response.data)
        self.assertEqual(response.data["code"], "FORBIDDEN")

    def test_invalid_answer_status(self) -> None:
        inquiry = self._create_inquiry()

        response = self._respond(inquiry, self.guide_user, {"status": "PENDING"})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        with self.assertRaises(BadRequestError) as ctx:
            services.respond_to_inquiry(inquiry.id, self.guide_user.id, "EXPIRED")
        self.assertEqual(ctx.exception.code, "INVALID_INQUIRY_STATUS")

    def test_detail_visibility(self) -> None:
        inquiry = self._create_inquiry()
        url = reverse("inquiry-detail", args=[inquiry.id])

        self.client.force_authenticate(self.guide_user)
        self.assertEqual(self.client.get(url).status_code, status.HTTP_200_OK)

        self.client.force_authenticate(self.second_guide_user)
        forbidden = self.client.get(url)
        self.assertEqual(forbidden.status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(self.customer)
        missing = self.client.get(reverse("inquiry-detail", args=["00000000-0000-0000-0000-000000000000"]))
        self.assertEqual(missing.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(missing.data["code"], "INQUIRY_NOT_FOUND")

        malformed = self.client.get(f"{self.list_url}{'-' * 36}/")
        self.assertEqual(malformed.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(malformed.data["code"], "INQUIRY_NOT_FOUND")

    def test_sent_and_received_lists(self) -> None:
        inquiry = self._create_inquiry()

        sent = self.client.get(self.list_url)
        self.assertEqual(sent.data["total_items"], 1)
        self.assertEqual(sent.data["items"][0]["id"], str(inquiry.id))
        self.assertEqual(sent.data["items"][0]["target_ids"], [str(self.guide.id)])

        self.client.force_authenticate(self.guide_user)
        received = self.client.get(reverse("inquiry-received"))
        self.assertEqual(received.data["total_items"], 1)
        self.assertEqual(received.data["items"][0]["inquiry_id"], str(inquiry.id))
        self.assertEqual(received.data["items"][0]["status"], "PENDING")

        accepted_only = self.client.get(reverse("inquiry-received"), {"status": "ACCEPTED"})
        self.assertEqual(accepted_only.data["total_items"], 0)

    def test_mark_expired_inquiries(self) -> None:
        inquiry = self._create_inquiry(target_ids=[str(self.guide.id), str(self.second_guide.id)])
        self._respond(inquiry, self.guide_user, {"status": "DECLINED"})
        Inquiry.objects.filter(pk=inquiry.pk).update(expires_at=timezone.now() - timedelta(days=1))
        fresh = self._create_inquiry()

        expired = services.mark_expired_inquiries()

        self.assertEqual(expired, 1)
        statuses = dict(inquiry.responses.values_list("recipient_id", "status"))
        self.assertEqual(statuses[self.guide_user.id], "DECLINED")
        self.assertEqual(statuses[self.second_guide_user.id], "EXPIRED")
        self.assertEqual(fresh.responses.get().status, "PENDING")

    def test_malformed_target_ids_read_as_empty(self) -> None:
        inquiry = self._create_inquiry()
        Inquiry.objects.filter(pk=inquiry.pk).update(target_ids="{broken")
        inquiry.refresh_from_db()

        self.assertEqual(inquiry.parsed_target_ids, [])
        response = self._respond(inquiry, self.guide_user, {"status": "ACCEPTED"})
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertFalse(Booking.objects.exists())

    def test_driver_inquiry_conversion(self) -> None:
        driver_user = make_user("Zura", "Driver")
        driver = make_driver(driver_user)
        inquiry = self._create_inquiry(target_type="DRIVER", target_ids=[str(driver.id)])

        self._respond(inquiry, driver_user, {"status": "ACCEPTED"})

        booking = Booking.objects.get(inquiry=inquiry)
        self.assertEqual(booking.entity_type, Booking.EntityType.DRIVER)
        self.assertEqual(booking.total_price, Decimal("0"))
        self.assertTrue(InquiryResponse.objects.filter(inquiry=inquiry, status="ACCEPTED").exists())
