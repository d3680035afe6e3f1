"""Booking domain models for TripMarket."""

from __future__ import annotations

import uuid
from decimal import Decimal

from django.conf import settings  # type: ignore
from django.core.validators import MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from shared.domain.base import EventRecorderMixin

from .domain.entities import (
    BookingStatus,
    EntityType,
    ensure_can_cancel,
    ensure_can_complete,
    ensure_can_respond,
)
from .domain.events import (
    BookingCancelled,
    BookingCompleted,
    BookingConfirmed,
    BookingDeclined,
)


class Booking(EventRecorderMixin, models.Model):
    """Reservation of a tour, guide or driver by a customer.

    The entity is referenced by ``entity_type`` + ``entity_id``; display
    fields are copied at creation time so the booking stays readable when
    the entity changes or disappears. Bookings are never deleted.
    """

    Status = BookingStatus
    EntityType = EntityType

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    reference_number = models.CharField(max_length=20, unique=True, null=True, blank=True)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="bookings",
    )
    entity_type = models.CharField(max_length=10, choices=EntityType.choices)
    entity_id = models.UUIDField()
    provider_user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="received_bookings",
    )
    inquiry = models.ForeignKey(
        "inquiries.Inquiry",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="bookings",
    )
    entity_name = models.CharField(max_length=255, blank=True, null=True)
    entity_image = models.URLField(max_length=500, blank=True, null=True)
    provider_name = models.CharField(max_length=255, blank=True, null=True)
    date = models.DateField(null=True, blank=True)
    guests = models.PositiveIntegerField(default=1, validators=[MinValueValidator(1)])
    total_price = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    currency = models.CharField(max_length=3, default="GEL")
    notes = models.TextField(blank=True, null=True)
    contact_phone = models.CharField(max_length=32, blank=True, null=True)
    provider_notes = models.TextField(blank=True, null=True)
    declined_reason = models.TextField(blank=True, null=True)
    status = models.CharField(
        max_length=16,
        choices=BookingStatus.choices,
        default=BookingStatus.PENDING,
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        verbose_name = _("Booking")
        verbose_name_plural = _("Bookings")
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["entity_type", "entity_id", "date"]),
            models.Index(fields=["user", "status"]),
            models.Index(fields=["provider_user", "status"]),
            models.Index(fields=["status", "created_at"]),
        ]

    def __str__(self) -> str:
        return f"Booking {self.reference_number or self.pk} ({self.status})"

    def _event_payload(self) -> dict:
        return {
            "aggregate_id": self.id,
            "booking_id": self.id,
            "customer_id": self.user_id,
            "provider_user_id": self.provider_user_id,
        }

    def confirm(self, provider_notes: str | None = None) -> None:
        ensure_can_respond(self.status)
        self.status = BookingStatus.CONFIRMED
        if provider_notes is not None:
            self.provider_notes = provider_notes
        self.add_event(BookingConfirmed(provider_notes=self.provider_notes, **self._event_payload()))

    def decline(self, declined_reason: str) -> None:
        ensure_can_respond(self.status)
        self.status = BookingStatus.DECLINED
        self.declined_reason = declined_reason
        self.add_event(BookingDeclined(declined_reason=declined_reason, **self._event_payload()))

    def cancel(self) -> None:
        ensure_can_cancel(self.status)
        self.status = BookingStatus.CANCELLED
        self.cancelled_at = timezone.now()
        self.add_event(BookingCancelled(**self._event_payload()))

    def complete(self) -> None:
        ensure_can_complete(self.status)
        self.status = BookingStatus.COMPLETED
        self.add_event(BookingCompleted(**self._event_payload()))
