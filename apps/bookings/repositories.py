"""
Booking Repository

Narrow persistence functions for bookings. Writes are single-row and
unconditional: the caller reads the current status, decides, and the
repository stores the outcome.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from django.core.exceptions import ValidationError  # type: ignore
from django.db.models import Q, QuerySet, Sum  # type: ignore

from apps.catalog.models import Driver, Guide, Tour

from .domain.entities import CAPACITY_HOLDING_STATUSES, BookingStatus, EntityType, generate_reference_number
from .models import Booking

logger = logging.getLogger(__name__)

MAX_REFERENCE_ATTEMPTS = 10


@dataclass
class BookingFilters:
    status: str | None = None
    entity_type: str | None = None


@dataclass
class Page:
    items: list[Any] = field(default_factory=list)
    total_items: int = 0


class BookingRepository:
    """ORM access for the booking lifecycle"""

    def _base_queryset(self) -> QuerySet:
        return Booking.objects.select_related("user", "provider_user")

    def find_by_id(self, booking_id) -> Booking | None:  # type: ignore
        try:
            return self._base_queryset().filter(pk=booking_id).first()
        except (ValidationError, ValueError):
            return None

    def generate_unique_reference(self) -> str:
        for _ in range(MAX_REFERENCE_ATTEMPTS):
            reference = generate_reference_number()
            if not Booking.objects.filter(reference_number=reference).exists():
                return reference
        raise RuntimeError(
            f"Failed to generate unique reference number after {MAX_REFERENCE_ATTEMPTS} attempts"
        )

    def create(self, **data: Any) -> Booking:
        """Simple creation path; the booking starts CONFIRMED unless told otherwise"""
        data.setdefault("status", BookingStatus.CONFIRMED)
        data.setdefault("currency", "GEL")
        data.setdefault("reference_number", self.generate_unique_reference())
        return Booking.objects.create(**data)

    def create_direct_booking(self, **data: Any) -> Booking:
        """Customer request path; the booking waits for the provider"""
        data["status"] = BookingStatus.PENDING
        return self.create(**data)

    def update_status(self, booking: Booking) -> Booking:
        booking.save(update_fields=["status", "cancelled_at", "updated_at"])
        return booking

    def confirm_booking(self, booking: Booking) -> Booking:
        booking.save(update_fields=["status", "provider_notes", "updated_at"])
        return booking

    def decline_booking(self, booking: Booking) -> Booking:
        booking.save(update_fields=["status", "declined_reason", "updated_at"])
        return booking

    def complete_booking(self, booking: Booking) -> Booking:
        booking.save(update_fields=["status", "updated_at"])
        return booking

    def count_booked_guests(self, tour_id, on: date) -> int:  # type: ignore
        """Guests of pending and confirmed bookings of a tour on a date"""
        total = Booking.objects.filter(
            entity_type=EntityType.TOUR,
            entity_id=tour_id,
            date=on,
            status__in=CAPACITY_HOLDING_STATUSES,
        ).aggregate(total=Sum("guests"))["total"]
        return total or 0

    def _paginate(self, queryset: QuerySet, page: int, limit: int) -> Page:
        offset = (page - 1) * limit
        total = queryset.count()
        items = list(queryset.order_by("-created_at")[offset:offset + limit])
        return Page(items=items, total_items=total)

    def _apply_filters(self, queryset: QuerySet, filters: BookingFilters) -> QuerySet:
        if filters.status:
            queryset = queryset.filter(status=filters.status)
        if filters.entity_type:
            queryset = queryset.filter(entity_type=filters.entity_type)
        return queryset

    def find_by_user(self, user_id, page: int, limit: int, filters: BookingFilters) -> Page:  # type: ignore
        queryset = self._apply_filters(self._base_queryset().filter(user_id=user_id), filters)
        return self._paginate(queryset, page, limit)

    def owned_entity_condition(self, provider_user_id) -> Q | None:  # type: ignore
        """Bookings whose entity belongs to the provider, or None when they own nothing"""
        conditions = []
        tour_ids = list(Tour.objects.filter(owner_id=provider_user_id).values_list("id", flat=True))
        if tour_ids:
            conditions.append(Q(entity_type=EntityType.TOUR, entity_id__in=tour_ids))
        guide_id = Guide.objects.filter(user_id=provider_user_id).values_list("id", flat=True).first()
        if guide_id:
            conditions.append(Q(entity_type=EntityType.GUIDE, entity_id=guide_id))
        driver_id = Driver.objects.filter(user_id=provider_user_id).values_list("id", flat=True).first()
        if driver_id:
            conditions.append(Q(entity_type=EntityType.DRIVER, entity_id=driver_id))

        if not conditions:
            return None
        condition = conditions[0]
        for extra in conditions[1:]:
            condition |= extra
        return condition

    def find_received_by_provider(self, provider_user_id, page: int, limit: int, filters: BookingFilters) -> Page:  # type: ignore
        condition = Q(provider_user_id=provider_user_id)
        owned = self.owned_entity_condition(provider_user_id)
        if owned is not None:
            condition |= owned
        queryset = self._apply_filters(self._base_queryset().filter(condition), filters)
        return self._paginate(queryset, page, limit)

    def find_expired_pending(self, older_than) -> QuerySet:  # type: ignore
        return self._base_queryset().filter(
            status=BookingStatus.PENDING,
            created_at__lt=older_than,
        ).order_by("created_at")

    def find_missing_snapshot(self) -> QuerySet:
        return Booking.objects.filter(
            Q(entity_name__isnull=True)
            | Q(provider_user__isnull=True)
            | Q(reference_number__isnull=True)
        ).order_by("created_at")


booking_repo = BookingRepository()
