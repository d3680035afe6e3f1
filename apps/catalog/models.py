"""Catalog models: bookable entities and provider profiles."""

from __future__ import annotations

import uuid
from decimal import Decimal

from django.conf import settings  # type: ignore
from django.core.validators import MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from shared.domain.value_objects import SUPPORTED_CURRENCIES

CURRENCY_CHOICES = [(code, code) for code in SUPPORTED_CURRENCIES]


class ResponseStatsModel(models.Model):
    """Rolling average of how fast a provider answers inquiries."""

    avg_response_time_minutes = models.PositiveIntegerField(null=True, blank=True)
    response_count = models.PositiveIntegerField(default=0)

    class Meta:
        abstract = True


class Tour(models.Model):
    """A tour offered by its owner; booked per guest."""

    class AvailabilityType(models.TextChoices):
        DAILY = "DAILY", _("Every day")
        WEEKDAYS = "WEEKDAYS", _("Monday to Friday")
        WEEKENDS = "WEEKENDS", _("Saturday and Sunday")
        SPECIFIC_DATES = "SPECIFIC_DATES", _("Specific dates")
        BY_REQUEST = "BY_REQUEST", _("By request")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="tours",
    )
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    cover_image_url = models.URLField(max_length=500, blank=True, null=True)
    is_active = models.BooleanField(default=True)
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    currency = models.CharField(max_length=3, choices=CURRENCY_CHOICES, default="GEL")
    availability_type = models.CharField(
        max_length=20,
        choices=AvailabilityType.choices,
        default=AvailabilityType.BY_REQUEST,
    )
    available_dates = models.TextField(
        blank=True,
        null=True,
        help_text=_('JSON array of "YYYY-MM-DD" strings, used with SPECIFIC_DATES.'),
    )
    max_people = models.PositiveIntegerField(
        null=True,
        blank=True,
        help_text=_("Empty means unlimited capacity."),
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [models.Index(fields=["owner", "is_active"])]

    def __str__(self) -> str:
        return self.title


class Guide(ResponseStatsModel):
    """Guide profile of a user; booked per day."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="guide_profile",
    )
    bio = models.TextField(blank=True)
    photo_url = models.URLField(max_length=500, blank=True, null=True)
    is_available = models.BooleanField(default=True)
    price_per_day = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    currency = models.CharField(max_length=3, choices=CURRENCY_CHOICES, default="GEL")
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self) -> str:
        return f"Guide {self.user}"


class Driver(ResponseStatsModel):
    """Driver profile of a user; priced outside of the booking flow."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="driver_profile",
    )
    bio = models.TextField(blank=True)
    photo_url = models.URLField(max_length=500, blank=True, null=True)
    is_available = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self) -> str:
        return f"Driver {self.user}"


class Company(ResponseStatsModel):
    """Tour company profile. Receives inquiries but is not bookable."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="company_profile",
    )
    company_name = models.CharField(max_length=255)
    logo_url = models.URLField(max_length=500, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name_plural = "companies"

    def __str__(self) -> str:
        return self.company_name
