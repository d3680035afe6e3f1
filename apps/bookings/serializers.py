"""Serializers for the booking domain."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from apps.users.serializers import UserShortSerializer

from .domain.entities import BookingStatus, EntityType
from .models import Booking


class BookingCreateSerializer(serializers.Serializer):
    """Direct booking request from a customer."""

    entity_type = serializers.ChoiceField(choices=EntityType.choices)
    entity_id = serializers.UUIDField()
    date = serializers.DateField(required=False, allow_null=True)
    guests = serializers.IntegerField(min_value=1, max_value=100, default=1)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=2000)
    contact_phone = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=32)


class BookingConfirmSerializer(serializers.Serializer):
    provider_notes = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=2000)


class BookingDeclineSerializer(serializers.Serializer):
    declined_reason = serializers.CharField(max_length=2000)


class BookingListQuerySerializer(serializers.Serializer):
    """Pagination and filters of the booking lists."""

    page = serializers.IntegerField(min_value=1, default=1)
    limit = serializers.IntegerField(min_value=1, max_value=50, default=20)
    status = serializers.ChoiceField(choices=BookingStatus.choices, required=False)
    entity_type = serializers.ChoiceField(choices=EntityType.choices, required=False)


class AvailabilityQuerySerializer(serializers.Serializer):
    date = serializers.DateField()
    guests = serializers.IntegerField(min_value=1, default=1)


class BookingSerializer(serializers.ModelSerializer):
    """Detailed booking representation."""

    user = UserShortSerializer(read_only=True)
    inquiry_id = serializers.UUIDField(read_only=True, allow_null=True)
    provider_user_id = serializers.IntegerField(read_only=True, allow_null=True)

    class Meta:
        model = Booking
        fields = [
            "id",
            "reference_number",
            "user",
            "entity_type",
            "entity_id",
            "entity_name",
            "entity_image",
            "provider_user_id",
            "provider_name",
            "inquiry_id",
            "date",
            "guests",
            "total_price",
            "currency",
            "notes",
            "contact_phone",
            "provider_notes",
            "declined_reason",
            "status",
            "created_at",
            "updated_at",
            "cancelled_at",
        ]
        read_only_fields = fields
