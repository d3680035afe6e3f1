"""Serializers for inquiries."""

from __future__ import annotations

from django.conf import settings  # type: ignore
from rest_framework import serializers  # type: ignore

from apps.users.serializers import UserShortSerializer

from .domain.entities import ANSWER_STATUSES, InquiryStatus, InquiryTargetType
from .models import Inquiry, InquiryResponse


class InquiryCreateSerializer(serializers.Serializer):
    target_type = serializers.ChoiceField(choices=InquiryTargetType.choices)
    target_ids = serializers.ListField(
        child=serializers.CharField(max_length=64),
        min_length=1,
        max_length=getattr(settings, "INQUIRY_MAX_TARGETS", 10),
    )
    subject = serializers.CharField(min_length=3, max_length=200)
    message = serializers.CharField(min_length=10, max_length=2000)


class InquiryRespondSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[(status.value, status.label) for status in ANSWER_STATUSES])
    message = serializers.CharField(min_length=1, max_length=2000, required=False)


class InquiryListQuerySerializer(serializers.Serializer):
    page = serializers.IntegerField(min_value=1, default=1)
    limit = serializers.IntegerField(min_value=1, max_value=50, default=20)
    status = serializers.ChoiceField(choices=InquiryStatus.choices, required=False)
    target_type = serializers.ChoiceField(choices=InquiryTargetType.choices, required=False)


class InquiryResponseSerializer(serializers.ModelSerializer):
    recipient = UserShortSerializer(read_only=True)

    class Meta:
        model = InquiryResponse
        fields = ["id", "recipient", "status", "message", "responded_at", "created_at", "updated_at"]
        read_only_fields = fields


class InquirySerializer(serializers.ModelSerializer):
    """Inquiry with parsed target ids and every recipient's answer."""

    user = UserShortSerializer(read_only=True)
    target_ids = serializers.ListField(source="parsed_target_ids", child=serializers.CharField(), read_only=True)
    responses = InquiryResponseSerializer(many=True, read_only=True)

    class Meta:
        model = Inquiry
        fields = [
            "id",
            "user",
            "target_type",
            "target_ids",
            "subject",
            "message",
            "requires_payment",
            "expires_at",
            "created_at",
            "updated_at",
            "responses",
        ]
        read_only_fields = fields


class ReceivedInquirySerializer(serializers.ModelSerializer):
    """A recipient's own answer row together with the inquiry it belongs to."""

    inquiry_id = serializers.UUIDField(read_only=True)
    inquiry = serializers.SerializerMethodField()

    class Meta:
        model = InquiryResponse
        fields = ["id", "inquiry_id", "inquiry", "status", "message", "responded_at", "created_at", "updated_at"]
        read_only_fields = fields

    def get_inquiry(self, obj: InquiryResponse) -> dict:
        inquiry = obj.inquiry
        return {
            "id": str(inquiry.id),
            "user": UserShortSerializer(inquiry.user).data,
            "target_type": inquiry.target_type,
            "target_ids": inquiry.parsed_target_ids,
            "subject": inquiry.subject,
            "message": inquiry.message,
            "requires_payment": inquiry.requires_payment,
            "expires_at": inquiry.expires_at,
            "created_at": inquiry.created_at,
        }
