"""Inquiry models: one inquiry, one response row per recipient."""

from __future__ import annotations

import json
import uuid

from django.conf import settings  # type: ignore
from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from shared.domain.base import EventRecorderMixin

from .domain.entities import InquiryStatus, InquiryTargetType, ensure_can_answer, parse_target_ids
from .domain.events import InquiryResponded


class Inquiry(EventRecorderMixin, models.Model):
    """A pre-booking message from a customer to one or more providers."""

    Status = InquiryStatus
    TargetType = InquiryTargetType

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="inquiries",
    )
    target_type = models.CharField(max_length=10, choices=InquiryTargetType.choices)
    target_ids = models.TextField(help_text=_("JSON array of resolved entity ids."))
    subject = models.CharField(max_length=200)
    message = models.TextField()
    requires_payment = models.BooleanField(default=False)
    expires_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Inquiry")
        verbose_name_plural = _("Inquiries")
        ordering = ["-created_at"]
        indexes = [models.Index(fields=["user", "target_type"])]

    def __str__(self) -> str:
        return f"Inquiry {self.pk}: {self.subject}"

    @property
    def parsed_target_ids(self) -> list[str]:
        return parse_target_ids(self.target_ids, self.pk)

    def set_target_ids(self, target_ids: list) -> None:
        self.target_ids = json.dumps([str(target_id) for target_id in target_ids])


class InquiryResponse(EventRecorderMixin, models.Model):
    """One recipient's independent answer to an inquiry."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    inquiry = models.ForeignKey(Inquiry, on_delete=models.CASCADE, related_name="responses")
    recipient = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="inquiry_responses",
    )
    status = models.CharField(
        max_length=16,
        choices=InquiryStatus.choices,
        default=InquiryStatus.PENDING,
    )
    message = models.TextField(blank=True, null=True)
    responded_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(fields=["inquiry", "recipient"], name="unique_inquiry_recipient"),
        ]
        indexes = [models.Index(fields=["recipient", "status"])]

    def __str__(self) -> str:
        return f"Response of {self.recipient_id} to {self.inquiry_id} ({self.status})"

    def answer(self, status: str, message: str | None = None) -> None:
        ensure_can_answer(self.status)
        previous_status = self.status
        self.status = status
        if message is not None:
            self.message = message
        self.responded_at = timezone.now()
        self.add_event(InquiryResponded(
            aggregate_id=self.inquiry_id,
            inquiry_id=self.inquiry_id,
            response_id=self.id,
            recipient_id=self.recipient_id,
            status=status,
            previous_status=previous_status,
            inquiry_created_at=self.inquiry.created_at,
            responded_at=self.responded_at,
        ))
