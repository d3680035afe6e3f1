"""Notification model.

Defines a notification delivered to users via the web interface.
Notifications are created by notification tasks in reaction to booking
and inquiry events and consumed by recipients. Each notification can be
marked as read.
"""

from __future__ import annotations

from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class Notification(models.Model):
    """A message sent to a user about some event."""

    class Type(models.TextChoices):
        BOOKING_REQUEST = 'BOOKING_REQUEST', _('Booking request')
        BOOKING_CONFIRMED = 'BOOKING_CONFIRMED', _('Booking confirmed')
        BOOKING_DECLINED = 'BOOKING_DECLINED', _('Booking declined')
        BOOKING_CANCELLED = 'BOOKING_CANCELLED', _('Booking cancelled')
        BOOKING_COMPLETED = 'BOOKING_COMPLETED', _('Booking completed')
        INQUIRY_RECEIVED = 'INQUIRY_RECEIVED', _('Inquiry received')
        INQUIRY_RESPONSE = 'INQUIRY_RESPONSE', _('Inquiry response')

    user = models.ForeignKey(
        'users.CustomUser', on_delete=models.CASCADE, related_name='notifications'
    )
    type = models.CharField(max_length=32, choices=Type.choices)
    title = models.CharField(max_length=255)
    message = models.TextField()
    data = models.JSONField(default=dict, blank=True)
    is_read = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [models.Index(fields=['user', 'is_read'])]

    def __str__(self) -> str:
        return f"Notification to {self.user_id}: {self.title}"
