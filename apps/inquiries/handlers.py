"""
Inquiry Event Handlers

React to answered inquiries once the answer is committed. Failures are
logged by the message bus and leave the answer in place.
"""

from __future__ import annotations

import logging

from shared.application.message_bus import message_bus

from .domain.entities import InquiryStatus
from .domain.events import InquiryResponded
from .response_time import track_response
from .tasks import convert_accepted_inquiry

logger = logging.getLogger(__name__)


@message_bus.subscribe(InquiryResponded)
def update_response_time(event: InquiryResponded):
    if event.previous_status != InquiryStatus.PENDING:
        return
    track_response(event.recipient_id, event.inquiry_created_at, event.responded_at)


@message_bus.subscribe(InquiryResponded)
def create_bookings_for_accepted_inquiry(event: InquiryResponded):
    if event.status != InquiryStatus.ACCEPTED:
        return
    convert_accepted_inquiry.delay(str(event.inquiry_id))
