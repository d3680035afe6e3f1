"""
Inquiry Domain Events

Published after the inquiry transaction commits.
"""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

from shared.domain.base import DomainEvent


@dataclass(kw_only=True)
class InquiryCreated(DomainEvent):
    """
    Event: A customer sent an inquiry

    Triggers:
    - Notify every recipient
    """
    inquiry_id: UUID
    sender_id: int
    recipient_ids: list[int] = field(default_factory=list)


@dataclass(kw_only=True)
class InquiryResponded(DomainEvent):
    """
    Event: A recipient answered an inquiry

    Triggers:
    - Notify the sender
    - Update the recipient's response-time statistic (when leaving PENDING)
    - Create confirmed bookings (when ACCEPTED)
    """
    inquiry_id: UUID
    response_id: UUID
    recipient_id: int
    status: str
    previous_status: str
    inquiry_created_at: datetime
    responded_at: datetime
