"""
Base Domain Classes

This module provides the building blocks shared by the domain apps:
- ValueObject: Immutable objects compared by value
- EventRecorderMixin: Collects domain events on a changed object
- DomainEvent: Events that represent something that happened
"""

from abc import ABC
from dataclasses import dataclass, field
from datetime import datetime
from typing import List
from uuid import UUID, uuid4

from django.utils import timezone  # type: ignore


@dataclass(frozen=True)
class ValueObject(ABC):
    """
    Base class for value objects

    Value objects are immutable and have no identity.
    Two value objects are equal if all their attributes are equal.
    """
    pass


class EventRecorderMixin:
    """
    Records domain events on the object that caused them

    Mixed into Django models so that a unit of work can collect the
    events and publish them once the surrounding transaction commits.
    """

    def add_event(self, event: 'DomainEvent'):
        """Add a domain event to be published"""
        self.__dict__.setdefault('_pending_events', []).append(event)

    def clear_events(self):
        """Clear all collected events (called after publishing)"""
        self.__dict__.pop('_pending_events', None)

    @property
    def events(self) -> List['DomainEvent']:
        """Get copy of collected events"""
        return list(self.__dict__.get('_pending_events', []))


@dataclass(kw_only=True)
class DomainEvent:
    """
    Base class for domain events

    Domain events represent something that happened in the domain.
    They are used to communicate between bounded contexts.
    Base fields are keyword-only so subclasses can declare required fields.
    """
    event_id: UUID = field(default_factory=uuid4)
    occurred_at: datetime = field(default_factory=timezone.now)
    aggregate_id: UUID | None = None

    def to_dict(self) -> dict:
        """Convert event to dictionary for serialization"""
        return {
            'event_id': str(self.event_id),
            'event_type': self.__class__.__name__,
            'occurred_at': self.occurred_at.isoformat(),
            'aggregate_id': str(self.aggregate_id) if self.aggregate_id else None,
        }
