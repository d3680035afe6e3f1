"""
Unit of Work Pattern

Wraps a database transaction and makes sure that domain events recorded
during the work are published only after the transaction commits. A failure
while publishing never reaches the caller: the state change is already
durable at that point.
"""

from abc import ABC, abstractmethod
from typing import List
import logging

from django.db import transaction

from shared.domain.base import DomainEvent

logger = logging.getLogger(__name__)


class AbstractUnitOfWork(ABC):
    """Abstract Unit of Work pattern"""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            self.commit()
        else:
            self.rollback()

    @abstractmethod
    def commit(self):
        """Commit the transaction"""

    @abstractmethod
    def rollback(self):
        """Rollback the transaction"""

    @abstractmethod
    def collect_events(self, source):
        """Collect events recorded on a changed object"""


class DjangoUnitOfWork(AbstractUnitOfWork):
    """
    Django implementation of Unit of Work

    Usage:
        with DjangoUnitOfWork() as uow:
            booking = booking_repo.find_by_id(booking_id)
            booking.confirm(provider_notes)
            booking_repo.confirm_booking(booking)
            uow.collect_events(booking)
        # Events are handed to the message bus after commit

    Nested units of work share the outermost transaction, so their events
    are published when that transaction commits.
    """

    def __init__(self):
        self._events: List[DomainEvent] = []
        self._transaction = None

    def __enter__(self):
        """Start database transaction"""
        self._transaction = transaction.atomic()
        self._transaction.__enter__()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Complete or rollback transaction"""
        try:
            if exc_type is None:
                self.commit()
            else:
                self.rollback()
        finally:
            if self._transaction:
                self._transaction.__exit__(exc_type, exc_val, exc_tb)

    def commit(self):
        """Schedule publishing of the collected events for after the commit"""
        logger.debug("Committing transaction with %d events", len(self._events))

        events = self._events.copy()
        self._events.clear()

        if events:
            transaction.on_commit(lambda: self._publish_events(events))

    def rollback(self):
        """Rollback changes and discard events"""
        if self._events:
            logger.warning("Rolling back transaction, discarding %d events", len(self._events))
        self._events.clear()

    def collect_event(self, event: DomainEvent):
        """Queue a single event that is not tied to a recorded object"""
        self._events.append(event)

    def collect_events(self, source):
        """
        Collect events recorded on a changed object

        Extracts all domain events from the object and clears them there.
        """
        new_events = getattr(source, 'events', None)
        if new_events:
            self._events.extend(new_events)
            source.clear_events()
            logger.debug(
                "Collected %d events from %s (ID: %s)",
                len(new_events),
                source.__class__.__name__,
                getattr(source, 'pk', None),
            )

    def _publish_events(self, events: List[DomainEvent]):
        """Hand committed events to the message bus"""
        from shared.application.message_bus import message_bus

        logger.info("Publishing %d domain events after commit", len(events))

        try:
            message_bus.publish_events(events)
        except Exception:
            logger.error("Error publishing events", exc_info=True)
