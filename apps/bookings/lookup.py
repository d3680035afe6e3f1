"""Entity lookup: resolve a polymorphic booking reference to catalog data.

Each entity type registers one resolver in ``RESOLVERS``. Callers never
branch on the entity type themselves.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Callable

from django.core.exceptions import ValidationError  # type: ignore

from apps.catalog.models import Driver, Guide, Tour

from .domain.entities import BookableEntity, EntitySnapshot, EntityType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EntityResolver:
    """Loads one catalog model and maps it to booking concepts."""

    fetch: Callable[[Any], Any]
    to_entity: Callable[[Any], BookableEntity]
    to_snapshot: Callable[[Any], EntitySnapshot]
    fallback_name: str


_RELATED = {Tour: ("owner",), Guide: ("user",), Driver: ("user",)}


def _get_or_none(model, **lookup):  # type: ignore
    try:
        return model.objects.select_related(*_RELATED[model]).get(**lookup)
    except (model.DoesNotExist, ValidationError, ValueError):
        return None


def _tour_entity(tour: Tour) -> BookableEntity:
    return BookableEntity(
        owner_id=tour.owner_id,
        is_active=tour.is_active,
        price=Decimal(tour.price),
        currency=tour.currency or "GEL",
    )


def _tour_snapshot(tour: Tour) -> EntitySnapshot:
    return EntitySnapshot(
        entity_name=tour.title,
        entity_image=tour.cover_image_url or None,
        provider_user_id=tour.owner_id,
        provider_name=tour.owner.full_name,
    )


def _guide_entity(guide: Guide) -> BookableEntity:
    return BookableEntity(
        owner_id=guide.user_id,
        is_active=guide.is_available,
        price=Decimal(guide.price_per_day or 0),
        currency=guide.currency or "GEL",
    )


def _driver_entity(driver: Driver) -> BookableEntity:
    return BookableEntity(
        owner_id=driver.user_id,
        is_active=driver.is_available,
        price=Decimal("0"),
        currency="GEL",
    )


def _profile_snapshot(profile: Guide | Driver) -> EntitySnapshot:
    full_name = profile.user.full_name
    return EntitySnapshot(
        entity_name=full_name,
        entity_image=profile.photo_url or None,
        provider_user_id=profile.user_id,
        provider_name=full_name,
    )


RESOLVERS: dict[str, EntityResolver] = {
    EntityType.TOUR: EntityResolver(
        fetch=lambda entity_id: _get_or_none(Tour, pk=entity_id),
        to_entity=_tour_entity,
        to_snapshot=_tour_snapshot,
        fallback_name="Tour",
    ),
    EntityType.GUIDE: EntityResolver(
        fetch=lambda entity_id: _get_or_none(Guide, pk=entity_id),
        to_entity=_guide_entity,
        to_snapshot=_profile_snapshot,
        fallback_name="Guide",
    ),
    EntityType.DRIVER: EntityResolver(
        fetch=lambda entity_id: _get_or_none(Driver, pk=entity_id),
        to_entity=_driver_entity,
        to_snapshot=_profile_snapshot,
        fallback_name="Driver",
    ),
}


def _resolver_for(entity_type: str) -> EntityResolver | None:
    resolver = RESOLVERS.get(entity_type)
    if resolver is None:
        logger.warning("Unknown entity type %s", entity_type)
    return resolver


def lookup_entity(entity_type: str, entity_id) -> BookableEntity | None:  # type: ignore
    """Ownership, activity and price of an entity, or None when it does not exist."""
    resolver = _resolver_for(entity_type)
    if resolver is None:
        return None
    instance = resolver.fetch(entity_id)
    return resolver.to_entity(instance) if instance is not None else None


def lookup_entity_info(entity_type: str, entity_id) -> EntitySnapshot:  # type: ignore
    """Display snapshot for a booking. Missing entities get a generic label."""
    resolver = _resolver_for(entity_type)
    if resolver is None:
        return EntitySnapshot()
    instance = resolver.fetch(entity_id)
    if instance is None:
        return EntitySnapshot(entity_name=resolver.fallback_name)
    return resolver.to_snapshot(instance)


def verify_entity_ownership(entity_type: str, entity_id, user_id) -> bool:  # type: ignore
    entity = lookup_entity(entity_type, entity_id)
    return entity is not None and entity.owner_id == user_id
