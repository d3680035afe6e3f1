"""Inquiry workflow: create, answer, read and expire inquiries."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Callable

from django.conf import settings  # type: ignore
from django.core.exceptions import ValidationError  # type: ignore
from django.db.models import Q, QuerySet  # type: ignore
from django.utils import timezone  # type: ignore

from apps.bookings.repositories import Page
from apps.catalog.models import Company, Driver, Guide, Tour
from shared.application.uow import DjangoUnitOfWork
from shared.domain.exceptions import BadRequestError, ForbiddenError, NotFoundError

from .domain.entities import ANSWER_STATUSES, InquiryStatus, InquiryTargetType, split_target_ids
from .domain.events import InquiryCreated
from .models import Inquiry, InquiryResponse

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedTarget:
    target_id: str
    user_id: int


def _resolve_tours(raw_ids: list[str]) -> list[ResolvedTarget]:
    uuids, _ = split_target_ids(raw_ids)
    tours = Tour.objects.filter(id__in=uuids).values_list("id", "owner_id")
    return [ResolvedTarget(str(tour_id), owner_id) for tour_id, owner_id in tours]


def _profile_resolver(model) -> Callable[[list[str]], list[ResolvedTarget]]:  # type: ignore
    """Profiles are found by their own id or by their user's id."""

    def resolve(raw_ids: list[str]) -> list[ResolvedTarget]:
        uuids, user_ids = split_target_ids(raw_ids)
        profiles = model.objects.filter(Q(id__in=uuids) | Q(user_id__in=user_ids)).values_list("id", "user_id")
        return [ResolvedTarget(str(profile_id), user_id) for profile_id, user_id in profiles]

    return resolve


TARGET_RESOLVERS: dict[str, Callable[[list[str]], list[ResolvedTarget]]] = {
    InquiryTargetType.TOUR: _resolve_tours,
    InquiryTargetType.GUIDE: _profile_resolver(Guide),
    InquiryTargetType.DRIVER: _profile_resolver(Driver),
    InquiryTargetType.COMPANY: _profile_resolver(Company),
}


def resolve_targets(target_type: str, raw_ids: list[str]) -> list[ResolvedTarget]:
    resolver = TARGET_RESOLVERS.get(target_type)
    return resolver(raw_ids) if resolver else []


def _inquiry_queryset() -> QuerySet:
    return Inquiry.objects.select_related("user").prefetch_related("responses__recipient")


def create_inquiry(user_id: int, target_type: str, target_ids: list[str], subject: str, message: str) -> Inquiry:
    """Send an inquiry to every provider behind the given targets.

    Unknown ids are dropped; the stored ids are the resolved entity ids even
    when user ids were passed. One response row is created per recipient.
    """
    targets = resolve_targets(target_type, target_ids)
    if not targets:
        raise BadRequestError("No valid targets found", code="NO_VALID_TARGETS")

    recipient_ids = list(dict.fromkeys(target.user_id for target in targets))
    threshold = getattr(settings, "INQUIRY_PAID_TARGETS_THRESHOLD", 2)
    expiration_days = getattr(settings, "INQUIRY_EXPIRATION_DAYS", 30)

    with DjangoUnitOfWork() as uow:
        inquiry = Inquiry(
            user_id=user_id,
            target_type=target_type,
            subject=subject,
            message=message,
            requires_payment=len(targets) > threshold,
            expires_at=timezone.now() + timedelta(days=expiration_days),
        )
        inquiry.set_target_ids([target.target_id for target in targets])
        inquiry.save()
        InquiryResponse.objects.bulk_create(
            [InquiryResponse(inquiry=inquiry, recipient_id=recipient_id) for recipient_id in recipient_ids]
        )
        uow.collect_event(InquiryCreated(
            aggregate_id=inquiry.id,
            inquiry_id=inquiry.id,
            sender_id=user_id,
            recipient_ids=recipient_ids,
        ))

    logger.info(
        "Inquiry %s created by user %s for %d recipients",
        inquiry.id, user_id, len(recipient_ids),
    )
    return _inquiry_queryset().get(pk=inquiry.pk)


def _find_inquiry(inquiry_id) -> Inquiry:  # type: ignore
    try:
        return _inquiry_queryset().get(pk=inquiry_id)
    except (Inquiry.DoesNotExist, ValidationError, ValueError):
        raise NotFoundError("Inquiry not found", code="INQUIRY_NOT_FOUND")


def get_inquiry_by_id(inquiry_id, user_id: int) -> Inquiry:  # type: ignore
    """Visible to the sender and to every recipient."""
    inquiry = _find_inquiry(inquiry_id)
    is_recipient = any(response.recipient_id == user_id for response in inquiry.responses.all())
    if inquiry.user_id != user_id and not is_recipient:
        raise ForbiddenError("You do not have access to this inquiry")
    return inquiry


def respond_to_inquiry(inquiry_id, recipient_id: int, status: str, message: str | None = None) -> InquiryResponse:  # type: ignore
    """Record a recipient's answer.

    Leaving PENDING updates the recipient's response-time statistic and
    ACCEPTED converts bookable targets into bookings. Both run after commit.
    """
    if status not in ANSWER_STATUSES:
        raise BadRequestError(f"Invalid response status {status}", code="INVALID_INQUIRY_STATUS")

    inquiry = _find_inquiry(inquiry_id)
    response = (
        InquiryResponse.objects.select_related("inquiry", "recipient")
        .filter(inquiry=inquiry, recipient_id=recipient_id)
        .first()
    )
    if response is None:
        raise ForbiddenError("You are not a recipient of this inquiry")

    with DjangoUnitOfWork() as uow:
        response.answer(status, message)
        response.save(update_fields=["status", "message", "responded_at", "updated_at"])
        uow.collect_events(response)

    logger.info("Inquiry %s answered by user %s: %s", inquiry.id, recipient_id, status)
    return response


def get_user_inquiries(user_id: int, page: int, limit: int, filters: dict[str, Any] | None = None) -> Page:
    """Inquiries the user sent, newest first."""
    filters = filters or {}
    queryset = _inquiry_queryset().filter(user_id=user_id)
    if filters.get("target_type"):
        queryset = queryset.filter(target_type=filters["target_type"])
    if filters.get("status"):
        queryset = queryset.filter(responses__status=filters["status"]).distinct()
    return _paginate(queryset, page, limit)


def get_received_inquiries(user_id: int, page: int, limit: int, filters: dict[str, Any] | None = None) -> Page:
    """The user's response rows with their inquiries, newest first."""
    filters = filters or {}
    queryset = InquiryResponse.objects.select_related("inquiry__user", "recipient").filter(recipient_id=user_id)
    if filters.get("status"):
        queryset = queryset.filter(status=filters["status"])
    if filters.get("target_type"):
        queryset = queryset.filter(inquiry__target_type=filters["target_type"])
    return _paginate(queryset, page, limit)


def _paginate(queryset: QuerySet, page: int, limit: int) -> Page:
    offset = (page - 1) * limit
    total = queryset.count()
    return Page(items=list(queryset.order_by("-created_at")[offset:offset + limit]), total_items=total)


def mark_expired_inquiries() -> int:
    """Pending answers of inquiries past their expiry become EXPIRED."""
    updated = InquiryResponse.objects.filter(
        status=InquiryStatus.PENDING,
        inquiry__expires_at__lt=timezone.now(),
    ).update(status=InquiryStatus.EXPIRED, updated_at=timezone.now())
    if updated:
        logger.info("Marked %d inquiry responses as expired", updated)
    return updated
