"""
Inquiry Domain Entities

Statuses, target types and the pure rules around them.
"""

import json
import logging
from uuid import UUID

from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from shared.domain.exceptions import BadRequestError

logger = logging.getLogger(__name__)


class InquiryStatus(models.TextChoices):
    """
    Status of one recipient's answer

    - PENDING -> RESPONDED | ACCEPTED | DECLINED | EXPIRED
    - RESPONDED -> ACCEPTED | DECLINED (a plain reply may be followed up)
    - ACCEPTED and DECLINED are final
    """
    PENDING = 'PENDING', _('Pending')
    RESPONDED = 'RESPONDED', _('Responded')
    ACCEPTED = 'ACCEPTED', _('Accepted')
    DECLINED = 'DECLINED', _('Declined')
    EXPIRED = 'EXPIRED', _('Expired')


ANSWER_STATUSES = (InquiryStatus.RESPONDED, InquiryStatus.ACCEPTED, InquiryStatus.DECLINED)
FINAL_STATUSES = (InquiryStatus.ACCEPTED, InquiryStatus.DECLINED)


class InquiryTargetType(models.TextChoices):
    TOUR = 'TOUR', _('Tour')
    GUIDE = 'GUIDE', _('Guide')
    DRIVER = 'DRIVER', _('Driver')
    COMPANY = 'COMPANY', _('Company')


# Companies receive inquiries but cannot be booked
BOOKABLE_TARGET_TYPES = {
    InquiryTargetType.TOUR: 'TOUR',
    InquiryTargetType.GUIDE: 'GUIDE',
    InquiryTargetType.DRIVER: 'DRIVER',
}


def ensure_can_answer(current_status: str):
    if current_status in FINAL_STATUSES:
        raise BadRequestError(
            f"You have already {current_status.lower()} this inquiry",
            code="INQUIRY_ALREADY_ANSWERED",
        )


def split_target_ids(raw_ids: list[str]) -> tuple[list[UUID], list[int]]:
    """Separate profile/entity ids (UUIDs) from user ids (integers)"""
    uuids: list[UUID] = []
    user_ids: list[int] = []
    for raw in raw_ids:
        value = str(raw).strip()
        if value.isdigit():
            user_ids.append(int(value))
            continue
        try:
            uuids.append(UUID(value))
        except ValueError:
            logger.debug("Ignoring invalid target id %r", raw)
    return uuids, user_ids


def parse_target_ids(raw: str | None, inquiry_id=None) -> list[str]:  # type: ignore
    """Stored JSON array of target ids; malformed data reads as no targets"""
    if not raw:
        return []
    try:
        parsed = json.loads(raw)
    except (TypeError, ValueError):
        logger.warning("Failed to parse target_ids of inquiry %s: %r", inquiry_id, raw)
        return []
    if not isinstance(parsed, list):
        return []
    return [str(value) for value in parsed]
