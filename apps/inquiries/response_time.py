"""Provider response-time statistic.

Each guide, driver and company profile keeps a rolling average of how many
minutes the provider needs to answer an inquiry, together with the number
of answers it is based on. Only the previous average and the count are
stored; every update rounds once, so the result is a step-wise average.
"""

from __future__ import annotations

import logging
import math
from datetime import datetime

from django.db import transaction  # type: ignore

from apps.catalog.models import Company, Driver, Guide

logger = logging.getLogger(__name__)

PROFILE_MODELS = (Guide, Driver, Company)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves towards positive infinity.

    ``round()`` rounds halves to even (``round(8.5) == 8``); the statistic
    needs ``8.5 -> 9``.
    """
    return math.floor(value + 0.5)


def response_time_minutes(asked_at: datetime, answered_at: datetime) -> int:
    return round_half_up((answered_at - asked_at).total_seconds() / 60)


def apply_response_time(avg: int | None, count: int, minutes: int) -> tuple[int, int]:
    """Fold one response time into ``(avg, count)`` and return the new pair."""
    if avg is None or count == 0:
        return minutes, count + 1
    return round_half_up((avg * count + minutes) / (count + 1)), count + 1


def update_provider_response_times(user_id: int, minutes: int) -> int:
    """Update every provider profile the user holds. Returns how many were updated."""
    updated = 0
    for model in PROFILE_MODELS:
        profile = model.objects.filter(user_id=user_id).first()
        if profile is None:
            continue
        profile.avg_response_time_minutes, profile.response_count = apply_response_time(
            profile.avg_response_time_minutes, profile.response_count, minutes
        )
        profile.save(update_fields=["avg_response_time_minutes", "response_count"])
        updated += 1
        logger.info(
            "Response time of %s %s updated: avg=%s count=%s",
            model.__name__, profile.pk, profile.avg_response_time_minutes, profile.response_count,
        )
    return updated


def track_response(user_id: int, asked_at: datetime, answered_at: datetime) -> int:
    minutes = response_time_minutes(asked_at, answered_at)
    with transaction.atomic():
        return update_provider_response_times(user_id, minutes)
