"""Rolling average of provider response times."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from apps.inquiries.response_time import apply_response_time, response_time_minutes, round_half_up


@pytest.mark.parametrize(
    ("avg", "count", "minutes", "expected"),
    [
        (None, 0, 30, (30, 1)),
        (30, 1, 90, (60, 2)),
        (60, 2, 120, (80, 3)),
        (10, 1, 7, (9, 2)),
        (5, 2, 1, (4, 3)),
        (2880, 1, 0, (1440, 2)),
        (100, 0, 50, (50, 1)),
    ],
)
def test_single_update(avg, count, minutes, expected) -> None:
    assert apply_response_time(avg, count, minutes) == expected


@pytest.mark.parametrize(
    ("samples", "expected"),
    [
        ([10, 20, 30, 40, 50, 60, 70, 80, 90, 100], (55, 10)),
        ([1, 2, 3, 4, 5], (3, 5)),
        ([1] * 9 + [1000], (101, 10)),
    ],
)
def test_sequence_of_updates(samples, expected) -> None:
    avg, count = None, 0
    for minutes in samples:
        avg, count = apply_response_time(avg, count, minutes)
    assert (avg, count) == expected


def test_halves_round_up() -> None:
    assert round_half_up(8.5) == 9
    assert round_half_up(2.5) == 3
    assert round_half_up(2.4) == 2


def test_response_time_minutes() -> None:
    asked = datetime(2030, 6, 1, 9, 0, tzinfo=timezone.utc)

    assert response_time_minutes(asked, asked + timedelta(minutes=45, seconds=30)) == 46
    assert response_time_minutes(asked, asked + timedelta(days=2)) == 2880
    assert response_time_minutes(asked, asked + timedelta(seconds=20)) == 0
