"""Unit tests for the expiry classifier."""

from datetime import date, datetime, timedelta, timezone

import pytest

from wms.domain.service.expiry import (
    ExpiryStatus,
    classify,
    classify_days,
    days_until_expiry,
)

NOW = datetime(2026, 3, 1, tzinfo=timezone.utc)


def _in_days(days: int) -> date:
    return NOW.date() + timedelta(days=days)


class TestBoundaries:

    @pytest.mark.parametrize(
        "days, expected",
        [
            (-1, ExpiryStatus.EXPIRED),
            (0, ExpiryStatus.CRITICAL),
            (7, ExpiryStatus.CRITICAL),
            (8, ExpiryStatus.WARNING),
            (30, ExpiryStatus.WARNING),
            (31, ExpiryStatus.NORMAL),
        ],
    )
    def test_tier_at_boundary(self, days, expected):
        assert classify(_in_days(days), NOW) == expected

    def test_far_past_is_expired(self):
        assert classify(_in_days(-400), NOW) == ExpiryStatus.EXPIRED

    def test_classify_days_matches_classify(self):
        for days in range(-3, 40):
            assert classify_days(days) == classify(_in_days(days), NOW)


class TestDaysUntilExpiry:

    def test_whole_days_at_midnight(self):
        assert days_until_expiry(_in_days(10), NOW) == 10

    def test_partial_day_rounds_down(self):
        noon = NOW + timedelta(hours=12)
        # 9.5 days left
        assert days_until_expiry(_in_days(10), noon) == 9

    def test_expiry_earlier_today_is_negative(self):
        noon = NOW + timedelta(hours=12)
        assert days_until_expiry(_in_days(0), noon) == -1
        assert classify(_in_days(0), noon) == ExpiryStatus.EXPIRED

    def test_accepts_datetime_expiry(self):
        expires_at = NOW + timedelta(days=5, hours=3)
        assert days_until_expiry(expires_at, NOW) == 5

    def test_naive_and_aware_inputs_are_compared_in_utc(self):
        naive_now = datetime(2026, 3, 1)
        aware_expiry = datetime(2026, 3, 9, tzinfo=timezone.utc)
        assert days_until_expiry(aware_expiry, naive_now) == 8


class TestPurity:

    def test_same_inputs_same_result(self):
        expiry = _in_days(12)
        results = {classify(expiry, NOW) for _ in range(5)}
        assert results == {ExpiryStatus.WARNING}

    def test_tier_moves_with_the_clock(self):
        expiry = _in_days(31)
        assert classify(expiry, NOW) == ExpiryStatus.NORMAL
        assert classify(expiry, NOW + timedelta(days=1)) == ExpiryStatus.WARNING
        assert classify(expiry, NOW + timedelta(days=24)) == ExpiryStatus.CRITICAL
        assert classify(expiry, NOW + timedelta(days=32)) == ExpiryStatus.EXPIRED
