"""Domain service: Expiry classification.

A derived, never-persisted view of a lot's shelf life.  It is recomputed
on every read against the caller's clock, so a lot moves from NORMAL to
WARNING to CRITICAL to EXPIRED as time passes without any background job.
"""

from __future__ import annotations

import math
from datetime import date, datetime, time, timezone
from enum import Enum


class ExpiryStatus(Enum):
    EXPIRED = "EXPIRED"
    CRITICAL = "CRITICAL"
    WARNING = "WARNING"
    NORMAL = "NORMAL"


CRITICAL_DAYS = 7
WARNING_DAYS = 30

_SECONDS_PER_DAY = 86400


def days_until_expiry(expiry: date | datetime, now: datetime) -> int:
    """Whole days left, rounded down (negative once expired).

    A plain ``date`` means midnight at the start of that day in the
    timezone of *now*.
    """
    expires_at = _as_datetime(expiry, now)
    if (expires_at.tzinfo is None) != (now.tzinfo is None):
        expires_at = _assume_utc(expires_at)
        now = _assume_utc(now)
    delta = expires_at - now
    return math.floor(delta.total_seconds() / _SECONDS_PER_DAY)


def classify_days(days: int) -> ExpiryStatus:
    if days < 0:
        return ExpiryStatus.EXPIRED
    if days <= CRITICAL_DAYS:
        return ExpiryStatus.CRITICAL
    if days <= WARNING_DAYS:
        return ExpiryStatus.WARNING
    return ExpiryStatus.NORMAL


def classify(expiry: date | datetime, now: datetime) -> ExpiryStatus:
    return classify_days(days_until_expiry(expiry, now))


def _as_datetime(value: date | datetime, now: datetime) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.combine(value, time.min, tzinfo=now.tzinfo)


def _assume_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
