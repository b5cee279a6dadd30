"""Tests for the naive UTC time helpers used by every model."""

from datetime import UTC, datetime, timedelta

import pytest

from src.roomsync.models import Account
from src.roomsync.models.base import days_from_now, has_passed, utc_now

pytestmark = pytest.mark.unit


def test_utc_now_is_naive_utc():
    now = utc_now()

    assert now.tzinfo is None
    assert abs(now - datetime.now(UTC).replace(tzinfo=None)) < timedelta(seconds=5)


def test_model_timestamps_are_naive():
    account = Account(name="Ada")

    assert account.created_at.tzinfo is None
    assert account.updated_at.tzinfo is None


def test_days_from_now():
    assert days_from_now(7) - utc_now() > timedelta(days=6, hours=23)
    assert days_from_now(-1) < utc_now()


def test_has_passed():
    assert has_passed(days_from_now(-1)) is True
    assert has_passed(days_from_now(1)) is False
    assert has_passed(None) is False
