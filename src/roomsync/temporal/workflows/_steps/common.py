"""Activity options shared by the grace period and maintenance workflows."""

from datetime import timedelta
from typing import Any

from temporalio.common import RetryPolicy


def short_activity_opts() -> dict[str, Any]:
    """Single UPDATE/DELETE statements."""
    return {
        "start_to_close_timeout": timedelta(seconds=30),
        "retry_policy": RetryPolicy(maximum_attempts=3, initial_interval=timedelta(seconds=1)),
    }


def long_activity_opts() -> dict[str, Any]:
    """Scans over every account or room."""
    return {
        "start_to_close_timeout": timedelta(minutes=10),
        "retry_policy": RetryPolicy(maximum_attempts=3, initial_interval=timedelta(seconds=2)),
    }


def grace_check_opts() -> dict[str, Any]:
    """The grace expiry check runs once per timer.

    It retries the entitlement lookup itself, and a failed check leaves the
    account in grace for the resume scan to pick up, so Temporal must not
    delete rooms on a second attempt.
    """
    return {
        "start_to_close_timeout": timedelta(minutes=5),
        "retry_policy": RetryPolicy(maximum_attempts=1),
    }
