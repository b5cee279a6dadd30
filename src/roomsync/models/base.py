from datetime import UTC, datetime, timedelta

# Timestamps are stored as naive UTC (TIMESTAMP WITHOUT TIME ZONE).


def utc_now() -> datetime:
    return datetime.now(UTC).replace(tzinfo=None)


def days_from_now(days: int) -> datetime:
    """Naive UTC moment `days` from now; negative values reach into the past."""
    return utc_now() + timedelta(days=days)


def has_passed(moment: datetime | None) -> bool:
    """True once `moment` is at or before now. A missing moment never passes."""
    return moment is not None and moment <= utc_now()
