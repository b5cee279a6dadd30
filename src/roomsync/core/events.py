"""Typed in-process publish/subscribe.

Services publish domain events after their transaction commits. Delivery is
best-effort: handlers run in subscription order, a failing handler is logged
and skipped, nothing is persisted or replayed.
"""

import inspect
from collections import defaultdict
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

from src.roomsync.core.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Event:
    """Base class for all domain events."""

    account_id: UUID


@dataclass(frozen=True)
class AccountSignedIn(Event):
    created: bool = False


@dataclass(frozen=True)
class RoomJoined(Event):
    room_id: str = ""
    is_admin: bool = False
    via: str = "invitation"  # invitation, demo_code, created, transfer


@dataclass(frozen=True)
class SubscriptionUpdated(Event):
    plan: str = "none"
    room_quota: int = 0


@dataclass(frozen=True)
class SubscriptionCancelled(Event):
    grace_period_end: datetime | None = None


@dataclass(frozen=True)
class SubscriptionReactivated(Event):
    plan: str = "none"


@dataclass(frozen=True)
class RoomsDeletedAfterGracePeriod(Event):
    room_ids: tuple[str, ...] = field(default_factory=tuple)


Handler = Callable[[Event], Awaitable[None] | None]


class EventBus:
    """Dispatches events to handlers registered for their type.

    Handlers registered for a base class also receive its subclasses, so
    subscribing to :class:`Event` observes everything.
    """

    def __init__(self) -> None:
        self._handlers: dict[type[Event], list[Handler]] = defaultdict(list)

    def subscribe(self, event_type: type[Event], handler: Handler) -> Callable[[], None]:
        """Register ``handler`` and return a callable that removes it."""
        self._handlers[event_type].append(handler)

        def unsubscribe() -> None:
            if handler in self._handlers[event_type]:
                self._handlers[event_type].remove(handler)

        return unsubscribe

    async def publish(self, event: Event) -> None:
        for event_type in type(event).__mro__:
            for handler in list(self._handlers.get(event_type, ())):
                try:
                    result = handler(event)
                    if inspect.isawaitable(result):
                        await result
                except Exception as e:
                    logger.warning(
                        "Event handler failed",
                        event_type=type(event).__name__,
                        handler=getattr(handler, "__name__", repr(handler)),
                        error=str(e),
                    )


def log_event(event: Event) -> None:
    """Default subscriber: record every event in the structured log."""
    logger.info(
        "Domain event",
        event_type=type(event).__name__,
        account_id=str(event.account_id),
    )


def create_event_bus() -> EventBus:
    """Create a bus with the default subscribers attached."""
    bus = EventBus()
    bus.subscribe(Event, log_event)
    return bus
