"""External collaborators: event bus, billing, identity provider, scheduler."""

from typing import Annotated

from fastapi import Depends, Request

from src.roomsync.core.events import EventBus, create_event_bus
from src.roomsync.core.integrations import (
    EntitlementProvider,
    IdentityProvider,
    get_entitlement_provider,
    get_identity_provider,
)
from src.roomsync.services.subscription_service import GraceScheduler
from src.roomsync.temporal.scheduling import TemporalGraceScheduler


def get_event_bus(request: Request) -> EventBus:
    """The application's event bus, created at startup."""
    bus: EventBus | None = getattr(request.app.state, "event_bus", None)
    if bus is None:
        bus = create_event_bus()
        request.app.state.event_bus = bus
    return bus


def get_entitlements() -> EntitlementProvider:
    return get_entitlement_provider()


def get_identity() -> IdentityProvider:
    return get_identity_provider()


def get_grace_scheduler() -> GraceScheduler:
    return TemporalGraceScheduler()


EventBusDep = Annotated[EventBus, Depends(get_event_bus)]
Entitlements = Annotated[EntitlementProvider, Depends(get_entitlements)]
IdentityProviderDep = Annotated[IdentityProvider, Depends(get_identity)]
Scheduler = Annotated[GraceScheduler, Depends(get_grace_scheduler)]
