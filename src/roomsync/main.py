from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.roomsync.api.middlewares import setup_middlewares
from src.roomsync.api.v1.router import api_router
from src.roomsync.core.config import get_settings
from src.roomsync.core.db import dispose_engine, get_session_factory
from src.roomsync.core.events import create_event_bus
from src.roomsync.core.exceptions import setup_exception_handlers
from src.roomsync.core.health import setup_health_endpoint, setup_metrics
from src.roomsync.core.logging import get_logger, setup_logging
from src.roomsync.temporal.activities._services import build_subscription_service
from src.roomsync.temporal.client import close_temporal_client

logger = get_logger(__name__)


async def resume_grace_periods() -> None:
    """Reschedule grace expiry checks lost while the service was down."""
    try:
        async with get_session_factory()() as session:
            scheduled = await build_subscription_service(session).resume_grace_periods()
        logger.info("Grace periods resumed on startup", scheduled=scheduled)
    except Exception as e:
        logger.error("Failed to resume grace periods on startup", error=str(e))


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Application lifespan - startup and shutdown."""
    settings = get_settings()
    setup_logging(settings.debug)
    logger.info(f"Starting {settings.app_name}")

    app.state.event_bus = create_event_bus()
    if settings.resume_grace_on_startup:
        await resume_grace_periods()

    yield

    logger.info("Closing connections...")
    await close_temporal_client()
    await dispose_engine()
    logger.info("Shutdown complete")


OPENAPI_TAGS = [
    {"name": "accounts", "description": "Sign-in and account lifecycle"},
    {"name": "rooms", "description": "Rooms, membership and the active room"},
    {"name": "invitations", "description": "Invitations and join code redemption"},
    {"name": "demo-codes", "description": "Reusable demo codes (super admin)"},
    {"name": "subscriptions", "description": "Plans, grace periods and the billing webhook"},
    {"name": "transfers", "description": "Room ownership transfers"},
    {"name": "admin", "description": "Directory repair and grace period operations"},
]


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Room access and subscription reconciliation API",
        version="0.1.0",
        openapi_tags=OPENAPI_TAGS,
        lifespan=lifespan,
        docs_url="/docs" if settings.enable_openapi else None,
        redoc_url="/redoc" if settings.enable_openapi else None,
        openapi_url="/openapi.json" if settings.enable_openapi else None,
    )

    setup_exception_handlers(app)
    setup_middlewares(app, settings)

    app.include_router(api_router)

    setup_metrics(app)
    setup_health_endpoint(app)

    return app


app = create_app()
