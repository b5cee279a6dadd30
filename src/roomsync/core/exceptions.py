"""Domain errors and exception handlers with request_id in responses."""

from typing import ClassVar

from asgi_correlation_id import correlation_id
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.roomsync.core.logging import get_logger

logger = get_logger(__name__)


class RoomSyncError(Exception):
    """Base class for failures surfaced to callers.

    Every public operation either succeeds or raises one of these with a
    human-readable message. ``kind`` is the stable machine-readable tag.
    """

    kind: ClassVar[str] = "error"
    status_code: ClassVar[int] = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(RoomSyncError):
    kind = "not_found"
    status_code = status.HTTP_404_NOT_FOUND


class RoomNotFoundError(NotFoundError):
    kind = "room_not_found"

    def __init__(self, room_id: str):
        super().__init__(f"Room {room_id} does not exist")
        self.room_id = room_id


class InvalidOrExpiredCodeError(RoomSyncError):
    kind = "invalid_or_expired_code"

    def __init__(self, message: str = "Invalid or expired code"):
        super().__init__(message)


class AlreadyRedeemedError(RoomSyncError):
    kind = "already_redeemed"
    status_code = status.HTTP_409_CONFLICT


class QuotaExceededError(RoomSyncError):
    kind = "quota_exceeded"
    status_code = status.HTTP_409_CONFLICT


class PartialWriteError(RoomSyncError):
    """A later write in a non-atomic sequence failed after an earlier one committed."""

    kind = "partial_write_failure"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class EntitlementLookupError(RoomSyncError):
    kind = "entitlement_lookup_failure"
    status_code = status.HTTP_502_BAD_GATEWAY


class ExternalIdentityError(RoomSyncError):
    kind = "external_identity_failure"
    status_code = status.HTTP_502_BAD_GATEWAY


class PermissionDeniedError(RoomSyncError):
    kind = "permission_denied"
    status_code = status.HTTP_403_FORBIDDEN


class ConflictError(RoomSyncError):
    kind = "conflict"
    status_code = status.HTTP_409_CONFLICT


def setup_exception_handlers(app: FastAPI) -> None:
    """Configure exception handlers that include request_id in responses."""

    @app.exception_handler(RoomSyncError)
    async def domain_exception_handler(request: Request, exc: RoomSyncError) -> JSONResponse:
        request_id = correlation_id.get()
        if exc.status_code >= 500:
            logger.error(
                "Operation failed",
                kind=exc.kind,
                error=exc.message,
                request_id=request_id,
                path=request.url.path,
            )
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "detail": exc.message,
                "kind": exc.kind,
                "request_id": request_id,
            },
        )

    @app.exception_handler(StarletteHTTPException)
    async def starlette_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "detail": exc.detail,
                "request_id": correlation_id.get(),
            },
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "detail": exc.detail,
                "request_id": correlation_id.get(),
            },
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        request_id = correlation_id.get()
        logger.exception(
            "Unhandled exception",
            exc_info=exc,
            request_id=request_id,
            path=request.url.path,
        )
        return JSONResponse(
            status_code=500,
            content={
                "detail": "Internal server error",
                "request_id": request_id,
            },
        )
