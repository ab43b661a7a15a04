"""FastAPI application factory."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from group_ordering.api.sessions import router as sessions_router
from group_ordering.api.staff import router as staff_router
from group_ordering.app_logging import configure_logging
from group_ordering.containers import AppContainer
from group_ordering.domain.errors import (
    ConflictError,
    InvalidCredentialError,
    InvalidStateError,
    NotFoundError,
    SessionError,
    StoreUnavailableError,
    ValidationError,
)

_STATUS_CODES: dict[type[SessionError], int] = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ConflictError: status.HTTP_409_CONFLICT,
    InvalidCredentialError: 422,
    InvalidStateError: status.HTTP_409_CONFLICT,
    ValidationError: status.HTTP_400_BAD_REQUEST,
    StoreUnavailableError: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    app = FastAPI()
    app.state.container = container

    app.include_router(sessions_router)
    app.include_router(staff_router)

    @app.exception_handler(SessionError)
    async def session_error_handler(
        request: Request, exc: SessionError
    ) -> JSONResponse:
        status_code = _status_for(exc)
        if isinstance(exc, StoreUnavailableError):
            logger.error(
                "Store unavailable: %s %s", request.method, request.url, exc_info=exc
            )
        return JSONResponse(
            status_code=status_code,
            content=_error_body(container, exc, _public_message(exc)),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "success": False,
                "message": "Invalid request data",
                "errors": [_describe(error) for error in exc.errors()],
            },
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app


def _status_for(exc: SessionError) -> int:
    for error_type in type(exc).__mro__:
        if error_type in _STATUS_CODES:
            return _STATUS_CODES[error_type]
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _public_message(exc: SessionError) -> str:
    """Return the user-facing message for a lifecycle error."""
    if isinstance(exc, InvalidCredentialError):
        return "Invalid OTP or session not found"
    if isinstance(exc, StoreUnavailableError):
        return "Service temporarily unavailable"
    return str(exc)


def _error_body(
    container: AppContainer, exc: SessionError, message: str
) -> dict[str, object]:
    """Build an error envelope with local debug info."""
    body: dict[str, object] = {"success": False, "message": message}
    if container.settings.environment == "local":
        body["error"] = f"{type(exc).__name__}: {exc}"
    return body


def _describe(error: dict[str, object]) -> str:
    location = ".".join(str(part) for part in error.get("loc", ()))
    return f"{location}: {error.get('msg')}"
