"""
Error Handler Middleware

Provides consistent error handling and response formatting.
Logs errors with correlation IDs for debugging.

Error bodies are always {"message": ..., "code": ...}; 500s also
carry the correlation ID. Stack traces and database messages never
reach the client.
"""

from uuid import uuid4

from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from hervoice.config.logging_config import get_logger, bind_correlation_id, clear_context
from hervoice.domain.errors import (
    AuthError,
    DuplicateUserError,
    InternalError,
    InvalidCredentialsError,
    InvalidTokenError,
    MissingTokenError,
    UserNotFoundError,
    ValidationError,
)
from hervoice.infrastructure.monitoring import capture_exception_with_context

logger = get_logger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"

STATUS_BY_ERROR: dict[type[AuthError], int] = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    DuplicateUserError: status.HTTP_409_CONFLICT,
    InvalidCredentialsError: status.HTTP_401_UNAUTHORIZED,
    MissingTokenError: status.HTTP_401_UNAUTHORIZED,
    InvalidTokenError: status.HTTP_401_UNAUTHORIZED,
    UserNotFoundError: status.HTTP_401_UNAUTHORIZED,
    InternalError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def status_for(error: AuthError) -> int:
    """Map an error to its HTTP status, walking the class hierarchy."""
    for cls in type(error).__mro__:
        if cls in STATUS_BY_ERROR:
            return STATUS_BY_ERROR[cls]
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _correlation_id(request: Request) -> str:
    return getattr(request.state, "correlation_id", None) or str(uuid4())


def _internal_error_response(correlation_id: str) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "message": InternalError.default_message,
            "code": InternalError.code,
            "correlation_id": correlation_id,
        },
        headers={CORRELATION_HEADER: correlation_id},
    )


async def auth_error_handler(request: Request, exc: AuthError) -> JSONResponse:
    """Translate account-flow errors into HTTP responses."""
    status_code = status_for(exc)
    if status_code >= 500:
        correlation_id = _correlation_id(request)
        logger.error(
            "Account operation failed",
            path=request.url.path,
            error_type=type(exc).__name__,
        )
        capture_exception_with_context(exc, correlation_id=correlation_id)
        return _internal_error_response(correlation_id)

    return JSONResponse(
        status_code=status_code,
        content={"message": exc.message, "code": exc.code},
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed bodies as 400 instead of FastAPI's default 422."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": "Invalid request body.", "code": ValidationError.code},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the error taxonomy handlers on an application."""
    app.add_exception_handler(AuthError, auth_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Global error handling middleware.

    Provides:
    - Correlation ID tracking for all requests
    - Sanitized 500 responses for unhandled exceptions
    - Error logging and Sentry reporting with context
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        """Process request with error handling."""
        correlation_id = request.headers.get(CORRELATION_HEADER) or str(uuid4())
        request.state.correlation_id = correlation_id
        bind_correlation_id(correlation_id)

        try:
            response = await call_next(request)
            response.headers[CORRELATION_HEADER] = correlation_id
            return response

        except Exception as e:
            logger.exception(
                "Unhandled exception",
                path=request.url.path,
                method=request.method,
                error_type=type(e).__name__,
            )
            capture_exception_with_context(e, correlation_id=correlation_id)
            return _internal_error_response(correlation_id)

        finally:
            clear_context()
