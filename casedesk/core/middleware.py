"""
Exception handlers and ASGI middleware.

Every error leaves the API in the same envelope:
``{"success": false, "error": {"code": ..., "message": ...}}``.
"""

import time
import traceback
import uuid

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from casedesk.core.config import settings
from casedesk.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    BusinessRuleError,
    CaseDeskError,
    FileTooLargeError,
    InvalidFileTypeError,
    ResourceAlreadyExistsError,
    ResourceNotFoundError,
    StorageError,
    ValidationError,
)

logger = structlog.get_logger()

# Checked in order, so subclasses come before their parents.
STATUS_MAP: list[tuple[type[CaseDeskError], int]] = [
    (AuthenticationError, status.HTTP_401_UNAUTHORIZED),
    (AuthorizationError, status.HTTP_403_FORBIDDEN),
    (ResourceNotFoundError, status.HTTP_404_NOT_FOUND),
    (ResourceAlreadyExistsError, status.HTTP_409_CONFLICT),
    (ValidationError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (BusinessRuleError, status.HTTP_400_BAD_REQUEST),
    (FileTooLargeError, status.HTTP_413_REQUEST_ENTITY_TOO_LARGE),
    (InvalidFileTypeError, status.HTTP_415_UNSUPPORTED_MEDIA_TYPE),
    (StorageError, status.HTTP_500_INTERNAL_SERVER_ERROR),
]

HTTP_ERROR_CODES = {
    400: "BAD_REQUEST",
    401: "AUTH_ERROR",
    403: "AUTHORIZATION_ERROR",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "ALREADY_EXISTS",
    413: "REQUEST_TOO_LARGE",
}


def create_error_response(
    status_code: int,
    code: str,
    message: str,
    details: dict | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Build the standard error envelope."""
    content = {
        "success": False,
        "error": {
            "code": code,
            "message": message,
        },
    }
    if details and settings.DEBUG:
        content["error"]["details"] = details

    return JSONResponse(status_code=status_code, content=content, headers=headers)


def status_for(exc: CaseDeskError) -> int:
    for exc_type, http_status in STATUS_MAP:
        if isinstance(exc, exc_type):
            return http_status
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def casedesk_exception_handler(request: Request, exc: CaseDeskError) -> JSONResponse:
    status_code = status_for(exc)
    log = logger.error if status_code >= 500 else logger.warning
    log(
        "request failed",
        code=exc.code,
        message=exc.message,
        path=request.url.path,
        status_code=status_code,
    )

    headers = None
    if status_code == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}

    return create_error_response(
        status_code=status_code,
        code=exc.code,
        message=exc.message,
        details=exc.details,
        headers=headers,
    )


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return create_error_response(
        status_code=exc.status_code,
        code=HTTP_ERROR_CODES.get(exc.status_code, "HTTP_ERROR"),
        message=message,
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid request")
    if location:
        message = f"{location}: {message}"

    content = {
        "success": False,
        "error": {
            "code": "VALIDATION_ERROR",
            "message": message,
            "fields": [
                {
                    "loc": [str(part) for part in err.get("loc", ())],
                    "msg": err.get("msg"),
                }
                for err in errors
            ],
        },
    }
    return JSONResponse(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, content=content)


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled exception",
        exc_type=type(exc).__name__,
        message=str(exc),
        path=request.url.path,
        traceback=traceback.format_exc() if settings.DEBUG else None,
    )

    message = "Internal server error"
    details = None

    if settings.DEBUG:
        message = str(exc)
        details = {"traceback": traceback.format_exc()}

    return create_error_response(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        code="INTERNAL_ERROR",
        message=message,
        details=details,
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the application."""
    app.add_exception_handler(CaseDeskError, casedesk_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)


class RequestContextMiddleware:
    """
    Binds a short request id plus path and method to the structlog context
    and logs one line per completed request.

    The id is echoed back in the ``x-request-id`` response header.
    """

    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = str(uuid.uuid4())[:8]

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            path=scope.get("path", ""),
            method=scope.get("method", ""),
        )

        started = time.perf_counter()
        status_code = 500

        async def send_wrapper(message):
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
                headers = list(message.get("headers", []))
                headers.append((b"x-request-id", request_id.encode()))
                message["headers"] = headers
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            logger.info(
                "request completed",
                status_code=status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 1),
            )


class BodySizeLimitMiddleware:
    """Rejects requests whose declared body exceeds ``max_body_bytes``."""

    def __init__(self, app, max_body_bytes: int):
        self.app = app
        self.max_body_bytes = max_body_bytes

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        for name, value in scope.get("headers", []):
            if name == b"content-length":
                try:
                    declared = int(value)
                except ValueError:
                    declared = 0
                if declared > self.max_body_bytes:
                    logger.warning(
                        "request body too large",
                        declared_bytes=declared,
                        limit_bytes=self.max_body_bytes,
                    )
                    response = create_error_response(
                        status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                        code="REQUEST_TOO_LARGE",
                        message=f"Request body must be under {self.max_body_bytes // (1024 * 1024)}MB",
                    )
                    await response(scope, receive, send)
                    return
                break

        await self.app(scope, receive, send)
