import logging
import traceback
from typing import Any, Dict, List, Optional

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from certverify.settings import settings

logger = logging.getLogger(__name__)


class CertVerifyException(Exception):
    """Base exception for the certificate service.

    ``extra`` is merged into the JSON error body next to ``success`` and
    ``message`` (e.g. an ``example`` payload for malformed requests).
    """

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        extra: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.extra = extra or {}
        super().__init__(self.message)


class ValidationException(CertVerifyException):
    """Input-shape defects reported as a list"""

    def __init__(
        self,
        errors: List[str],
        message: str = "Validation failed",
        extra: Optional[Dict[str, Any]] = None,
    ):
        self.errors = list(errors)
        super().__init__(message, status_code=400, extra={"errors": self.errors, **(extra or {})})


class BadRequestException(CertVerifyException):
    """Malformed request envelope"""

    def __init__(self, message: str, extra: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code=400, extra=extra)


class BatchTooLargeError(BadRequestException):
    """Bulk request above the configured batch size"""

    def __init__(self, limit: int, extra: Optional[Dict[str, Any]] = None):
        self.limit = limit
        super().__init__(
            f"Bulk insert limited to {limit} certificates at a time. "
            "Please split your data into smaller batches.",
            extra=extra,
        )


class AuthenticationException(CertVerifyException):
    """Missing, invalid or expired bearer token"""

    def __init__(self, message: str = "Not authorized"):
        super().__init__(message, status_code=401)


class NotFoundException(CertVerifyException):
    """Natural key or id not present in the store"""

    def __init__(self, message: str = "Not found"):
        super().__init__(message, status_code=404)


class ConflictException(CertVerifyException):
    """Natural key already taken"""

    def __init__(self, message: str = "Resource already exists"):
        super().__init__(message, status_code=409)


async def certverify_exception_handler(request: Request, exc: CertVerifyException):
    """Handle custom service exceptions"""
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        f"{exc.__class__.__name__}: {exc.message}",
        extra={
            "path": request.url.path,
            "method": request.method,
            "client_ip": request.client.host if request.client else None,
        },
    )

    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": exc.message, **exc.extra},
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Render framework HTTP errors in the service envelope"""
    if exc.status_code == 404 and exc.detail == "Not Found":
        message = "Route not found"
    else:
        message = str(exc.detail)

    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": message},
        headers=getattr(exc, "headers", None),
    )


async def request_validation_exception_handler(
    request: Request, exc: RequestValidationError
):
    """Turn FastAPI body/query validation errors into 400 responses"""
    errors = exc.errors()

    if any(error.get("type") == "json_invalid" for error in errors):
        logger.warning(f"JSON parse error on {request.method} {request.url.path}")
        return JSONResponse(
            status_code=400,
            content={
                "success": False,
                "message": "Invalid JSON format in request body",
                "hint": "Please check your JSON syntax. Make sure all strings are "
                "properly quoted and there are no trailing commas.",
            },
        )

    messages = []
    for error in errors:
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        messages.append(f"{location}: {error.get('msg')}" if location else error.get("msg"))

    return JSONResponse(
        status_code=400,
        content={"success": False, "message": "Validation failed", "errors": messages},
    )


async def generic_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions"""
    logger.exception(
        f"Unexpected error: {str(exc)}",
        extra={
            "path": request.url.path,
            "method": request.method,
        },
    )

    content: Dict[str, Any] = {"success": False, "message": "Something went wrong!"}
    # Stack traces only leave the process in development
    if settings.is_development:
        content["error"] = "".join(
            traceback.format_exception(type(exc), exc, exc.__traceback__)
        )

    return JSONResponse(status_code=500, content=content)
