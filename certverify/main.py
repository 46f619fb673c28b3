"""
Certificate Verification API - Main Application

Clean, modular application setup with middleware configuration.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator
from starlette.exceptions import HTTPException as StarletteHTTPException

from certverify.api import create_api_router
from certverify.middleware.logging import LoggingMiddleware
from certverify.middleware.max_size import MaxSizeMiddleware
from certverify.middleware.security_headers import SecurityHeadersMiddleware
from certverify.settings import settings
from certverify.config_validator import validate_config
from certverify.logging_config import setup_logging

from certverify.exceptions import (
    CertVerifyException,
    certverify_exception_handler,
    generic_exception_handler,
    http_exception_handler,
    request_validation_exception_handler,
)

# Configure structured logging (JSON in production, colored in development)
setup_logging()
logger = logging.getLogger(__name__)


# ------------------------------------------------------------------------------
# Lifespan event handler
# ------------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle application startup and shutdown events."""
    # Startup: Validate environment configuration
    logger.info("Starting application...")
    validate_config()

    yield

    logger.info("Initiating graceful shutdown...")

    try:
        from certverify.database import engine

        engine.dispose()
        logger.info("Closed database connection pool")
    except Exception as e:
        logger.warning(f"Error closing database pool: {e}")

    logger.info("Graceful shutdown complete")


# ------------------------------------------------------------------------------
# FastAPI app setup
# ------------------------------------------------------------------------------

app = FastAPI(
    title=settings.api.title,
    description=settings.api.description,
    version=settings.api.version,
    summary=settings.api.summary,
    lifespan=lifespan,
)

# ------------------------------------------------------------------------------
# Exception Handlers
# ------------------------------------------------------------------------------

app.add_exception_handler(CertVerifyException, certverify_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)

# ------------------------------------------------------------------------------
# Middleware configuration
# ------------------------------------------------------------------------------

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.api.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Request-ID"],
    max_age=600,  # Cache preflight requests for 10 minutes
)

# Custom middleware: request size limiting, structured logging, security headers
app.add_middleware(
    SecurityHeadersMiddleware, enforce_https=settings.env == "production"
)
app.add_middleware(
    MaxSizeMiddleware,
    max_bytes=settings.max_bytes,
    max_upload_bytes=settings.imports.max_file_size,
)
app.add_middleware(LoggingMiddleware)

# ------------------------------------------------------------------------------
# Prometheus metrics
# ------------------------------------------------------------------------------

Instrumentator().instrument(app).expose(app)

# ------------------------------------------------------------------------------
# Routes
# ------------------------------------------------------------------------------

# Include all API routes
api_router = create_api_router()
app.include_router(api_router)

logger.info(f"Application started: {settings.api.title} v{settings.api.version}")
logger.info(f"Environment: {settings.env}")
logger.info(f"Bulk import limit: {settings.imports.max_batch_size} certificates")
