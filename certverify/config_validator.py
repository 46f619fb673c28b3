"""
Environment variable validation for the certificate service.

Validates that required environment variables are set before the application
starts, and warns about insecure placeholder values.

Called automatically during application startup in certverify/main.py.
"""

import os
import sys
import logging
from typing import List, Tuple

logger = logging.getLogger(__name__)

# ==============================================================================
# Required Environment Variables
# ==============================================================================

# Critical security variables (MUST be set)
REQUIRED_VARS = [
    "JWT_SECRET",
]

# Production-only variables (warnings if not set in production)
PRODUCTION_VARS = [
    "ALLOWED_ORIGINS",
    "DATABASE_URL",
]

# Insecure default values that must be changed
INSECURE_DEFAULTS = {
    "JWT_SECRET": [
        "change-me",
        "secret",
        "your_jwt_secret",
        "change-me-to-a-secure-random-key",
    ],
    "ADMIN_PASSWORD": [
        "admin",
        "admin123",
        "password",
    ],
}

# ==============================================================================
# Documentation of All Environment Variables
# ==============================================================================

ENV_VAR_DOCUMENTATION = """
# ==============================================================================
# ENVIRONMENT VARIABLES REFERENCE
# ==============================================================================

## CRITICAL (Required for application to start)
- JWT_SECRET: HMAC secret used to sign admin bearer tokens

## Authentication
- JWT_ALGORITHM: Token signing algorithm (default HS256)
- JWT_EXPIRE_MINUTES: Token lifetime in minutes (default 1440)
- ADMIN_EMAIL / ADMIN_PASSWORD / ADMIN_NAME: used by scripts/create_admin.py

## Database
- DATABASE_URL: Full SQLAlchemy URL (overrides the POSTGRES_* parts)
- POSTGRES_USER, POSTGRES_PASSWORD, POSTGRES_HOST, POSTGRES_PORT, POSTGRES_DB
- DB_POOL_SIZE, DB_MAX_OVERFLOW: connection pool sizing

## Imports
- IMPORT_MAX_BATCH_SIZE: Maximum certificates per bulk request (default 1000)
- UPLOAD_MAX_FILE_SIZE: Maximum spreadsheet upload in bytes (default 5MB)
- UPLOAD_ALLOWED_EXTENSIONS: Accepted workbook extensions (default xlsx,xlsm)

## HTTP & CORS
- ALLOWED_ORIGINS: Allowed CORS origins (comma separated)
- MAX_BYTES: Maximum JSON request body size

## General
- ENV: Environment type (production, development, test)
- LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)

For complete documentation, see certverify/settings.py.
"""


def validate_config() -> None:
    """
    Validate required environment variables are set and configured properly.

    This function:
    1. Checks that all critical variables are set
    2. Warns about insecure defaults
    3. Warns about missing production variables
    4. Exits with error code 1 if critical variables are missing

    Raises:
        SystemExit: If any required variables are missing
    """
    missing_vars: List[str] = []
    insecure_vars: List[Tuple[str, str]] = []

    # 1. Check required variables
    for var in REQUIRED_VARS:
        val = os.getenv(var)
        if not val:
            missing_vars.append(var)
        elif val in INSECURE_DEFAULTS.get(var, []):
            insecure_vars.append((var, val))

    admin_pass = os.getenv("ADMIN_PASSWORD", "")
    if admin_pass and admin_pass in INSECURE_DEFAULTS["ADMIN_PASSWORD"]:
        insecure_vars.append(("ADMIN_PASSWORD", admin_pass))

    # 2. Report critical errors (missing variables)
    if missing_vars:
        logger.critical("=" * 80)
        logger.critical("STARTUP FAILED: Missing required environment variables")
        logger.critical("=" * 80)
        for var in missing_vars:
            logger.error(f"  ✗ {var} is not set")
        logger.critical("")
        logger.critical("Action required:")
        logger.critical("  1. Copy .env.example to .env")
        logger.critical("  2. Fill in all required values")
        logger.critical("  3. Generate secure keys where indicated")
        logger.critical("=" * 80)
        sys.exit(1)

    # 3. Warn about insecure defaults (non-fatal)
    if insecure_vars:
        logger.warning("=" * 80)
        logger.warning("SECURITY WARNING: Using insecure default values!")
        logger.warning("=" * 80)
        for var, _ in insecure_vars:
            logger.warning(f"  ⚠ {var} is set to a default placeholder")
        logger.warning("Generate secure values:")
        logger.warning("  JWT_SECRET: openssl rand -hex 32")
        logger.warning("=" * 80)

    # 4. Check production-specific configuration
    env = os.getenv("ENV", "development")
    if env == "production":
        missing_prod_vars = [var for var in PRODUCTION_VARS if not os.getenv(var)]

        if missing_prod_vars:
            logger.warning("=" * 80)
            logger.warning(
                "PRODUCTION WARNING: Missing recommended production variables"
            )
            logger.warning("=" * 80)
            for var in missing_prod_vars:
                logger.warning(f"  ⚠ {var} is not set")
            logger.warning("=" * 80)

        allowed_origins = os.getenv("ALLOWED_ORIGINS", "")
        if "localhost" in allowed_origins:
            logger.warning(
                "⚠ ALLOWED_ORIGINS includes localhost in production - potential security risk!"
            )

    # 5. Success message
    logger.info("=" * 80)
    logger.info("✅ Environment configuration validated successfully")
    logger.info(f"Environment: {env}")
    logger.info(
        f"Import batch limit: {os.getenv('IMPORT_MAX_BATCH_SIZE', '1000')} certificates"
    )
    logger.info("=" * 80)


def print_env_documentation() -> None:
    """Print complete environment variable documentation."""
    print(ENV_VAR_DOCUMENTATION)


if __name__ == "__main__":
    # Allow running this module directly to print documentation
    print_env_documentation()
