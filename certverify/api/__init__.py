"""
API layer for the certificate service.

Contains FastAPI routes and HTTP-related functionality.
"""

from fastapi import APIRouter
from certverify.api.routes import auth, certificates, health, programs, verify


def create_api_router() -> APIRouter:
    """Create the main API router with all sub-routers included."""
    api_router = APIRouter()

    api_router.include_router(health.router, tags=["Health"])
    api_router.include_router(verify.router, prefix="/api/verify", tags=["Certificates"])
    api_router.include_router(
        certificates.router, prefix="/api/certificates", tags=["Certificates"]
    )
    api_router.include_router(programs.router, prefix="/api/programs", tags=["Programs"])
    api_router.include_router(auth.router, prefix="/api/auth", tags=["Auth"])

    return api_router


__all__ = ["create_api_router"]
