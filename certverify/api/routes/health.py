"""
Health check endpoints for the certificate service.
"""

import socket
import logging
from typing import Dict, Any

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from certverify.database import check_db_connectivity
from certverify.settings import settings

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get(
    "/health",
    status_code=status.HTTP_200_OK,
    summary="Basic health check",
    description="""
    Quick health check that only confirms the process is serving requests.

    **Response Time:** <10ms

    **Example Response:**
    ```json
    {"status": "OK", "message": "Server is running"}
    ```
    """,
    responses={
        200: {
            "description": "Server is running",
            "content": {
                "application/json": {
                    "example": {"status": "OK", "message": "Server is running"}
                }
            },
        }
    },
)
async def health() -> Dict[str, Any]:
    """Returns basic system health status."""
    return {"status": "OK", "message": "Server is running"}


@router.get("/health/detailed", status_code=status.HTTP_200_OK)
def detailed_health_check() -> Dict[str, Any]:
    """Detailed health check with dependency status"""
    health_status: Dict[str, Any] = {
        "status": "healthy",
        "version": settings.api.version,
        "environment": settings.env,
        "socket": socket.gethostname(),
        "dependencies": {},
    }

    if check_db_connectivity():
        health_status["dependencies"]["database"] = "healthy"
    else:
        health_status["dependencies"]["database"] = "unhealthy"
        health_status["status"] = "degraded"

    return health_status


@router.get("/health/ready", status_code=status.HTTP_200_OK)
def readiness_check():
    """Kubernetes-style readiness probe"""
    if check_db_connectivity():
        return {"status": "ready"}
    return JSONResponse(status_code=503, content={"status": "not_ready"})


@router.get("/health/live", status_code=status.HTTP_200_OK)
async def liveness_check() -> Dict[str, str]:
    """Kubernetes-style liveness probe"""
    return {"status": "alive"}
