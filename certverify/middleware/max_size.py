from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse
from fastapi import Request

# Allowance for multipart boundaries and form headers around the file
MULTIPART_OVERHEAD = 64 * 1024


class MaxSizeMiddleware(BaseHTTPMiddleware):
    """
    Starlette/FastAPI middleware to enforce a maximum allowed HTTP body size.
    Returns HTTP 413 if Content-Length exceeds the configured byte limit.

    Args:
        app: The ASGI app to wrap.
        max_bytes (int): Maximum allowed JSON request body size in bytes.
        max_upload_bytes (int): Maximum allowed multipart upload size in bytes.
    """

    METHODS = ("POST", "PUT", "PATCH")

    def __init__(self, app, max_bytes: int, max_upload_bytes: int = None):
        super().__init__(app)
        self.max_bytes = max_bytes
        self.max_upload_bytes = (max_upload_bytes or max_bytes) + MULTIPART_OVERHEAD

    async def dispatch(self, request: Request, call_next):
        """
        Checks Content-Length on body-carrying requests, returning 413 if over limit.
        """
        if request.method in self.METHODS:
            content_type = request.headers.get("content-type", "")
            limit = (
                self.max_upload_bytes
                if content_type.startswith("multipart/form-data")
                else self.max_bytes
            )
            cl = request.headers.get("content-length")
            if cl is not None:
                try:
                    n = int(cl)
                except ValueError:
                    n = None
                if n is not None and n > limit:
                    # IMPORTANT: return a response, don't raise here
                    return JSONResponse(
                        {"success": False, "message": "Payload too large"},
                        status_code=413,
                    )
        return await call_next(request)
