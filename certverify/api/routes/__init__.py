"""
API routes for the certificate service.
"""

from certverify.api.routes import auth, certificates, health, programs, verify

__all__ = ["auth", "certificates", "health", "programs", "verify"]
