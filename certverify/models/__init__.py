"""
Models package for the certificate service.
"""

from .users import User
from .certificate import Certificate, CERTIFICATE_STATUSES
from .program import Program, PROGRAM_CATEGORIES, PROGRAM_LEVELS, PROGRAM_STATUSES
from .schemas import AuthUser, LoginRequest, LoginResponse

__all__ = [
    "AuthUser",
    "Certificate",
    "CERTIFICATE_STATUSES",
    "LoginRequest",
    "LoginResponse",
    "Program",
    "PROGRAM_CATEGORIES",
    "PROGRAM_LEVELS",
    "PROGRAM_STATUSES",
    "User",
]
