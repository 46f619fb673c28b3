"""Core services shared across routes."""

from certverify.core.auth import (
    authenticate_user,
    create_access_token,
    get_current_admin_user,
    get_password_hash,
)

__all__ = [
    "authenticate_user",
    "create_access_token",
    "get_current_admin_user",
    "get_password_hash",
]
