"""
Administrator login, mounted at ``/api/auth``.
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from certverify.api.dependencies import get_current_admin_user, get_db
from certverify.core.auth import authenticate_user, create_access_token
from certverify.exceptions import AuthenticationException
from certverify.metrics import certverify_login_attempts_total
from certverify.models import AuthUser, LoginRequest, LoginResponse, User

logger = logging.getLogger(__name__)

router = APIRouter()


def _public_user(user: User) -> AuthUser:
    return AuthUser(
        id=str(user.id),
        email=user.email,
        name=user.name,
        is_superuser=bool(user.is_superuser),
    )


@router.post("/login", response_model=LoginResponse)
def login(credentials: LoginRequest, db: Session = Depends(get_db)) -> LoginResponse:
    """Exchange email and password for a bearer token."""
    user = authenticate_user(db, credentials.email, credentials.password)
    if user is None:
        certverify_login_attempts_total.labels(result="invalid_credentials").inc()
        logger.warning(f"Failed login for {credentials.email}")
        raise AuthenticationException("Invalid credentials")

    certverify_login_attempts_total.labels(result="success").inc()
    token = create_access_token(user.email)
    return LoginResponse(token=token, user=_public_user(user))


@router.get("/me")
def me(current_user: User = Depends(get_current_admin_user)) -> Dict[str, Any]:
    return {"success": True, "user": _public_user(current_user).model_dump()}
