"""
Administrator authentication: bcrypt password hashes and HS256 bearer tokens.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import bcrypt
import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.orm import Session

from certverify.database import get_db
from certverify.exceptions import AuthenticationException
from certverify.models.users import User
from certverify.settings import settings

logger = logging.getLogger(__name__)

# auto_error=False so a missing header goes through our 401 envelope
bearer_scheme = HTTPBearer(auto_error=False)


def get_password_hash(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, hashed_password: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def create_access_token(
    subject: str,
    expires_delta: Optional[timedelta] = None,
    extra_claims: Optional[Dict[str, Any]] = None,
) -> str:
    """Issue a signed access token for ``subject`` (the user's email)."""
    now = datetime.now(timezone.utc)
    expire = now + (
        expires_delta or timedelta(minutes=settings.auth.access_token_expire_minutes)
    )
    payload: Dict[str, Any] = {"sub": subject, "iat": now, "exp": expire}
    if extra_claims:
        payload.update(extra_claims)
    return jwt.encode(payload, settings.auth.jwt_secret, algorithm=settings.auth.jwt_algorithm)


def decode_access_token(token: str) -> Dict[str, Any]:
    """Verify signature and expiry.

    Raises:
        AuthenticationException: If the token is invalid or expired
    """
    try:
        return jwt.decode(
            token, settings.auth.jwt_secret, algorithms=[settings.auth.jwt_algorithm]
        )
    except jwt.ExpiredSignatureError:
        raise AuthenticationException("Token has expired")
    except jwt.InvalidTokenError:
        raise AuthenticationException("Not authorized, token failed")


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.execute(
        select(User).where(User.email == email.strip().lower())
    ).scalar_one_or_none()


def authenticate_user(db: Session, email: str, password: str) -> Optional[User]:
    """Return the active user matching the credentials, or None."""
    user = get_user_by_email(db, email)
    if user is None or not user.is_active:
        return None
    if not verify_password(password, user.hashed_password):
        return None
    return user


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    if credentials is None or not credentials.credentials:
        raise AuthenticationException("Not authorized, no token")

    payload = decode_access_token(credentials.credentials)
    email = payload.get("sub")
    if not email:
        raise AuthenticationException("Not authorized, token failed")

    user = get_user_by_email(db, email)
    if user is None or not user.is_active:
        logger.warning(f"Token presented for unknown or inactive user: {email}")
        raise AuthenticationException("Not authorized, user not found")
    return user


def get_current_admin_user(current_user: User = Depends(get_current_user)) -> User:
    """Dependency for routes that change data."""
    if not current_user.is_superuser:
        raise AuthenticationException("Not authorized as an admin")
    return current_user
