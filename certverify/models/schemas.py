"""
Pydantic schemas for the auth endpoints.

Certificate and program payloads are deliberately loose (aliases, display
names, spreadsheet shapes) and are handled by the normalizers instead.
"""

from typing import Optional
from pydantic import BaseModel, Field, field_validator


class LoginRequest(BaseModel):
    """Administrator credentials."""

    email: str = Field(
        min_length=3,
        max_length=255,
        description="Administrator email address",
        json_schema_extra={"example": "admin@example.com"},
    )
    password: str = Field(
        min_length=1,
        max_length=128,
        description="Administrator password",
    )

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        v = v.strip().lower()
        if "@" not in v:
            raise ValueError("Please provide a valid email")
        return v


class AuthUser(BaseModel):
    """Public view of an authenticated user."""

    id: str
    email: str
    name: Optional[str] = None
    is_superuser: bool = False


class LoginResponse(BaseModel):
    success: bool = True
    token: str = Field(description="Bearer token for the Authorization header")
    user: AuthUser
