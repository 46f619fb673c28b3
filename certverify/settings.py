"""
Application settings for the certificate verification service.

Loads configuration from environment variables (.env file) with sensible defaults.
All settings can be overridden via environment variables.
"""

import os
from pydantic import BaseModel, Field, field_validator, ConfigDict
from typing import List, Set
from dotenv import load_dotenv

# Load .env file if present
load_dotenv()


class APISettings(BaseModel):
    """API and server settings."""

    title: str = Field(default="Certificate Verification API", description="API title")
    description: str = Field(
        default="Internship certificate issuance, bulk import and verification, plus the program catalog.",
        description="API description",
    )
    version: str = Field(default="1.2.0", description="API version")
    summary: str = Field(
        default="Certificates, bulk imports and programs.", description="API summary"
    )
    cors_origins: List[str] = Field(
        default_factory=lambda: [
            url.strip()
            for url in os.getenv(
                "ALLOWED_ORIGINS",
                "http://localhost:3000,http://localhost:5173",
            ).split(",")
            if url.strip()
        ],
        description="Allowed CORS origins",
    )


class DatabaseSettings(BaseModel):
    """Relational database connection settings.

    ``DATABASE_URL`` wins when set; otherwise the URL is assembled from the
    ``POSTGRES_*`` variables.
    """

    url: str = Field(
        default=os.getenv("DATABASE_URL", ""),
        description="Full SQLAlchemy database URL (overrides POSTGRES_* parts)",
    )
    user: str = Field(default=os.getenv("POSTGRES_USER", "certverify"))
    password: str = Field(default=os.getenv("POSTGRES_PASSWORD", "certverify"))
    host: str = Field(default=os.getenv("POSTGRES_HOST", "localhost"))
    port: int = Field(default=int(os.getenv("POSTGRES_PORT", "5432")))
    db_name: str = Field(default=os.getenv("POSTGRES_DB", "certverify"))

    pool_size: int = Field(
        default=int(os.getenv("DB_POOL_SIZE", "5")),
        description="Connection pool size (ignored for SQLite)",
    )
    max_overflow: int = Field(
        default=int(os.getenv("DB_MAX_OVERFLOW", "10")),
        description="Extra connections allowed above pool_size (ignored for SQLite)",
    )

    @property
    def sqlalchemy_url(self) -> str:
        if self.url:
            return self.url
        # Use psycopg2 binary driver
        return (
            f"postgresql+psycopg2://{self.user}:{self.password}"
            f"@{self.host}:{self.port}/{self.db_name}"
        )

    @field_validator("pool_size", "max_overflow")
    def validate_non_negative(cls, v):
        if v < 0:
            raise ValueError("Pool sizing must not be negative")
        return v


class AuthSettings(BaseModel):
    """Bearer token (JWT) settings."""

    jwt_secret: str = Field(
        default=os.getenv("JWT_SECRET", "change-me"),
        description="HMAC secret used to sign access tokens (change in production!)",
    )
    jwt_algorithm: str = Field(
        default=os.getenv("JWT_ALGORITHM", "HS256"),
        description="JWT signing algorithm",
    )
    access_token_expire_minutes: int = Field(
        default=int(os.getenv("JWT_EXPIRE_MINUTES", "1440")),
        description="Access token lifetime in minutes",
    )

    @field_validator("access_token_expire_minutes")
    def validate_expiry(cls, v):
        if v <= 0:
            raise ValueError("Token lifetime must be positive")
        return v


class ImportSettings(BaseModel):
    """Configuration for certificate bulk imports."""

    max_batch_size: int = Field(
        default=int(os.getenv("IMPORT_MAX_BATCH_SIZE", "1000")),
        description="Maximum number of certificates accepted in one bulk request",
    )

    max_file_size: int = Field(
        default=int(os.getenv("UPLOAD_MAX_FILE_SIZE", str(5 * 1024 * 1024))),
        description="Maximum spreadsheet upload size in bytes",  # 5MB
    )

    allowed_extensions: Set[str] = Field(
        default_factory=lambda: {
            ext.strip().lower().lstrip(".")
            for ext in os.getenv("UPLOAD_ALLOWED_EXTENSIONS", "xlsx,xlsm").split(",")
            if ext.strip()
        },
        description="Spreadsheet file extensions accepted by the upload endpoint",
    )

    @field_validator("max_batch_size", "max_file_size")
    def validate_positive_integer(cls, v):
        if v <= 0:
            raise ValueError("Value must be positive")
        return v


class Settings(BaseModel):
    """Global application configuration.

    Configuration priority:
    1. Environment variables (.env file or system)
    2. Defaults specified below

    Categories:
    - API: FastAPI and server settings
    - Database: SQLAlchemy connection
    - Auth: bearer token signing
    - Imports: bulk certificate ingestion limits
    """

    env: str = Field(
        default=os.getenv("ENV", "development"),
        description="Runtime environment: 'development' or 'production'",
    )

    max_bytes: int = Field(
        default=int(os.getenv("MAX_BYTES", str(10 * 1024 * 1024))),
        description="Maximum JSON request body size in bytes",
    )

    api: APISettings = Field(
        default_factory=APISettings, description="API and server configuration"
    )
    database: DatabaseSettings = Field(
        default_factory=DatabaseSettings, description="Database configuration"
    )
    auth: AuthSettings = Field(
        default_factory=AuthSettings, description="Token authentication configuration"
    )
    imports: ImportSettings = Field(
        default_factory=ImportSettings, description="Bulk import configuration"
    )

    model_config = ConfigDict(
        extra="forbid",  # Prevent typos in environment variables
        validate_assignment=True,  # Validate on attribute assignment
    )

    @property
    def is_development(self) -> bool:
        return self.env == "development"


# Global settings instance
settings = Settings()

# Component-specific settings
import_settings = settings.imports
