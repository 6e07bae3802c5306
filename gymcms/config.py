"""
GymCMS Backend — Application Configuration
============================================

What:  Centralized configuration management using Pydantic Settings.
Why:   Type-safe environment variable loading with validation on startup.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by every module that needs configuration values.
When:  Loaded once at module import time; production checks run in the lifespan.

Design Decision:
    Security-sensitive defaults (JWT secret, seeded admin password) are kept
    usable for local development. validate_required_for_production() reports
    them on startup instead of refusing to boot.
"""

from pydantic_settings import BaseSettings
from pydantic import Field, field_validator
from typing import List

DEFAULT_JWT_SECRET = "powerhouse-gym-secret-key-change-in-production"
DEFAULT_ADMIN_PASSWORD = "admin123"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes are grouped by concern for readability.
    """

    # ── Database ──────────────────────────────────────────────────────────
    # Format: sqlite+aiosqlite:///path or postgresql+asyncpg://user:pw@host/db
    database_url: str = Field(
        default="sqlite+aiosqlite:///./data/database.sqlite",
        description="Async SQLAlchemy connection URL",
    )

    # Pool sizing only applies to PostgreSQL; SQLite ignores it
    db_pool_size: int = Field(default=10, ge=1, le=100)
    db_max_overflow: int = Field(default=5, ge=0, le=50)
    db_pool_pre_ping: bool = Field(default=True)

    # Create missing tables and seed defaults on startup
    auto_create_schema: bool = Field(default=True)

    # ── Authentication ────────────────────────────────────────────────────
    jwt_secret_key: str = Field(default=DEFAULT_JWT_SECRET)
    jwt_algorithm: str = Field(default="HS256")
    jwt_expire_minutes: int = Field(default=1440, ge=1)  # 24 hours

    # bcrypt cost factor; tests drop this to 4
    bcrypt_rounds: int = Field(default=12, ge=4, le=16)

    # Seeded administrator (only when the users table is empty)
    admin_email: str = Field(default="admin@powerhousegym.com")
    admin_password: str = Field(default=DEFAULT_ADMIN_PASSWORD)
    admin_name: str = Field(default="Admin")

    # ── File Storage ──────────────────────────────────────────────────────
    storage_root: str = Field(default="./uploads")

    # 50MB per file, at most 10 files per upload request
    max_file_size: int = Field(default=52_428_800, ge=1_048_576)
    max_files_per_upload: int = Field(default=10, ge=1, le=50)

    # Image transcoding runs in a worker thread bounded by this timeout
    image_processing_timeout: float = Field(default=30.0, gt=0)
    thumbnail_width: int = Field(default=300, ge=16)
    webp_quality: int = Field(default=85, ge=1, le=100)
    thumbnail_quality: int = Field(default=80, ge=1, le=100)

    # ── CORS ──────────────────────────────────────────────────────────────
    # Comma-separated URLs
    cors_origins: str = Field(default="http://localhost:3000")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # ── Server ────────────────────────────────────────────────────────────
    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(default=3000, ge=1024, le=65535)

    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    # ── Rate Limiting ─────────────────────────────────────────────────────
    # Per-IP sliding window, applied to the authentication endpoints only
    rate_limit_requests: int = Field(default=100, ge=1, le=10000)
    rate_limit_window: int = Field(default=900, ge=1, le=86400)  # seconds
    rate_limit_path_prefix: str = Field(default="/api/auth")

    # ── Proxy ─────────────────────────────────────────────────────────────
    # Only behind a reverse proxy that overwrites X-Forwarded-For
    trust_forwarded_for: bool = Field(default=False)

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }

    def validate_required_for_production(self) -> None:
        """
        What:  Reports insecure defaults that must be overridden in production.
        When:  Called during app startup (lifespan).
        Raises: ValueError listing every offending setting.
        """
        errors = []
        if self.jwt_secret_key == DEFAULT_JWT_SECRET:
            errors.append("JWT_SECRET_KEY is using the development default.")
        if self.admin_password == DEFAULT_ADMIN_PASSWORD:
            errors.append("ADMIN_PASSWORD is using the development default.")
        if errors:
            raise ValueError(
                "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
            )


# Singleton instance — imported throughout the application
settings = Settings()
