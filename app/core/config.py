"""
Application Configuration Module

Centralizes all configuration using environment variables with Pydantic Settings.
Supports two deployment shapes:
    - DEVELOPMENT: long-running server, local JSON files, admin bypass allowed
    - STAGING / PRODUCTION: hosted deployment, database required, no bypass

The ENV_MODE variable controls which storage and auth behaviour is
instantiated throughout the application.

Usage:
    from app.core.config import get_settings

    settings = get_settings()
    if settings.admin_bypass:
        # Every admin request is authorized
"""

import logging
import sys
from enum import Enum
from typing import Optional
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class EnvironmentMode(str, Enum):
    """
    Application environment modes.

    Attributes:
        DEVELOPMENT: Local server, file storage fallback, bypass allowed
        PRODUCTION: Hosted deployment with a real database
        STAGING: Pre-production hosted deployment
    """
    DEVELOPMENT = "development"
    PRODUCTION = "production"
    STAGING = "staging"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables or .env file.
    Secrets (admin password, signing secret, database credentials) should
    NEVER be committed to version control.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==========================================================================
    # ENVIRONMENT
    # ==========================================================================

    env_mode: EnvironmentMode = Field(
        default=EnvironmentMode.DEVELOPMENT,
        description="Application environment mode"
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode with verbose logging"
    )

    # ==========================================================================
    # APPLICATION
    # ==========================================================================

    app_name: str = Field(
        default="delights-by-jummy",
        description="Application name reported by /api/health"
    )
    app_version: str = Field(
        default="2.1.0",
        description="Application version"
    )
    api_host: str = Field(
        default="0.0.0.0",
        description="API server host"
    )
    api_port: int = Field(
        default=3000,
        description="API server port"
    )
    cors_origins: str = Field(
        default="*",
        description="Comma-separated list of allowed CORS origins"
    )

    # ==========================================================================
    # ADMIN AUTH
    # ==========================================================================

    admin_password: str = Field(
        default="",
        description="Admin panel password (empty enables bypass in development)"
    )
    allow_any_password: bool = Field(
        default=False,
        description="Accept any admin password (development only)"
    )
    admin_jwt_secret: Optional[str] = Field(
        default=None,
        description="Secret for signed admin tokens; in-memory tokens if unset"
    )
    admin_token_ttl_days: int = Field(
        default=7,
        ge=1,
        description="Lifetime of signed admin tokens"
    )

    # ==========================================================================
    # DATABASE
    # ==========================================================================

    database_url: Optional[str] = Field(
        default=None,
        description="SQLAlchemy async URL, e.g. postgresql+psycopg://..."
    )
    database_echo: bool = Field(
        default=False,
        description="Log all SQL statements"
    )

    # ==========================================================================
    # FILE STORAGE
    # ==========================================================================

    data_directory: str = Field(
        default="data",
        description="Directory for JSON collection files"
    )
    storage_lock_timeout: int = Field(
        default=10,
        description="Seconds to wait for a collection file lock"
    )

    # ==========================================================================
    # STATIC SITE
    # ==========================================================================

    static_directory: str = Field(
        default="public",
        description="Directory holding index.html, admin.html and assets"
    )
    default_menu_image: str = Field(
        default="assets/images/menu1.jpg",
        description="Image used for menu items created without one"
    )
    function_path_prefix: str = Field(
        default="/.netlify/functions/api",
        description="Path prefix stripped in the serverless deployment"
    )

    # ==========================================================================
    # VALIDATORS
    # ==========================================================================

    @field_validator("env_mode", mode="before")
    @classmethod
    def validate_env_mode(cls, v: str) -> EnvironmentMode:
        """Convert string to EnvironmentMode enum."""
        if isinstance(v, EnvironmentMode):
            return v
        try:
            return EnvironmentMode(v.lower())
        except ValueError:
            valid = [e.value for e in EnvironmentMode]
            raise ValueError(f"Invalid env_mode. Must be one of: {valid}")

    # ==========================================================================
    # COMPUTED PROPERTIES
    # ==========================================================================

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.env_mode == EnvironmentMode.DEVELOPMENT

    @property
    def use_real_services(self) -> bool:
        """Check if this is a hosted deployment."""
        return self.env_mode in (EnvironmentMode.PRODUCTION, EnvironmentMode.STAGING)

    @property
    def use_database(self) -> bool:
        """Check if a database backend is configured."""
        return bool(self.database_url)

    @property
    def admin_bypass(self) -> bool:
        """
        Development convenience: authorize every admin request.

        Active only in development mode, when no password is configured
        or ALLOW_ANY_PASSWORD is set.
        """
        return self.is_development and (
            not self.admin_password or self.allow_any_password
        )

    @property
    def require_admin_password(self) -> bool:
        """Whether login actually checks a password."""
        return bool(self.admin_password) and not self.admin_bypass

    @property
    def cors_origins_list(self) -> list[str]:
        """Get allowed CORS origins as a list."""
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    # ==========================================================================
    # VALIDATION METHODS
    # ==========================================================================

    def validate_production_config(self) -> list[str]:
        """
        Validate that all required hosted-deployment settings are configured.

        Returns:
            List of missing configuration keys (empty if all present)
        """
        missing = []

        if self.use_real_services:
            if not self.database_url:
                missing.append("DATABASE_URL")
            if not self.admin_password:
                missing.append("ADMIN_PASSWORD")
            if not self.admin_jwt_secret:
                missing.append("ADMIN_JWT_SECRET")

        return missing


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Uses LRU cache to ensure settings are loaded only once.

    Returns:
        Settings: Configured application settings
    """
    return Settings()


# =============================================================================
# LOGGING CONFIGURATION
# =============================================================================

def setup_logging(
    level: int = logging.INFO,
    settings: Optional[Settings] = None,
) -> logging.Logger:
    """
    Configure application-wide logging.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)
        settings: Settings to read the debug flag from (cached ones if omitted)

    Returns:
        Configured application logger
    """
    settings = settings or get_settings()

    if settings.debug:
        level = logging.DEBUG

    log_format = "%(asctime)s │ %(levelname)-8s │ %(name)-25s │ %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"

    logging.basicConfig(
        level=level,
        format=log_format,
        datefmt=date_format,
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("filelock").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    return logging.getLogger("app")
