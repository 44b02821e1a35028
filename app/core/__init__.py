"""
Core module initialization.
Exports configuration, logging and the error taxonomy.
"""

from app.core.config import get_settings, setup_logging, Settings, EnvironmentMode
from app.core.errors import (
    AppError,
    AuthError,
    BackendUnavailable,
    InternalError,
    NotFoundError,
    ValidationError,
)

__all__ = [
    "get_settings",
    "setup_logging",
    "Settings",
    "EnvironmentMode",
    "AppError",
    "AuthError",
    "BackendUnavailable",
    "InternalError",
    "NotFoundError",
    "ValidationError",
]
