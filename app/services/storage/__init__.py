"""
Record Store Factory

Provides a single entry point for obtaining the storage backend.
The factory keeps the HTTP layer agnostic about where records live.

Usage:
    from app.services.storage import get_record_store

    store = get_record_store(settings)
    menu = await store.list_menu()

Backend Selection:
    - DATABASE_URL set → SqlRecordStore
    - ENV_MODE=development → JsonRecordStore (files under DATA_DIRECTORY)
    - otherwise → UnconfiguredRecordStore (every call fails with 500)
"""

import logging
from typing import Optional

from app.core.config import Settings, get_settings
from app.services.storage.base import BaseRecordStore, ContactDraft, OrderDraft
from app.services.storage.json_store import JsonRecordStore
from app.services.storage.sql_store import SqlRecordStore
from app.services.storage.unconfigured import UnconfiguredRecordStore

logger = logging.getLogger(__name__)


def get_record_store(settings: Optional[Settings] = None) -> BaseRecordStore:
    """
    Build the configured record store.

    Called once per application instance; the result is injected into
    the routes through app.state.

    Returns:
        BaseRecordStore: Configured storage backend
    """
    settings = settings or get_settings()

    if settings.use_database:
        store = SqlRecordStore(
            settings.database_url,
            echo=settings.database_echo,
            default_image=settings.default_menu_image,
        )
        logger.info(f"Record Store: Using SqlRecordStore ({store.backend_name})")
        return store

    if settings.is_development:
        logger.info(
            f"Record Store: Using JsonRecordStore ({settings.data_directory})"
        )
        return JsonRecordStore(
            settings.data_directory,
            lock_timeout=settings.storage_lock_timeout,
            default_image=settings.default_menu_image,
        )

    logger.warning(
        f"Record Store: DATABASE_URL missing in {settings.env_mode.value} mode"
    )
    return UnconfiguredRecordStore(default_image=settings.default_menu_image)


# Export commonly used types and functions
__all__ = [
    "get_record_store",
    "BaseRecordStore",
    "OrderDraft",
    "ContactDraft",
    "JsonRecordStore",
    "SqlRecordStore",
    "UnconfiguredRecordStore",
]
