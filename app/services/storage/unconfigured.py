"""
Placeholder store for hosted deployments without DATABASE_URL.

A hosted deployment must not silently fall back to local files, so every
operation reports the missing backend.
"""

from typing import NoReturn

from app.core.errors import BackendUnavailable
from app.schemas import (
    ContactMessage,
    ContactMessageCreate,
    MenuItem,
    MenuItemCreate,
    MenuItemUpdate,
    Order,
    OrderCreate,
    OrderStatus,
)
from app.services.storage.base import BaseRecordStore


class UnconfiguredRecordStore(BaseRecordStore):
    """Every operation raises BackendUnavailable (HTTP 500)."""

    @property
    def backend_name(self) -> str:
        return "unconfigured"

    def _fail(self) -> NoReturn:
        raise BackendUnavailable("Database not configured")

    async def list_menu(self) -> list[MenuItem]:
        self._fail()

    async def create_menu_item(self, payload: MenuItemCreate) -> MenuItem:
        self._fail()

    async def update_menu_item(self, item_id: str, payload: MenuItemUpdate) -> MenuItem:
        self._fail()

    async def delete_menu_item(self, item_id: str) -> None:
        self._fail()

    async def list_orders(self) -> list[Order]:
        self._fail()

    async def create_order(self, payload: OrderCreate) -> Order:
        self._fail()

    async def set_order_status(self, order_id: str, status: OrderStatus) -> Order:
        self._fail()

    async def delete_order(self, order_id: str) -> None:
        self._fail()

    async def list_contact_messages(self) -> list[ContactMessage]:
        self._fail()

    async def create_contact_message(self, payload: ContactMessageCreate) -> ContactMessage:
        self._fail()

    async def delete_contact_message(self, message_id: str) -> None:
        self._fail()
