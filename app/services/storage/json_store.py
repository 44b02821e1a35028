"""
JSON File Record Store

Local-development backend: one JSON array file per collection.

    data/menu.json
    data/orders.json
    data/contact_messages.json

Every mutation is a read-modify-write of the whole file, serialized per
collection with a file lock and published with an atomic rename, so
readers only ever see a complete old or complete new snapshot.
A missing or corrupt file reads as an empty collection.
"""

import asyncio
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Callable, TypeVar

from filelock import FileLock, Timeout
from pydantic import BaseModel
from pydantic import ValidationError as SchemaError

from app.core.errors import BackendUnavailable, NotFoundError
from app.models import new_id, utcnow
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

logger = logging.getLogger(__name__)

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)

MENU = "menu"
ORDERS = "orders"
CONTACT = "contact_messages"


def dump(model: BaseModel) -> dict[str, Any]:
    """Serialize a record the way it is stored on disk."""
    return model.model_dump(mode="json", by_alias=True)


class JsonCollection:
    """A single JSON array file guarded by a sibling .lock file."""

    def __init__(self, path: Path, lock_timeout: float = 10):
        self.path = path
        self.lock = FileLock(str(path) + ".lock", timeout=lock_timeout)

    def read(self) -> list[dict[str, Any]]:
        """Load the collection; unreadable content counts as empty."""
        if not self.path.exists():
            return []
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Error reading {self.path}: {e}")
            return []
        if not isinstance(data, list):
            logger.warning(f"{self.path} does not hold a JSON array, ignoring it")
            return []
        return [record for record in data if isinstance(record, dict)]

    def write(self, records: list[dict[str, Any]]) -> None:
        """Replace the file atomically: temp file in the same dir, then rename."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=str(self.path.parent),
            prefix=f"{self.path.name}.",
            suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as tmp:
                json.dump(records, tmp, indent=2, ensure_ascii=False)
                tmp.flush()
                os.fsync(tmp.fileno())
            os.replace(tmp_name, self.path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

    def mutate(self, change: Callable[[list[dict[str, Any]]], T]) -> T:
        """
        Run ``change`` on the loaded records under the lock, then persist.

        ``change`` edits the list in place and returns the operation
        result. If it raises, nothing is written.
        """
        try:
            with self.lock:
                records = self.read()
                result = change(records)
                self.write(records)
                return result
        except Timeout:
            logger.error(f"Lock timeout for {self.path}")
            raise BackendUnavailable(f"Storage busy: {self.path.name}")


def parse_records(model: type[M], records: list[dict[str, Any]]) -> list[M]:
    """Validate stored records, skipping the ones that no longer parse."""
    parsed = []
    for record in records:
        try:
            parsed.append(model.model_validate(record))
        except SchemaError as e:
            logger.warning(f"Skipping malformed {model.__name__} record {record.get('id')}: {e}")
    return parsed


def find_index(records: list[dict[str, Any]], record_id: str) -> int:
    for idx, record in enumerate(records):
        if record.get("id") == record_id:
            return idx
    raise NotFoundError()


def remove_by_id(records: list[dict[str, Any]], record_id: str) -> None:
    remaining = [record for record in records if record.get("id") != record_id]
    if len(remaining) == len(records):
        raise NotFoundError()
    records[:] = remaining


class JsonRecordStore(BaseRecordStore):
    """
    File-backed record store.

    Blocking file work runs in a worker thread so the event loop keeps
    serving other requests.
    """

    def __init__(
        self,
        data_directory: str,
        lock_timeout: float = 10,
        default_image: str = "",
    ):
        super().__init__(default_image=default_image)
        self.data_dir = Path(data_directory)
        self._collections = {
            name: JsonCollection(self.data_dir / f"{name}.json", lock_timeout)
            for name in (MENU, ORDERS, CONTACT)
        }

    @property
    def backend_name(self) -> str:
        return "local-json"

    async def init(self) -> None:
        if not self.data_dir.exists():
            self.data_dir.mkdir(parents=True, exist_ok=True)
            logger.info(f"Created data directory: {self.data_dir}")

    async def _read(self, name: str) -> list[dict[str, Any]]:
        return await asyncio.to_thread(self._collections[name].read)

    async def _mutate(self, name: str, change: Callable[[list[dict[str, Any]]], T]) -> T:
        return await asyncio.to_thread(self._collections[name].mutate, change)

    # =========================================================================
    # MENU
    # =========================================================================

    async def list_menu(self) -> list[MenuItem]:
        return parse_records(MenuItem, await self._read(MENU))

    async def create_menu_item(self, payload: MenuItemCreate) -> MenuItem:
        item = MenuItem(id=new_id("item"), **self.menu_fields(payload))

        def change(records):
            records.append(dump(item))
            return item

        created = await self._mutate(MENU, change)
        logger.info(f"Menu item {created.id} created")
        return created

    async def update_menu_item(self, item_id: str, payload: MenuItemUpdate) -> MenuItem:
        def change(records):
            idx = find_index(records, item_id)
            updated = payload.apply(MenuItem.model_validate(records[idx]))
            records[idx] = {**records[idx], **dump(updated)}
            return updated

        return await self._mutate(MENU, change)

    async def delete_menu_item(self, item_id: str) -> None:
        await self._mutate(MENU, lambda records: remove_by_id(records, item_id))
        logger.info(f"Menu item {item_id} deleted")

    # =========================================================================
    # ORDERS
    # =========================================================================

    async def list_orders(self) -> list[Order]:
        orders = parse_records(Order, await self._read(ORDERS))
        return list(reversed(orders))

    async def create_order(self, payload: OrderCreate) -> Order:
        draft = self.prepare_order(payload)
        order = Order(
            id=new_id("ord"),
            created_at=utcnow(),
            status=OrderStatus.PENDING,
            customer=draft.customer,
            items=draft.items,
            total=draft.total,
        )

        def change(records):
            records.append(dump(order))
            return order

        created = await self._mutate(ORDERS, change)
        logger.info(f"Order {created.id} created, total {created.total}")
        return created

    async def set_order_status(self, order_id: str, status: OrderStatus) -> Order:
        def change(records):
            idx = find_index(records, order_id)
            records[idx] = {**records[idx], "status": status.value}
            return Order.model_validate(records[idx])

        return await self._mutate(ORDERS, change)

    async def delete_order(self, order_id: str) -> None:
        await self._mutate(ORDERS, lambda records: remove_by_id(records, order_id))
        logger.info(f"Order {order_id} deleted")

    # =========================================================================
    # CONTACT MESSAGES
    # =========================================================================

    async def list_contact_messages(self) -> list[ContactMessage]:
        messages = parse_records(ContactMessage, await self._read(CONTACT))
        return list(reversed(messages))

    async def create_contact_message(self, payload: ContactMessageCreate) -> ContactMessage:
        draft = self.prepare_contact_message(payload)
        message = ContactMessage(
            id=new_id("msg"),
            created_at=utcnow(),
            name=draft.name,
            email=draft.email,
            message=draft.message,
        )

        def change(records):
            records.append(dump(message))
            return message

        return await self._mutate(CONTACT, change)

    async def delete_contact_message(self, message_id: str) -> None:
        await self._mutate(CONTACT, lambda records: remove_by_id(records, message_id))
