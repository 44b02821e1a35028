"""
Record Store Abstract Base Class

Defines the interface contract for every storage backend. JsonRecordStore
and SqlRecordStore both implement these methods, so the HTTP layer never
needs to know which one is active.

Design Pattern: Strategy Pattern
    - Backend chosen once at startup from configuration
    - Field defaults, normalization and order validation live here,
      shared by all backends

Collections:
    - menu: list / create / update / delete
    - orders: list / create / set_status / delete
    - contact messages: list / create / delete
"""

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass

from app.core.errors import ValidationError
from app.core.normalize import clip, normalize_category, normalize_phone
from app.schemas import (
    ContactMessage,
    ContactMessageCreate,
    Customer,
    MenuItem,
    MenuItemCreate,
    MenuItemUpdate,
    Order,
    OrderCreate,
    OrderItem,
    OrderStatus,
)


@dataclass
class OrderDraft:
    """
    Validated checkout data, ready to persist.

    Attributes:
        customer: Customer with canonical phone and trimmed address
        items: Cart snapshot with every qty > 0
        total: Sum of qty * price, computed once
    """
    customer: Customer
    items: list[OrderItem]
    total: float


@dataclass
class ContactDraft:
    """Trimmed contact form fields, all non-empty."""
    name: str
    email: str
    message: str


class BaseRecordStore(ABC):
    """
    Abstract base class for record stores.

    Unknown ids on update, status change or delete raise NotFoundError;
    invalid checkout or contact payloads raise ValidationError.
    """

    def __init__(self, default_image: str = ""):
        self.default_image = default_image

    @property
    @abstractmethod
    def backend_name(self) -> str:
        """Backend identifier reported by /api/health."""
        pass

    async def init(self) -> None:
        """Prepare the backend at startup."""

    async def close(self) -> None:
        """Release backend resources at shutdown."""

    # =========================================================================
    # MENU
    # =========================================================================

    @abstractmethod
    async def list_menu(self) -> list[MenuItem]:
        pass

    @abstractmethod
    async def create_menu_item(self, payload: MenuItemCreate) -> MenuItem:
        pass

    @abstractmethod
    async def update_menu_item(self, item_id: str, payload: MenuItemUpdate) -> MenuItem:
        pass

    @abstractmethod
    async def delete_menu_item(self, item_id: str) -> None:
        pass

    # =========================================================================
    # ORDERS
    # =========================================================================

    @abstractmethod
    async def list_orders(self) -> list[Order]:
        """All orders, newest first."""
        pass

    @abstractmethod
    async def create_order(self, payload: OrderCreate) -> Order:
        pass

    @abstractmethod
    async def set_order_status(self, order_id: str, status: OrderStatus) -> Order:
        pass

    @abstractmethod
    async def delete_order(self, order_id: str) -> None:
        pass

    # =========================================================================
    # CONTACT MESSAGES
    # =========================================================================

    @abstractmethod
    async def list_contact_messages(self) -> list[ContactMessage]:
        """All messages, newest first."""
        pass

    @abstractmethod
    async def create_contact_message(self, payload: ContactMessageCreate) -> ContactMessage:
        pass

    @abstractmethod
    async def delete_contact_message(self, message_id: str) -> None:
        pass

    # =========================================================================
    # SHARED RECORD BUILDERS
    # =========================================================================

    def menu_fields(self, payload: MenuItemCreate) -> dict:
        """Field values for a new menu item, defaults applied."""
        return {
            "name": payload.name,
            "description": payload.description or "",
            "price": payload.price,
            "image": payload.image or self.default_image,
            "category": normalize_category(payload.category),
        }

    @staticmethod
    def prepare_order(payload: OrderCreate) -> OrderDraft:
        """
        Validate a checkout payload.

        Lines with a non-positive quantity are dropped before anything
        else is checked.

        Raises:
            ValidationError: empty cart, invalid phone, blank address or
                a total that is not a finite number
        """
        items = [line.snapshot() for line in payload.items]
        items = [item for item in items if item.qty > 0]
        if not items:
            raise ValidationError("Cart is empty")

        raw_customer = payload.customer
        phone = normalize_phone(raw_customer.phone if raw_customer else None)
        address = clip(raw_customer.address if raw_customer else None, 200, strip=True)
        if not phone:
            raise ValidationError("Phone number is required")
        if not address:
            raise ValidationError("Delivery address is required")

        customer = Customer(
            name=clip(raw_customer.name, 120),
            phone=phone[:60],
            address=address,
        )
        total = sum(item.qty * item.price for item in items)
        if not math.isfinite(total):
            raise ValidationError("Order total is out of range")
        return OrderDraft(customer=customer, items=items, total=total)

    @staticmethod
    def prepare_contact_message(payload: ContactMessageCreate) -> ContactDraft:
        """
        Raises:
            ValidationError: any of name, email, message blank
        """
        name = clip(payload.name, 120, strip=True)
        email = clip(payload.email, 160, strip=True)
        message = clip(payload.message, 2000, strip=True)
        if not name or not email or not message:
            raise ValidationError("Name, email, and message are required")
        return ContactDraft(name=name, email=email, message=message)
