"""
SQLAlchemy Database Models

One table per record kind. Column names are snake_case; app.schemas maps
them onto the camelCase wire format.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime, Float, String, Text

from app.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4()}"


class MenuItemRow(Base):
    """A dish on the menu."""
    __tablename__ = "menu_items"

    id = Column(String(80), primary_key=True, default=lambda: new_id("item"))
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=False, default="")
    price = Column(Float, nullable=False)
    image = Column(String(500), nullable=False, default="")
    category = Column(String(40), nullable=False, default="daily-platters")
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)

    def __repr__(self):
        return f"<MenuItem {self.id} - {self.name} - {self.price}>"


class OrderRow(Base):
    """
    A placed order.

    ``items`` holds the cart snapshot as JSON; it is never joined back to
    menu_items, so menu edits do not change historical orders.
    """
    __tablename__ = "orders"

    id = Column(String(80), primary_key=True, default=lambda: new_id("ord"))
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
    status = Column(String(20), nullable=False, default="pending", index=True)

    # =========================================================================
    # CUSTOMER INFORMATION
    # =========================================================================
    customer_name = Column(String(120), nullable=False, default="")
    customer_phone = Column(String(60), nullable=False, index=True)
    customer_address = Column(String(200), nullable=False)

    # =========================================================================
    # ORDER DETAILS
    # =========================================================================
    items = Column(JSON, nullable=False)
    total = Column(Float, nullable=False)

    def __repr__(self):
        return f"<Order {self.id} - {self.customer_name} - {self.status}>"


class ContactMessageRow(Base):
    """A message left through the contact form."""
    __tablename__ = "contact_messages"

    id = Column(String(80), primary_key=True, default=lambda: new_id("msg"))
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
    name = Column(String(120), nullable=False)
    email = Column(String(160), nullable=False)
    message = Column(Text, nullable=False)

    def __repr__(self):
        return f"<ContactMessage {self.id} - {self.email}>"
