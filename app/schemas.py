"""
Pydantic Schemas for Request/Response Validation

Wire format is camelCase (``createdAt``) to match the storefront and admin
JavaScript; every model also accepts snake_case field names.

Record lifecycles:
- MenuItem: created and edited by the admin, deleted by id
- Order: created at checkout, status changed / deleted by the admin
- ContactMessage: created from the contact form, read by the admin
"""

from datetime import datetime
from enum import Enum
from typing import Annotated, Any, List, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)
from pydantic.alias_generators import to_camel

from app.core.normalize import CATEGORY_DAILY, CATEGORY_SWEETS, clip, normalize_category

# A finite JSON number (bools and numeric strings rejected), never negative.
Price = Annotated[float, Field(ge=0, strict=True, allow_inf_nan=False)]


class WireModel(BaseModel):
    """Base model serialized with camelCase keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# =============================================================================
# ENUMS
# =============================================================================

class OrderStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"


class MenuCategory(str, Enum):
    SWEETS = CATEGORY_SWEETS
    DAILY_PLATTERS = CATEGORY_DAILY


# =============================================================================
# MENU
# =============================================================================

class MenuItem(WireModel):
    """A dish on the menu."""
    id: str
    name: str
    description: str = ""
    price: float
    image: str = ""
    category: MenuCategory = MenuCategory.DAILY_PLATTERS

    @field_validator("category", mode="before")
    @classmethod
    def canonical_category(cls, v: Any) -> Any:
        if isinstance(v, MenuCategory):
            return v
        return normalize_category(v)


class MenuItemCreate(WireModel):
    """Request schema for creating a menu item."""
    name: str = Field(..., min_length=1)
    price: Price
    description: Optional[str] = None
    image: Optional[str] = None
    category: Optional[str] = None

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v


class MenuItemUpdate(MenuItemCreate):
    """
    Partial update for a menu item.

    ``name`` and ``price`` must always be supplied. ``description``,
    ``image`` and ``category`` keep their stored values when omitted
    (None); an explicit empty description clears it.
    """

    def apply(self, current: MenuItem) -> MenuItem:
        return MenuItem(
            id=current.id,
            name=self.name,
            price=self.price,
            description=(
                self.description if self.description is not None
                else current.description
            ),
            image=self.image or current.image,
            category=(
                self.category if self.category is not None
                else current.category
            ),
        )


# =============================================================================
# ORDERS
# =============================================================================

class OrderItem(WireModel):
    """Snapshot of a cart line taken when the order is placed."""
    id: str = ""
    name: str = ""
    price: float = 0.0
    qty: int = 0


class Customer(WireModel):
    name: str = ""
    phone: str = ""
    address: str = ""


class Order(WireModel):
    """A placed order."""
    id: str
    created_at: datetime
    status: OrderStatus = OrderStatus.PENDING
    customer: Customer
    items: List[OrderItem]
    total: float


class OrderItemIn(WireModel):
    """Cart line as posted by the storefront; coerced leniently."""
    id: Any = None
    name: Any = None
    price: Optional[float] = Field(default=None, allow_inf_nan=False)
    qty: Optional[int] = None

    @field_validator("price", "qty", mode="before")
    @classmethod
    def empty_as_zero(cls, v: Any) -> Any:
        return 0 if v in (None, "") else v

    def snapshot(self) -> OrderItem:
        return OrderItem(
            id=clip(self.id, 80),
            name=clip(self.name, 120),
            price=float(self.price or 0),
            qty=int(self.qty or 0),
        )


class CustomerIn(WireModel):
    name: Any = None
    phone: Any = None
    address: Any = None


class OrderCreate(WireModel):
    """Request schema for checkout."""
    customer: Optional[CustomerIn] = None
    items: List[OrderItemIn] = Field(default_factory=list)


class OrderStatusUpdate(WireModel):
    status: OrderStatus


# =============================================================================
# CONTACT
# =============================================================================

class ContactMessage(WireModel):
    id: str
    created_at: datetime
    name: str
    email: str
    message: str


class ContactMessageCreate(WireModel):
    name: Any = None
    email: Any = None
    message: Any = None


# =============================================================================
# AUTH / MISC
# =============================================================================

class LoginRequest(WireModel):
    password: Any = None


class TokenResponse(WireModel):
    token: str


class OkResponse(WireModel):
    ok: bool = True


class ErrorResponse(WireModel):
    """Standard error response."""
    error: str


class HealthResponse(WireModel):
    """Diagnostics for the admin panel."""
    name: str
    version: str
    database: str
    require_admin_password: bool
