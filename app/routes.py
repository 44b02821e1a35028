"""
JSON API routes.

Endpoints:
    - GET    /api/health
    - POST   /api/admin/login
    - POST   /api/admin/logout          (admin)
    - GET    /api/menu
    - POST   /api/menu                  (admin)
    - PUT    /api/menu/{id}             (admin)
    - DELETE /api/menu/{id}             (admin)
    - POST   /api/orders                (public checkout)
    - GET    /api/orders                (admin)
    - PUT    /api/orders/{id}/status    (admin)
    - DELETE /api/orders/{id}           (admin)
    - POST   /api/contact               (public)
    - GET    /api/contact               (admin)
    - DELETE /api/contact/{id}          (admin)
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Request

from app.core.config import Settings
from app.schemas import (
    ContactMessage,
    ContactMessageCreate,
    ErrorResponse,
    HealthResponse,
    LoginRequest,
    MenuItem,
    MenuItemCreate,
    MenuItemUpdate,
    OkResponse,
    Order,
    OrderCreate,
    OrderStatusUpdate,
    TokenResponse,
)
from app.services.auth import AdminAuthority
from app.services.storage import BaseRecordStore

logger = logging.getLogger(__name__)

ERRORS = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}

router = APIRouter(prefix="/api", responses=ERRORS)


# =============================================================================
# DEPENDENCIES
# =============================================================================

def get_settings_dep(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> BaseRecordStore:
    return request.app.state.store


def get_authority(request: Request) -> AdminAuthority:
    return request.app.state.authority


def require_admin(
    request: Request,
    authority: AdminAuthority = Depends(get_authority),
) -> None:
    """Gate for admin routes; runs before any store access."""
    authority.require_admin(request.headers)


# =============================================================================
# HEALTH & AUTH
# =============================================================================

@router.get("/health", response_model=HealthResponse, tags=["Health"])
async def health(
    settings: Settings = Depends(get_settings_dep),
    store: BaseRecordStore = Depends(get_store),
) -> HealthResponse:
    """Diagnostics for the admin panel."""
    return HealthResponse(
        name=settings.app_name,
        version=settings.app_version,
        database=store.backend_name,
        require_admin_password=settings.require_admin_password,
    )


@router.post("/admin/login", response_model=TokenResponse, tags=["Admin"])
async def admin_login(
    payload: Optional[LoginRequest] = None,
    authority: AdminAuthority = Depends(get_authority),
) -> TokenResponse:
    password = payload.password if payload else None
    return TokenResponse(token=authority.login(password))


@router.post(
    "/admin/logout",
    response_model=OkResponse,
    tags=["Admin"],
    dependencies=[Depends(require_admin)],
)
async def admin_logout(
    request: Request,
    authority: AdminAuthority = Depends(get_authority),
) -> OkResponse:
    authority.logout(request.headers)
    return OkResponse()


# =============================================================================
# MENU
# =============================================================================

@router.get("/menu", response_model=List[MenuItem], tags=["Menu"])
async def list_menu(store: BaseRecordStore = Depends(get_store)) -> List[MenuItem]:
    return await store.list_menu()


@router.post(
    "/menu",
    response_model=MenuItem,
    status_code=201,
    tags=["Menu"],
    dependencies=[Depends(require_admin)],
)
async def create_menu_item(
    payload: MenuItemCreate,
    store: BaseRecordStore = Depends(get_store),
) -> MenuItem:
    return await store.create_menu_item(payload)


@router.put(
    "/menu/{item_id}",
    response_model=MenuItem,
    tags=["Menu"],
    dependencies=[Depends(require_admin)],
)
async def update_menu_item(
    item_id: str,
    payload: MenuItemUpdate,
    store: BaseRecordStore = Depends(get_store),
) -> MenuItem:
    return await store.update_menu_item(item_id, payload)


@router.delete(
    "/menu/{item_id}",
    response_model=OkResponse,
    tags=["Menu"],
    dependencies=[Depends(require_admin)],
)
async def delete_menu_item(
    item_id: str,
    store: BaseRecordStore = Depends(get_store),
) -> OkResponse:
    await store.delete_menu_item(item_id)
    return OkResponse()


# =============================================================================
# ORDERS
# =============================================================================

@router.post("/orders", response_model=Order, status_code=201, tags=["Orders"])
async def create_order(
    payload: Optional[OrderCreate] = None,
    store: BaseRecordStore = Depends(get_store),
) -> Order:
    """Public checkout. Phone, address and a non-empty cart are required."""
    return await store.create_order(payload or OrderCreate())


@router.get(
    "/orders",
    response_model=List[Order],
    tags=["Orders"],
    dependencies=[Depends(require_admin)],
)
async def list_orders(store: BaseRecordStore = Depends(get_store)) -> List[Order]:
    return await store.list_orders()


@router.put(
    "/orders/{order_id}/status",
    response_model=Order,
    tags=["Orders"],
    dependencies=[Depends(require_admin)],
)
async def set_order_status(
    order_id: str,
    payload: OrderStatusUpdate,
    store: BaseRecordStore = Depends(get_store),
) -> Order:
    order = await store.set_order_status(order_id, payload.status)
    logger.info(f"Order {order_id} marked {payload.status.value}")
    return order


@router.delete(
    "/orders/{order_id}",
    response_model=OkResponse,
    tags=["Orders"],
    dependencies=[Depends(require_admin)],
)
async def delete_order(
    order_id: str,
    store: BaseRecordStore = Depends(get_store),
) -> OkResponse:
    await store.delete_order(order_id)
    return OkResponse()


# =============================================================================
# CONTACT
# =============================================================================

@router.post("/contact", response_model=OkResponse, status_code=201, tags=["Contact"])
async def create_contact_message(
    payload: Optional[ContactMessageCreate] = None,
    store: BaseRecordStore = Depends(get_store),
) -> OkResponse:
    await store.create_contact_message(payload or ContactMessageCreate())
    return OkResponse()


@router.get(
    "/contact",
    response_model=List[ContactMessage],
    tags=["Contact"],
    dependencies=[Depends(require_admin)],
)
async def list_contact_messages(
    store: BaseRecordStore = Depends(get_store),
) -> List[ContactMessage]:
    return await store.list_contact_messages()


@router.delete(
    "/contact/{message_id}",
    response_model=OkResponse,
    tags=["Contact"],
    dependencies=[Depends(require_admin)],
)
async def delete_contact_message(
    message_id: str,
    store: BaseRecordStore = Depends(get_store),
) -> OkResponse:
    await store.delete_contact_message(message_id)
    return OkResponse()
