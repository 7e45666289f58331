"""Orders API endpoints"""
from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession
from storefront.database import get_db
from storefront.api.deps import get_cart_session_id, get_cart_store, require_admin
from storefront.config import settings
from storefront.core.rate_limit import limiter
from storefront.core.messaging import build_order_help_message, build_whatsapp_url
from storefront.models.order import OrderStatus
from storefront.services.cart_service import CartStore
from storefront.services.invoice_service import invoice_service
from storefront.services.order_service import order_service
from storefront.services.settings_service import settings_service
from storefront.schemas.invoice import InvoiceData, InvoiceRecordResponse
from storefront.schemas.order import (
    AdminNoteCreate,
    AdminOrderResponse,
    CheckoutResponse,
    OrderHelpResponse,
    OrderListResponse,
    OrderResponse,
    OrderStats,
    OrderStatusUpdate,
)
from typing import List, Optional
import logging

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/checkout", response_model=CheckoutResponse)
@limiter.limit(settings.CHECKOUT_RATE_LIMIT)
async def checkout(
    request: Request,
    session_id: str = Depends(get_cart_session_id),
    store_cart: CartStore = Depends(get_cart_store),
    db: AsyncSession = Depends(get_db)
):
    """
    Create an order from the session cart.
    Returns the WhatsApp link the customer is sent to; the cart is emptied
    once the order is stored.
    """
    store = await settings_service.get_store_settings(db)
    order, message, whatsapp_url = await order_service.checkout(db, session_id, store, store_cart)
    return CheckoutResponse(
        order=OrderResponse.model_validate(order),
        message=message,
        whatsapp_url=whatsapp_url,
    )


@router.get("", response_model=OrderListResponse)
async def list_orders(
    status: Optional[OrderStatus] = None,
    search: Optional[str] = Query(default=None, max_length=50),
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=200),
    _: str = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Admin order list, newest first"""
    orders, total = await order_service.list_orders(db, status, search, skip, limit)
    return OrderListResponse(
        orders=[AdminOrderResponse.model_validate(o) for o in orders],
        total=total,
    )


@router.get("/stats", response_model=OrderStats)
async def order_stats(
    _: str = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    return OrderStats(**await order_service.get_order_stats(db))


@router.get("/invoices", response_model=List[InvoiceRecordResponse])
async def list_invoices(
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=500),
    _: str = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    records = await invoice_service.list_invoices(db, skip, limit)
    return [InvoiceRecordResponse.model_validate(r) for r in records]


@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str, db: AsyncSession = Depends(get_db)):
    """Public order page data"""
    order = await order_service.require_order(db, order_id)
    return OrderResponse.model_validate(order)


@router.get("/{order_id}/help", response_model=OrderHelpResponse)
async def order_help(order_id: str, db: AsyncSession = Depends(get_db)):
    """WhatsApp link for questions about an order"""
    order = await order_service.require_order(db, order_id)
    store = await settings_service.get_store_settings(db)
    message = build_order_help_message(order.order_id, order.grand_total)
    return OrderHelpResponse(message=message, whatsapp_url=build_whatsapp_url(store.whatsapp_number, message))


@router.get("/{order_id}/invoice", response_model=InvoiceData)
async def get_invoice_data(order_id: str, db: AsyncSession = Depends(get_db)):
    """Invoice fields for the renderer, built from the stored order"""
    order = await order_service.require_order(db, order_id)
    store = await settings_service.get_store_settings(db)
    return invoice_service.build_invoice_data(order, store)


@router.post("/{order_id}/invoice", response_model=InvoiceRecordResponse)
async def generate_invoice(
    order_id: str,
    generated_by: str = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    order = await order_service.require_order(db, order_id)
    record = await invoice_service.record_invoice(db, order, generated_by)
    return InvoiceRecordResponse.model_validate(record)


@router.patch("/{order_id}/status", response_model=AdminOrderResponse)
async def update_order_status(
    order_id: str,
    data: OrderStatusUpdate,
    _: str = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    order = await order_service.update_status(db, order_id, data.status)
    return AdminOrderResponse.model_validate(order)


@router.post("/{order_id}/notes", response_model=AdminOrderResponse)
async def add_order_note(
    order_id: str,
    data: AdminNoteCreate,
    _: str = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    order = await order_service.add_admin_note(db, order_id, data.note)
    return AdminOrderResponse.model_validate(order)
