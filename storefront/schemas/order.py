"""Order schemas"""
from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional, List
from storefront.models.order import OrderStatus
from storefront.schemas.cart import CartLineItem
from storefront.schemas.pricing import ShippingLineItem


class OrderSnapshot(BaseModel):
    """Cart and totals frozen at checkout time"""
    order_id: str
    items: List[CartLineItem]
    subtotal: int
    shipping_total: int
    shipping_line_items: List[ShippingLineItem] = []
    grand_total: int
    created_at: datetime
    expires_at: Optional[datetime] = None
    status: OrderStatus = OrderStatus.PENDING

    model_config = {"frozen": True}


class OrderResponse(BaseModel):
    order_id: str
    items: List[CartLineItem]
    subtotal: int
    shipping_total: int
    shipping_line_items: List[ShippingLineItem] = []
    grand_total: int
    status: OrderStatus
    created_at: datetime
    expires_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    whatsapp_sent: bool = False
    invoice_generated: bool = False
    invoice_generated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class AdminOrderResponse(OrderResponse):
    admin_notes: str = ""


class CheckoutResponse(BaseModel):
    order: OrderResponse
    message: str
    whatsapp_url: str


class OrderHelpResponse(BaseModel):
    message: str
    whatsapp_url: str


class OrderStatusUpdate(BaseModel):
    status: OrderStatus


class AdminNoteCreate(BaseModel):
    note: str = Field(min_length=1, max_length=2000)


class OrderListResponse(BaseModel):
    orders: List[AdminOrderResponse]
    total: int


class OrderStats(BaseModel):
    total: int
    pending: int
    completed: int
    revenue: int
