"""Invoice schemas"""
from pydantic import BaseModel
from datetime import date, datetime
from typing import List


class InvoiceLine(BaseModel):
    name: str
    variant: str = ""
    quantity: int
    unit_price: int
    line_total: int


class InvoiceData(BaseModel):
    """Flat field set handed to the invoice renderer"""
    order_id: str
    order_date: date
    store_name: str
    whatsapp_number: str
    lines: List[InvoiceLine]
    subtotal: int
    shipping_total: int
    grand_total: int
    shipping_label: str
    disclaimer: str


class InvoiceRecordItem(BaseModel):
    name: str
    quantity: int
    price: int


class InvoiceRecordResponse(BaseModel):
    invoice_id: str
    order_id: str
    generated_by: str
    generated_at: datetime
    order_total: int
    order_items: List[InvoiceRecordItem] = []

    model_config = {"from_attributes": True}
