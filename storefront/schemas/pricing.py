"""Pricing schemas"""
from pydantic import BaseModel
from typing import List


class ShippingConfig(BaseModel):
    """Store-wide shipping rules"""
    default_charge: int
    free_shipping_threshold: int
    tax_disclaimer_text: str = ""

    model_config = {"frozen": True}


class ShippingLineItem(BaseModel):
    item_name: str
    charge: int

    model_config = {"frozen": True}


class PriceBreakdown(BaseModel):
    """Totals derived from a cart; recomputed on every read, never stored on its own"""
    subtotal: int = 0
    shipping_total: int = 0
    shipping_line_items: List[ShippingLineItem] = []
    grand_total: int = 0

    model_config = {"frozen": True}
