"""Cart schemas"""
from pydantic import BaseModel, Field
from typing import Optional, List, Tuple
from storefront.schemas.pricing import PriceBreakdown

CartKey = Tuple[str, Optional[str]]


class CartLineItemBase(BaseModel):
    """
    Snapshot of a product taken when it is added to the cart.
    Name, image and prices are copied and never refreshed afterwards.
    """
    product_id: str
    variant_key: Optional[str] = None
    display_name: str
    image_url: str = ""
    unit_price: int
    unit_sale_price: Optional[int] = None
    per_unit_shipping_charge: Optional[int] = None
    available_stock: int

    model_config = {"frozen": True}

    @property
    def key(self) -> CartKey:
        return (self.product_id, self.variant_key)

    @property
    def effective_price(self) -> int:
        if self.unit_sale_price is not None:
            return self.unit_sale_price
        return self.unit_price


class CartLineItem(CartLineItemBase):
    quantity: int

    @property
    def line_total(self) -> int:
        return self.effective_price * self.quantity


class CartItemCreate(BaseModel):
    product_id: str
    variant_key: Optional[str] = None
    quantity: int = Field(default=1, ge=1)


class CartItemUpdate(BaseModel):
    """Zero or below removes the line; anything above stock is clamped"""
    product_id: str
    variant_key: Optional[str] = None
    quantity: int


class CartItemResponse(BaseModel):
    item: Optional[CartLineItem] = None
    warning: Optional[str] = None


class CartResponse(BaseModel):
    items: List[CartLineItem] = []
    total_items: int = 0
    breakdown: PriceBreakdown
    tax_disclaimer: str = ""
