from storefront.schemas.pricing import (
    ShippingConfig,
    ShippingLineItem,
    PriceBreakdown,
)
from storefront.schemas.cart import (
    CartLineItemBase,
    CartLineItem,
    CartItemCreate,
    CartItemUpdate,
    CartResponse,
)
from storefront.schemas.product import (
    Variant,
    ProductResponse,
    ProductList,
)
from storefront.schemas.order import (
    OrderSnapshot,
    OrderResponse,
    CheckoutResponse,
)
from storefront.schemas.settings import (
    StoreSettings,
    StoreSettingsUpdate,
)
from storefront.schemas.invoice import (
    InvoiceData,
    InvoiceLine,
)

__all__ = [
    "ShippingConfig",
    "ShippingLineItem",
    "PriceBreakdown",
    "CartLineItemBase",
    "CartLineItem",
    "CartItemCreate",
    "CartItemUpdate",
    "CartResponse",
    "Variant",
    "ProductResponse",
    "ProductList",
    "OrderSnapshot",
    "OrderResponse",
    "CheckoutResponse",
    "StoreSettings",
    "StoreSettingsUpdate",
    "InvoiceData",
    "InvoiceLine",
]
