from storefront.models.product import Product
from storefront.models.settings import StoreSetting
from storefront.models.order import Order, OrderStatus
from storefront.models.invoice import InvoiceRecord

__all__ = [
    "Product",
    "StoreSetting",
    "Order",
    "OrderStatus",
    "InvoiceRecord",
]
