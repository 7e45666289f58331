"""Domain exceptions raised by services and mapped to HTTP errors by the API layer"""


class StorefrontError(Exception):
    """Base class for storefront errors"""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ProductNotFoundError(StorefrontError):
    status_code = 404

    def __init__(self, product_id: str):
        super().__init__(f"Product {product_id} not found")
        self.product_id = product_id


class OrderNotFoundError(StorefrontError):
    status_code = 404

    def __init__(self, order_id: str):
        super().__init__(f"Order {order_id} not found")
        self.order_id = order_id


class EmptyCartError(StorefrontError):
    def __init__(self):
        super().__init__("Your cart is empty")
