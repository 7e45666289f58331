"""
WhatsApp checkout handoff.

The storefront has no payment flow: after an order is created the customer is
sent to a wa.me deep link with a pre-filled message. Delivery is not tracked.
"""
from urllib.parse import quote
from storefront.core.currency import format_currency

WHATSAPP_BASE_URL = "https://wa.me"


def build_order_url(frontend_url: str, order_id: str) -> str:
    """Public order page link"""
    return f"{frontend_url.rstrip('/')}/order/{order_id}"


def build_order_message(order_id: str, order_url: str, total: int, disclaimer: str, store_name: str) -> str:
    """Message sent to the store right after checkout"""
    return (
        f"Hi! I'd like to place an order from {store_name}:\n\n"
        f"Order ID: {order_id}\n"
        f"Order Details: {order_url}\n\n"
        f"Total: {format_currency(total)} ({disclaimer})\n\n"
        f"Please confirm availability!"
    )


def build_order_help_message(order_id: str, total: int) -> str:
    """Message for customers asking about an existing order"""
    return (
        f"Hi! I have a question about my order:\n\n"
        f"Order ID: {order_id}\n"
        f"Total: {format_currency(total)}\n\n"
        f"Please assist me."
    )


def build_whatsapp_url(number: str, message: str) -> str:
    """wa.me deep link with the message url-encoded"""
    digits = "".join(ch for ch in number if ch.isdigit())
    return f"{WHATSAPP_BASE_URL}/{digits}?text={quote(message, safe='')}"
